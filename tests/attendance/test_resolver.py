from __future__ import annotations

import threading
from datetime import date, datetime, time

import pytest

from lab_attendance.attendance.resolver import AttendanceResolver, pick_session
from lab_attendance.core.constants import UNASSIGNED_SYSTEM_NO
from lab_attendance.core.enums import ScanRejection, ScanState
from lab_attendance.core.exceptions import (
    AlreadyMarkedError,
    ConflictError,
    InvalidPayloadError,
    NoActiveSessionError,
    StudentNotFoundError,
)
from lab_attendance.students.importer import RosterImporter

DAY = date(2024, 1, 10)


@pytest.fixture
def resolver(students, sessions, attendance, roster_csv, fixed_now):
    RosterImporter(students).import_csv(roster_csv, uploaded_by=1)
    sessions.add("L1", "A", DAY, time(9, 0), time(10, 0))
    return AttendanceResolver(students, sessions, attendance, clock=lambda: fixed_now)


def test_scan_inside_window_then_repeat_then_after_window(resolver, attendance):
    result = resolver.resolve("EN001", operator_id=2, now=datetime(2024, 1, 10, 9, 30))

    assert result.name == "Asha Rao"
    assert result.lab_no == "L1"
    assert result.system_no == "PC-01"
    assert len(attendance.records()) == 1
    assert attendance.records()[0].scanned_by == 2

    with pytest.raises(AlreadyMarkedError) as exc:
        resolver.resolve("EN001", operator_id=2, now=datetime(2024, 1, 10, 9, 45))
    assert exc.value.reason == ScanRejection.ALREADY_MARKED
    assert len(attendance.records()) == 1

    with pytest.raises(NoActiveSessionError):
        resolver.resolve("EN002", operator_id=2, now=datetime(2024, 1, 10, 10, 30))
    assert len(attendance.records()) == 1


def test_clock_is_used_when_now_not_given(resolver, fixed_now):
    assert resolver.resolve("EN001", operator_id=None).scanned_at == fixed_now


def test_window_bounds_are_inclusive_to_the_minute(resolver):
    resolver.resolve("EN001", operator_id=None, now=datetime(2024, 1, 10, 9, 0, 0))
    # 10:00:45 still counts as 10:00
    resolver.resolve("EN002", operator_id=None, now=datetime(2024, 1, 10, 10, 0, 45))

    with pytest.raises(NoActiveSessionError):
        resolver.resolve("EN002", operator_id=None, now=datetime(2024, 1, 10, 8, 59, 59))


def test_session_on_other_date_does_not_match(resolver):
    with pytest.raises(NoActiveSessionError):
        resolver.resolve("EN001", operator_id=None, now=datetime(2024, 1, 11, 9, 30))


@pytest.mark.parametrize("payload", ["", "   ", None])
def test_empty_payload_is_invalid_format(resolver, payload):
    with pytest.raises(InvalidPayloadError) as exc:
        resolver.resolve(payload, operator_id=None)
    assert exc.value.reason == ScanRejection.INVALID_FORMAT


def test_payload_is_trimmed(resolver):
    assert resolver.resolve("  EN001\n", operator_id=None).enrollment == "EN001"


def test_unknown_student(resolver, attendance):
    with pytest.raises(StudentNotFoundError):
        resolver.resolve("EN999", operator_id=None)
    assert attendance.records() == []


def test_missing_system_no_uses_sentinel(resolver, attendance):
    result = resolver.resolve("EN002", operator_id=None)

    assert result.system_no == UNASSIGNED_SYSTEM_NO
    assert attendance.records()[0].system_no == UNASSIGNED_SYSTEM_NO


def test_overlapping_sessions_pick_earliest_start(resolver, sessions):
    late = sessions.add("L2", "B", DAY, time(9, 15), time(11, 0))
    early = sessions.add("L3", "B", DAY, time(8, 30), time(9, 45))

    result = resolver.resolve("EN001", operator_id=None, now=datetime(2024, 1, 10, 9, 30))

    assert result.session_id == early.session_id
    assert pick_session([late, early]) == early


def test_insert_conflict_reports_already_marked(students, sessions, fixed_now, roster_csv):
    class RacingAttendance:
        def get_for_student_and_session(self, *, student_id, session_id):
            return None

        def create(self, **kwargs):
            raise ConflictError("Duplicate entry")

    RosterImporter(students).import_csv(roster_csv, uploaded_by=1)
    sessions.add("L1", "A", DAY, time(9, 0), time(10, 0))
    resolver = AttendanceResolver(students, sessions, RacingAttendance(), clock=lambda: fixed_now)

    with pytest.raises(AlreadyMarkedError):
        resolver.resolve("EN001", operator_id=None)


def test_concurrent_scans_record_once(resolver, attendance):
    barrier = threading.Barrier(8)
    outcomes: list[str] = []
    lock = threading.Lock()

    def scan():
        barrier.wait()
        try:
            resolver.resolve("EN001", operator_id=None)
            outcome = "ok"
        except AlreadyMarkedError:
            outcome = "dup"
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=scan) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("dup") == 7
    assert len(attendance.records()) == 1


def test_states_are_reported_in_order(resolver):
    seen: list[ScanState] = []

    resolver.resolve("EN001", operator_id=None, on_state=seen.append)

    assert seen == [
        ScanState.NORMALIZING,
        ScanState.STUDENT_LOOKUP,
        ScanState.SESSION_LOOKUP,
        ScanState.DUPLICATE_CHECK,
        ScanState.INSERTING,
    ]
