from __future__ import annotations

import pytest

from lab_attendance.core.exceptions import DuplicateEnrollmentError, RosterValidationError, ValidationError
from lab_attendance.students.importer import RosterImporter, parse_roster_csv, validate_row

HEADER = "roll,name,enrollment,email,phone,sem,college,section,system_no\n"


def test_import_inserts_all_rows_and_returns_preview(students):
    text = HEADER + "".join(f"{i},Student {i},EN{i:03d},s{i}@college.edu,,5,ABC,A,PC-{i:02d}\n" for i in range(1, 8))

    result = RosterImporter(students).import_csv(text, uploaded_by=1)

    assert result.inserted == 7
    assert [s.enrollment for s in result.preview] == ["EN001", "EN002", "EN003", "EN004", "EN005"]
    assert len(students.list_all()) == 7
    assert students.get_by_enrollment("EN003").uploaded_by == 1


def test_optional_fields_blank_become_none(students):
    text = HEADER + "7,Ravi,EN007,,,,,,\n"

    RosterImporter(students).import_csv(text, uploaded_by=None)

    s = students.get_by_enrollment("EN007")
    assert s.email is None and s.system_no is None and s.section is None


def test_bom_whitespace_and_blank_lines_are_tolerated(students):
    text = "\ufeff" + HEADER + "\n 1 , Asha Rao ,EN001,,,,,,\n\n\n2,Bilal,EN002,,,,,,\n"

    result = RosterImporter(students).import_csv(text, uploaded_by=1)

    assert result.inserted == 2
    assert students.get_by_enrollment("EN001").name == "Asha Rao"


def test_row_of_bare_commas_is_validated(students):
    text = HEADER + "1,Asha,EN001,,,,,,\n,,,,,,,,\n"

    with pytest.raises(RosterValidationError) as exc:
        RosterImporter(students).import_csv(text, uploaded_by=1)

    assert exc.value.errors == ["Row 3: Roll number required"]


def test_cells_longer_than_columns_are_reported_per_row(students):
    text = HEADER + f"1,Asha,{'E' * 65},,,,,,\n2,Bilal,EN002,,,,,,{'P' * 33}\n3,Chen,EN003,,,,,,PC-03\n"

    with pytest.raises(RosterValidationError) as exc:
        RosterImporter(students).import_csv(text, uploaded_by=1)

    assert exc.value.errors == [
        "Row 2: enrollment must be at most 64 characters",
        "Row 3: system_no must be at most 32 characters",
    ]
    assert students.list_all() == []


def test_empty_csv_is_rejected(students):
    with pytest.raises(ValidationError, match="CSV file is empty"):
        RosterImporter(students).import_csv(HEADER, uploaded_by=1)


def test_validation_errors_name_the_file_row_and_insert_nothing(students):
    text = HEADER + "1,Asha,EN001,,,,,,\n,Bilal,EN002,,,,,,\n3,Chen,EN003,not-an-email,,,,,\n"

    with pytest.raises(RosterValidationError) as exc:
        RosterImporter(students).import_csv(text, uploaded_by=1)

    assert exc.value.errors == ["Row 3: Roll number required", "Row 4: Invalid email"]
    assert students.list_all() == []


def test_only_first_missing_field_is_reported_per_row():
    with pytest.raises(ValidationError, match="Name required"):
        validate_row({"roll": "1", "name": " ", "enrollment": ""})


def test_error_message_shows_first_five_errors(students):
    text = HEADER + "".join(f"{i},,EN{i:03d},,,,,,\n" for i in range(1, 9))

    with pytest.raises(RosterValidationError) as exc:
        RosterImporter(students).import_csv(text, uploaded_by=1)

    assert len(exc.value.errors) == 8
    lines = str(exc.value).splitlines()
    assert lines[0] == "Validation errors:"
    assert lines[1:] == [f"Row {i + 1}: Name required" for i in range(1, 6)]


def test_duplicate_enrollment_within_file_is_a_validation_error(students):
    text = HEADER + "1,Asha,EN001,,,,,,\n2,Bilal,EN001,,,,,,\n"

    with pytest.raises(RosterValidationError) as exc:
        RosterImporter(students).import_csv(text, uploaded_by=1)

    assert exc.value.errors == ["Row 3: Duplicate enrollment EN001 (also in row 2)"]
    assert students.list_all() == []


def test_reimport_with_existing_enrollment_inserts_nothing(students):
    importer = RosterImporter(students)
    importer.import_csv(HEADER + "1,Asha,EN001,,,,,,\n", uploaded_by=1)

    text = HEADER + "2,Bilal,EN002,,,,,,\n3,Asha Again,EN001,,,,,,\n"
    with pytest.raises(DuplicateEnrollmentError, match="already exist"):
        importer.import_csv(text, uploaded_by=1)

    assert [s.enrollment for s in students.list_all()] == ["EN001"]


def test_template_round_trips_through_parser():
    rows = parse_roster_csv(RosterImporter.template_csv())

    assert list(rows[0].keys()) == ["roll", "name", "enrollment", "email", "phone", "sem", "college", "section", "system_no"]
    assert len(rows) == 3
    for row in rows:
        validate_row(row)
