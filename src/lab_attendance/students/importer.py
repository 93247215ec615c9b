from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import is_valid_email, optional_text, require_max_length
from ..core.constants import IMPORT_MAX_REPORTED_ERRORS, IMPORT_PREVIEW_ROWS, ROSTER_COLUMNS, ROSTER_FIELD_MAX_LENGTHS
from ..core.exceptions import ConflictError, DuplicateEnrollmentError, RosterValidationError, ValidationError
from .model import NewStudent
from .repository import StudentRepository

logger = logging.getLogger(__name__)

# Required columns and their messages, checked in this order.
_REQUIRED = (
    ("roll", "Roll number required"),
    ("name", "Name required"),
    ("enrollment", "Enrollment required"),
)

_TEMPLATE_ROWS = (
    ("101", "John Doe", "EN2023001", "john.doe@college.edu", "9876543210", "5", "ABC Engineering College", "A", "PC-01"),
    ("102", "Jane Smith", "EN2023002", "jane.smith@college.edu", "9876543211", "5", "ABC Engineering College", "A", "PC-02"),
    ("103", "Mike Johnson", "EN2023003", "mike.j@college.edu", "9876543212", "5", "ABC Engineering College", "B", "PC-03"),
)


@dataclass(frozen=True)
class ImportResult:
    inserted: int
    preview: list[NewStudent]


def parse_roster_csv(text: str) -> list[dict]:
    """Parse CSV text into one dict per data row.

    The first non-empty line is the header. Empty lines are skipped; a line of
    bare delimiters is kept as a data row and fails validation.
    """

    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text))
    header: Optional[list[str]] = None
    rows: list[dict] = []
    for cells in reader:
        if not cells:
            continue
        if header is None:
            header = [c.strip() for c in cells]
            continue
        row = {}
        for i, name in enumerate(header):
            if name:
                row[name] = cells[i].strip() if i < len(cells) else ""
        rows.append(row)
    return rows


def validate_row(row: dict) -> NewStudent:
    """Validate one roster row, raising ValidationError for the first bad field."""

    for field_name, message in _REQUIRED:
        if not (row.get(field_name) or "").strip():
            raise ValidationError(message)

    email = optional_text(row.get("email"))
    if email is not None and not is_valid_email(email):
        raise ValidationError("Invalid email")

    for field_name in ROSTER_COLUMNS:
        require_max_length((row.get(field_name) or "").strip(), field_name, ROSTER_FIELD_MAX_LENGTHS[field_name])

    return NewStudent(
        roll=row["roll"].strip(),
        name=row["name"].strip(),
        enrollment=row["enrollment"].strip(),
        email=email,
        phone=optional_text(row.get("phone")),
        sem=optional_text(row.get("sem")),
        college=optional_text(row.get("college")),
        section=optional_text(row.get("section")),
        system_no=optional_text(row.get("system_no")),
    )


class RosterImporter:
    """Use case: bulk-import a student roster from CSV.

    All rows are validated before anything is written; the insert is a single
    batch, so an import either lands completely or not at all.
    """

    def __init__(self, students: StudentRepository):
        self._students = students

    def validate(self, rows: Sequence[dict]) -> list[NewStudent]:
        if not rows:
            raise ValidationError("CSV file is empty")

        validated: list[NewStudent] = []
        errors: list[str] = []
        seen: dict[str, int] = {}

        for i, row in enumerate(rows):
            # Data row i sits below the header, so it is line i + 2 of the file.
            line_no = i + 2
            try:
                student = validate_row(row)
            except ValidationError as e:
                errors.append(f"Row {line_no}: {e}")
                continue

            first = seen.get(student.enrollment)
            if first is not None:
                errors.append(f"Row {line_no}: Duplicate enrollment {student.enrollment} (also in row {first})")
                continue

            seen[student.enrollment] = line_no
            validated.append(student)

        if errors:
            raise RosterValidationError(errors, shown=IMPORT_MAX_REPORTED_ERRORS)
        return validated

    def import_rows(self, rows: Sequence[dict], *, uploaded_by: Optional[int]) -> ImportResult:
        validated = self.validate(rows)

        try:
            inserted = self._students.insert_batch(validated, uploaded_by=uploaded_by)
        except ConflictError as e:
            logger.info("Roster import rejected, duplicate enrollment: %s", e)
            raise DuplicateEnrollmentError("Some enrollment numbers already exist") from e

        logger.info("Imported %d students (uploaded_by=%s)", inserted, uploaded_by)
        return ImportResult(inserted=inserted, preview=validated[:IMPORT_PREVIEW_ROWS])

    def import_csv(self, text: str, *, uploaded_by: Optional[int]) -> ImportResult:
        return self.import_rows(parse_roster_csv(text), uploaded_by=uploaded_by)

    @staticmethod
    def template_csv() -> str:
        out = io.StringIO()
        writer = csv.writer(out, lineterminator="\n")
        writer.writerow(ROSTER_COLUMNS)
        writer.writerows(_TEMPLATE_ROWS)
        return out.getvalue()
