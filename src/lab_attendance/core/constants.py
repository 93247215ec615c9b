"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

UNASSIGNED_SYSTEM_NO = "Not assigned"
IMPORT_PREVIEW_ROWS = 5
IMPORT_MAX_REPORTED_ERRORS = 5
DEFAULT_SCAN_REPEAT_COOLDOWN = 2.0
MIN_PASSWORD_LENGTH = 6
# secrets.token_urlsafe bytes for reset passwords (12 characters)
TEMP_PASSWORD_BYTES = 9

ROSTER_COLUMNS = ("roll", "name", "enrollment", "email", "phone", "sem", "college", "section", "system_no")
EXPORT_COLUMNS = ("Name", "Roll", "Enrollment", "Section", "Lab", "Date", "Time", "SystemNo")

# Column widths in schema.sql
ROSTER_FIELD_MAX_LENGTHS = {
    "roll": 32,
    "name": 120,
    "enrollment": 64,
    "email": 190,
    "phone": 32,
    "sem": 16,
    "college": 190,
    "section": 32,
    "system_no": 32,
}
SESSION_LAB_NO_MAX_LENGTH = 32
SESSION_SECTION_MAX_LENGTH = 32
OPERATOR_NAME_MAX_LENGTH = 120
OPERATOR_EMAIL_MAX_LENGTH = 190
