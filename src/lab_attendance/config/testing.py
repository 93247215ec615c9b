import os

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "lab_attendance_test"),
}

SMTP_CONFIG = {
    "host": "localhost",
    "port": 465,
    "user": "",
    "password": "",
    "sender_name": "Lab Attendance",
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

SCAN_REPEAT_COOLDOWN = 2.0
CAMERA_INDEX = 0

AUTO_INIT_DB = False
AUTO_SEED_DB = False
