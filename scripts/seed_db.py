from __future__ import annotations

import argparse
import importlib
import os

from dotenv import load_dotenv

from lab_attendance.config import get_settings_module
from lab_attendance.database.bootstrap import ensure_admin
from lab_attendance.database.connection import DBConfig, DatabaseConnection


def main() -> None:
    load_dotenv(override=False)
    parser = argparse.ArgumentParser(description="Create or reset the admin operator")
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL", "admin@lab.local"))
    parser.add_argument("--password", default=os.getenv("ADMIN_PASSWORD", "admin123"))
    parser.add_argument("--name", default="Admin")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    ensure_admin(conn, email=args.email.strip().lower(), password=args.password, full_name=args.name)
    print(
        f"OK: Admin {args.email} ready -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
