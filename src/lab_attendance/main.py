from __future__ import annotations

import importlib
import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module
from .core.exceptions import DomainError
from .common.web import error_response
from .database.bootstrap import apply_schema, ensure_admin, list_tables
from .database.connection import DBConfig, DatabaseConnection

from .container import Container, build_container
from .attendance.controller import register as register_attendance
from .sessions.controller import register as register_sessions
from .students.controller import register as register_students
from .users.controller import register as register_users

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["SCAN_REPEAT_COOLDOWN"] = float(getattr(settings, "SCAN_REPEAT_COOLDOWN", 2.0))
    app.config["CAMERA_INDEX"] = int(getattr(settings, "CAMERA_INDEX", 0))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module, db_config.get("user"), db_config.get("host"),
        db_config.get("port", 3306), db_config.get("database"),
    )

    if container is None:
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(conn, schema_path=SCHEMA_PATH)
            app.logger.info("schema ready (tables=%d)", len(list_tables(conn)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_admin(
                conn,
                email=os.getenv("ADMIN_EMAIL", "admin@lab.local"),
                password=os.getenv("ADMIN_PASSWORD", "admin123"),
            )

        smtp_config = getattr(settings, "SMTP_CONFIG", None)
        container = build_container(db_config=db_config, smtp_config=smtp_config)

    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        return error_response(e)

    register_users(app, container)
    register_students(app, container)
    register_sessions(app, container)
    register_attendance(app, container)

    return app
