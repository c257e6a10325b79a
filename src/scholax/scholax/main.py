from __future__ import annotations

import atexit
import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.http import register_error_handlers
from .common.logging_setup import configure_logging
from .container import Container, build_container
from .core.settings import Settings
from .database.bootstrap import apply_schema, ensure_admin_account, list_tables
from .students.controller import register as register_students
from .teachers.controller import register as register_teachers
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"


def load_settings() -> Settings:
    settings_module = get_settings_module()
    return Settings.from_module(importlib.import_module(settings_module))


def _prepare_database(settings: Settings) -> None:
    db_config = settings.db_config
    if settings.auto_init_db:
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if settings.auto_seed_db:
        if settings.admin_email:
            ensure_admin_account(db_config, settings.admin_email)
        else:
            logger.warning("AUTO_SEED_DB is set but ADMIN_EMAIL is empty; no admin seeded")


def create_app(container: Optional[Container] = None, settings: Optional[Settings] = None) -> Flask:
    """Application factory.

    With no ``container`` the MySQL-backed one is built from the selected
    ``config.*`` module; tests pass a container wired over in-memory repositories.
    """
    load_dotenv(override=False)
    settings = settings or (container.settings if container else load_settings())

    configure_logging(level=settings.log_level, log_file=settings.log_file)

    app = Flask(__name__)
    app.secret_key = settings.secret_key
    app.config["DEBUG"] = settings.debug
    # Oversized uploads are rejected with 413 before the body is read.
    app.config["MAX_CONTENT_LENGTH"] = settings.import_max_upload_bytes

    if container is None:
        db = settings.db_config
        logger.info(
            "Starting ScholaX db=%s@%s:%s/%s",
            db.get("user"),
            db.get("host"),
            db.get("port", 3306),
            db.get("database"),
        )
        _prepare_database(settings)
        container = build_container(settings=settings)
        container.conn.open()
        atexit.register(container.conn.close)

    register_error_handlers(app)
    register_users(app, container)
    register_students(app, container)
    register_teachers(app, container)
    register_attendance(app, container)

    return app
