from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from .config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.datetime_utils import Clock
from .container import build_container, roster_from_dicts
from .core.enums import StorageBackend
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def create_app(settings_module: str | None = None, *, clock: Clock | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    backend = str(getattr(settings, "STORAGE_BACKEND", StorageBackend.MYSQL.value))
    db_config = getattr(settings, "DB_CONFIG", None)

    if app.config["DEBUG"]:
        target = (
            f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
            if backend == StorageBackend.MYSQL.value and db_config
            else backend
        )
        print("[shift-attendance] settings=", settings_module, " storage=", target)

    if backend == StorageBackend.MYSQL.value and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        backend=backend,
        utc_offset_minutes=int(getattr(settings, "UTC_OFFSET_MINUTES", 300)),
        week_start=int(getattr(settings, "WEEK_START", 0)),
        break_policy=str(getattr(settings, "BREAK_POLICY", "paid")),
        roster=roster_from_dicts(getattr(settings, "ROSTER", ())),
        clock=clock,
    )
    app.extensions["shift_attendance"] = container

    register_attendance(app, container)

    return app
