from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .absences.controller import register as register_absences
from .break_types.controller import register as register_break_types
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_REPORT_MAX_DAYS, DEFAULT_UTC_OFFSET_MINUTES
from .database.bootstrap import apply_schema, list_tables
from .database.connection import DBConfig
from .employees.controller import register as register_employees
from .holidays.controller import register as register_holidays
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .time_entries.controller import register as register_time_entries
from .vacation.controller import register as register_vacation
from .weekly_schedules.controller import register as register_weekly_schedules

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
        logger.info("Starting with settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
            apply_schema(db_config, schema_path=schema_path)
            logger.info("Schema ready (%d tables)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            default_utc_offset_minutes=int(getattr(settings, "DEFAULT_UTC_OFFSET_MINUTES", DEFAULT_UTC_OFFSET_MINUTES)),
            report_max_days=int(getattr(settings, "REPORT_MAX_DAYS", DEFAULT_REPORT_MAX_DAYS)),
        )

    register_error_handlers(app)
    register_employees(app, container)
    register_schedules(app, container)
    register_weekly_schedules(app, container)
    register_break_types(app, container)
    register_time_entries(app, container)
    register_absences(app, container)
    register_vacation(app, container)
    register_holidays(app, container)
    register_reports(app, container)

    return app
