from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .breaks.controller import register as register_breaks
from .common.http import register_error_handlers
from .container import Container, build_container
from .core.constants import DEFAULT_MINIMUM_VALID_HOURS
from .core.logging_config import setup_logging
from .database.bootstrap import apply_schema, list_tables
from .leave.controller import register as register_leave
from .payroll.controller import register as register_payroll
from .salary_history.controller import register as register_salary_history
from .users.controller import register as register_users
from .wifi.controller import register as register_wifi

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"), log_file=getattr(settings, "LOG_FILE", None))

    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(
            db_config=db_config,
            minimum_hours=float(getattr(settings, "MINIMUM_VALID_HOURS", DEFAULT_MINIMUM_VALID_HOURS)),
            leave_allowances=getattr(settings, "LEAVE_ALLOWANCES", None),
        )

    register_error_handlers(app)
    register_users(app, container)
    register_attendance(app, container)
    register_breaks(app, container)
    register_salary_history(app, container)
    register_payroll(app, container)
    register_wifi(app, container)
    register_leave(app, container)

    return app
