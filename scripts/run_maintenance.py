"""Promote due salary changes and expire stale break requests.

Meant to be run by an external scheduler (e.g. daily cron); the service itself
runs no background jobs.
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.workforce_pay.workforce_pay.container import build_container
from src.workforce_pay.workforce_pay.core.constants import DEFAULT_MINIMUM_VALID_HOURS
from src.workforce_pay.workforce_pay.core.logging_config import setup_logging

logger = logging.getLogger("run_maintenance")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        minimum_hours=float(getattr(settings, "MINIMUM_VALID_HOURS", DEFAULT_MINIMUM_VALID_HOURS)),
        leave_allowances=getattr(settings, "LEAVE_ALLOWANCES", None),
    )

    applied = container.salary_history_service.apply_due_changes()
    expired = container.break_service.reject_expired()
    logger.info("Maintenance done: %d salary change(s) applied, %d break request(s) expired", applied, expired)


if __name__ == "__main__":
    main()
