import os

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "workforce_pay"),
}

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None

MINIMUM_VALID_HOURS = float(os.getenv("MINIMUM_VALID_HOURS", "6"))
LEAVE_ALLOWANCES = {}

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
