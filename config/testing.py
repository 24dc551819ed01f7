import os

from config import _csv

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

EXCLUDED_ROLE_KEYWORDS = _csv(os.getenv("EXCLUDED_ROLE_KEYWORDS", "dev"))

DEFAULT_BONUS_SETTINGS = {
    "start_date": "2025-04-01",
    "end_date": "2026-03-31",
    "amount_per_day": 35.0,
}
