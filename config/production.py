import os

from config import _csv

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "payroll_db"),
}

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

EXCLUDED_ROLE_KEYWORDS = _csv(os.getenv("EXCLUDED_ROLE_KEYWORDS", "dev"))

DEFAULT_BONUS_SETTINGS = {
    "start_date": os.getenv("BONUS_START_DATE", "2025-04-01"),
    "end_date": os.getenv("BONUS_END_DATE", "2026-03-31"),
    "amount_per_day": float(os.getenv("BONUS_AMOUNT_PER_DAY", "35")),
}
