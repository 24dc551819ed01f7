from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .bonus.controller import register as register_bonus
from .container import Container, build_container
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_employees, list_tables
from .deductions.controller import register as register_deductions
from .loans.controller import register as register_loans
from .payroll.controller import register as register_payroll
from .scoring.controller import register as register_reports
from .timesheets.controller import register as register_timesheets

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Passing a ready container skips all database setup (used by the API tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"), format=LOG_FORMAT)

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    db_config = getattr(settings, "DB_CONFIG")

    if container is None:
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        root = Path(__file__).resolve().parents[3]
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=root / "database" / "schema.sql")
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            seed_path = root / "database" / "seed.sql"
            if seed_path.exists():
                apply_seed_sql(db_config, seed_path=seed_path)
            ensure_demo_employees(db_config)
            logger.info("demo employees ready")

        container = build_container(
            db_config=db_config,
            default_bonus_settings=getattr(settings, "DEFAULT_BONUS_SETTINGS"),
            excluded_role_keywords=getattr(settings, "EXCLUDED_ROLE_KEYWORDS"),
        )

    register_timesheets(app, container)
    register_bonus(app, container)
    register_loans(app, container)
    register_deductions(app, container)
    register_payroll(app, container)
    register_reports(app, container)

    return app
