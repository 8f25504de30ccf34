"""Apply the HRMS schema and (optionally) create the bootstrap hr_admin account.

Usage: APP_ENV=production ADMIN_EMAIL=hr@example.com python scripts/init_db.py
"""
from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv

from config import get_settings_module
from hrms.database.bootstrap import apply_schema, ensure_admin_user, list_tables
from hrms.main import SCHEMA_PATH

logger = logging.getLogger("hrms.init_db")


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=SCHEMA_PATH)
    if settings.ADMIN_EMAIL:
        ensure_admin_user(db_config, email=settings.ADMIN_EMAIL, password=settings.ADMIN_PASSWORD)

    tables = list_tables(db_config)
    logger.info(
        "Applied schema.sql -> %s@%s:%s/%s (tables=%d)",
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
        len(tables),
    )


if __name__ == "__main__":
    main()
