"""Settings shared by every environment; overridden per module below."""
import os

from hrms.core.constants import (
    DEFAULT_DB_CONNECT_TIMEOUT,
    DEFAULT_TOKEN_TTL_MINUTES,
    FULL_DAY_HOURS,
    HALF_DAY_HOURS,
)


def _flag(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


SECRET_KEY = os.getenv("SECRET_KEY", "hrms-dev-secret")
JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
TOKEN_TTL_MINUTES = int(os.getenv("TOKEN_TTL_MINUTES", str(DEFAULT_TOKEN_TTL_MINUTES)))

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_db"),
    "connect_timeout": int(os.getenv("DB_CONNECT_TIMEOUT", str(DEFAULT_DB_CONNECT_TIMEOUT))),
}

HALF_DAY_HOURS = float(os.getenv("HALF_DAY_HOURS", str(HALF_DAY_HOURS)))
FULL_DAY_HOURS = float(os.getenv("FULL_DAY_HOURS", str(FULL_DAY_HOURS)))

DEBUG = _flag("DEBUG", "0")
TESTING = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# If enabled, the app applies schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = _flag("AUTO_INIT_DB", "0")
# Bootstrap hr_admin account, created/reset when AUTO_INIT_DB runs
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
