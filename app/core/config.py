# app/core/config.py

import os
from decimal import Decimal
from dotenv import load_dotenv
from app.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()

# =====================================================
# APPLICATION
# =====================================================
APP_ENV = os.getenv("APP_ENV")
if APP_ENV not in {"development", "staging", "production"}:
    raise ValueError("APP_ENV must be development | staging | production")

IS_PRODUCTION = APP_ENV == "production"

APP_NAME = "SBCLC – Freight Forwarding Back-Office API"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]

# =====================================================
# DATABASE
# =====================================================
DB_TYPE = os.getenv("DB_TYPE")
if DB_TYPE not in {"postgres", "sqlite"}:
    raise ValueError("DB_TYPE must be postgres | sqlite")

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres")

elif DB_TYPE == "sqlite":
    if IS_PRODUCTION:
        raise ValueError("SQLite is NOT allowed in production")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./sbclc.db")
    if not DATABASE_URL.startswith("sqlite+aiosqlite://"):
        raise ValueError("DATABASE_URL must use the sqlite+aiosqlite driver when DB_TYPE=sqlite")

# ---- Pool tuning (safe defaults) ----
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 10))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 20))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 30))
DB_ECHO_POOL = os.getenv("DB_ECHO_POOL", "false").lower() == "true"

# ---- SSL ----
DB_SSL_VERIFY = os.getenv("DB_SSL_VERIFY", "true").lower() == "true"
if IS_PRODUCTION and not DB_SSL_VERIFY:
    logger.warning("Running in production with relaxed SSL verification")

# =====================================================
# JWT / AUTH
# =====================================================
JWT_ACCESS_SECRET_KEY = os.getenv("JWT_ACCESS_SECRET_KEY")
if not JWT_ACCESS_SECRET_KEY:
    raise ValueError("JWT_ACCESS_SECRET_KEY must be set")

JWT_ALGORITHM = "HS256"

ACCESS_TOKEN_EXPIRE_MINUTES = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 480)
)
REFRESH_TOKEN_EXPIRE_DAYS = int(
    os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 7)
)

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@sbclc.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "password123")

# =====================================================
# APPROVALS
# =====================================================
# Roles allowed to use the admin override on approve / reject
OVERRIDE_ROLES = {
    r.strip().lower()
    for r in os.getenv("OVERRIDE_ROLES", "admin").split(",")
    if r.strip()
}

BASE_CURRENCY = os.getenv("BASE_CURRENCY", "PHP")

PRIORITY_HIGH_THRESHOLD = Decimal(os.getenv("PRIORITY_HIGH_THRESHOLD", "1000000"))
PRIORITY_MEDIUM_THRESHOLD = Decimal(os.getenv("PRIORITY_MEDIUM_THRESHOLD", "100000"))
if PRIORITY_MEDIUM_THRESHOLD > PRIORITY_HIGH_THRESHOLD:
    raise ValueError("PRIORITY_MEDIUM_THRESHOLD must not exceed PRIORITY_HIGH_THRESHOLD")
