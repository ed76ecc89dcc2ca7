# app/scripts/init_database.py
"""Create the core schema and seed roles, base permissions, the admin
account and a sample client.

Usage: python -m app.scripts.init_database
"""

import asyncio

from app.core.config import ADMIN_EMAIL, ADMIN_PASSWORD
from app.core.db import engine
from app.core.security import hash_password
from app.constants.permissions import (
    ADMIN_ROLE,
    BASE_ROLE_PERMISSIONS,
    DEFAULT_ROLES,
    flatten_grants,
)
from app.constants.seed_data import SAMPLE_CLIENT
from app.models import (
    User,
    RefreshToken,
    Role,
    RolePermission,
    UserActivity,
    Client,
    Quotation,
    QuotationItem,
    RequestForPayment,
    RfpParticular,
)
from app.scripts.migration_utils import create_tables, insert_ignore
from app.core.logging import setup_logging
from app.utils.logger import get_logger

logger = get_logger(__name__)

CORE_TABLES = [
    User.__table__,
    RefreshToken.__table__,
    Role.__table__,
    RolePermission.__table__,
    UserActivity.__table__,
    Client.__table__,
    Quotation.__table__,
    QuotationItem.__table__,
    RequestForPayment.__table__,
    RfpParticular.__table__,
]


async def run(bind_engine=engine) -> dict:
    async with bind_engine.begin() as conn:
        await create_tables(conn, CORE_TABLES)

        roles = await insert_ignore(
            conn,
            Role.__table__,
            (
                {"role_code": code, "role_name": name, "description": description, "is_active": True}
                for code, name, description in DEFAULT_ROLES
            ),
        )

        permissions = await insert_ignore(
            conn,
            RolePermission.__table__,
            (
                {"role_code": role_code, "module_id": module, "action": action, "is_granted": True}
                for role_code, module, action in flatten_grants(BASE_ROLE_PERMISSIONS)
            ),
        )

        users = await insert_ignore(
            conn,
            User.__table__,
            [
                {
                    "username": ADMIN_EMAIL.lower(),
                    "full_name": "System Administrator",
                    "password_hash": hash_password(ADMIN_PASSWORD),
                    "role": ADMIN_ROLE,
                    "department": "IT",
                    "is_active": True,
                }
            ],
        )

        clients = await insert_ignore(conn, Client.__table__, [dict(SAMPLE_CLIENT)])

    counts = {"roles": roles, "permissions": permissions, "users": users, "clients": clients}
    logger.info("Core database initialised", extra=counts)
    if users:
        logger.warning("Default admin account created; change its password", extra={"email": ADMIN_EMAIL})
    return counts


if __name__ == "__main__":
    setup_logging()
    asyncio.run(run())
