# app/scripts/create_admin.py
"""Create (or re-activate) an administrator account.

Usage: python -m app.scripts.create_admin [email]
"""

import asyncio
import sys

from sqlalchemy import select

from app.core.config import ADMIN_EMAIL, ADMIN_PASSWORD
from app.core.db import AsyncSessionLocal
from app.core.security import hash_password
from app.constants.permissions import ADMIN_ROLE
from app.models.users.user_models import User
from app.core.logging import setup_logging
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def create_admin(email: str = ADMIN_EMAIL, password: str = ADMIN_PASSWORD, session_factory=AsyncSessionLocal) -> User:
    email = email.strip().lower()

    async with session_factory() as session:
        admin = await session.scalar(select(User).where(User.username == email))

        if admin:
            admin.role = ADMIN_ROLE
            admin.is_active = True
            admin.token_version += 1
            admin.version += 1
            logger.info("Existing user promoted to admin", extra={"email": email})
        else:
            admin = User(
                username=email,
                full_name="System Administrator",
                password_hash=hash_password(password),
                role=ADMIN_ROLE,
                is_active=True,
            )
            session.add(admin)
            logger.info("Admin user created", extra={"email": email})

        await session.commit()
        return admin


if __name__ == "__main__":
    setup_logging()
    asyncio.run(create_admin(*sys.argv[1:2]))
