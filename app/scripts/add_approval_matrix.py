# app/scripts/add_approval_matrix.py
"""Add the approval_matrix and approval_levels tables and their permissions.

Run after add_approval_history. Usage: python -m app.scripts.add_approval_matrix
"""

import asyncio

from app.core.db import engine
from app.constants.permissions import APPROVAL_MATRIX_PERMISSIONS
from app.models import ApprovalRule, ApprovalLevel, RolePermission
from app.scripts.migration_utils import create_tables, insert_ignore
from app.core.logging import setup_logging
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def run(bind_engine=engine) -> dict:
    async with bind_engine.begin() as conn:
        await create_tables(conn, [ApprovalRule.__table__, ApprovalLevel.__table__])

        permissions = await insert_ignore(
            conn,
            RolePermission.__table__,
            (
                {"role_code": role_code, "module_id": module, "action": action, "is_granted": True}
                for role_code, module, action in APPROVAL_MATRIX_PERMISSIONS
            ),
        )

    counts = {"permissions": permissions}
    logger.info("Approval matrix migration complete", extra=counts)
    return counts


if __name__ == "__main__":
    setup_logging()
    asyncio.run(run())
