from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.constants.permissions import ADMIN_ROLE
from app.core.db import get_db
from app.models.users.role_models import Role, RolePermission
from app.models.users.user_models import User
from app.utils.get_user import get_current_user


def require_role(roles: list[str]):
    async def role_checker(user: User = Depends(get_current_user)):
        if user.role.lower() not in [r.lower() for r in roles]:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Permission denied"
            )
        return user
    return role_checker


async def has_permission(db: AsyncSession, user: User, module: str, action: str) -> bool:
    if user.role.lower() == ADMIN_ROLE:
        return True

    granted = await db.scalar(
        select(RolePermission.id)
        .join(Role, Role.role_code == RolePermission.role_code)
        .where(
            RolePermission.role_code == user.role,
            RolePermission.module_id == module,
            RolePermission.action == action,
            RolePermission.is_granted.is_(True),
            Role.is_active.is_(True),
        )
    )
    return granted is not None


def require_permission(module: str, action: str):
    async def permission_checker(
        user: User = Depends(get_current_user),
        db: AsyncSession = Depends(get_db),
    ):
        if not await has_permission(db, user, module, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {module}.{action}"
            )
        return user
    return permission_checker
