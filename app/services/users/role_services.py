from collections import defaultdict

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.users.role_models import Role, RolePermission
from app.models.users.user_models import User
from app.models.approvals.approval_matrix_models import ApprovalLevel
from app.schemas.users.role_schemas import (
    RoleCreate,
    RoleUpdate,
    RoleOut,
    PermissionMap,
)
from app.constants.permissions import PERMISSION_CATALOG, ADMIN_ROLE, is_known_permission
from app.utils.activity_helpers import emit_activity
from app.constants.activity_codes import ActivityCode
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


def _validate_permission_map(permissions: PermissionMap) -> list[tuple[str, str]]:
    pairs = []
    unknown = []
    for module, actions in permissions.items():
        for action in actions:
            if is_known_permission(module, action):
                pairs.append((module, action))
            else:
                unknown.append(f"{module}.{action}")

    if unknown:
        raise AppException(
            400,
            "Unknown permissions",
            ErrorCode.VALIDATION_ERROR,
            {"unknown": unknown},
        )

    return sorted(set(pairs))


async def get_permission_map(db: AsyncSession, role_code: str) -> PermissionMap:
    if role_code == ADMIN_ROLE:
        return {module: list(actions) for module, actions in PERMISSION_CATALOG.items()}

    result = await db.execute(
        select(RolePermission.module_id, RolePermission.action)
        .where(
            RolePermission.role_code == role_code,
            RolePermission.is_granted.is_(True),
        )
        .order_by(RolePermission.module_id, RolePermission.action)
    )

    grouped: dict[str, list[str]] = defaultdict(list)
    for module_id, action in result.all():
        grouped[module_id].append(action)
    return dict(grouped)


async def _get_role(db: AsyncSession, role_code: str) -> Role:
    role = await db.scalar(select(Role).where(Role.role_code == role_code))
    if not role:
        raise AppException(404, "Role not found", ErrorCode.ROLE_NOT_FOUND)
    return role


async def _map_role(db: AsyncSession, role: Role) -> RoleOut:
    user_count = await db.scalar(
        select(func.count(User.id)).where(User.role == role.role_code)
    )
    return RoleOut(
        id=role.id,
        role_code=role.role_code,
        role_name=role.role_name,
        description=role.description,
        is_active=role.is_active,
        user_count=user_count or 0,
        permissions=await get_permission_map(db, role.role_code),
        created_at=role.created_at,
    )


async def role_exists(db: AsyncSession, role_code: str) -> bool:
    found = await db.scalar(
        select(Role.id).where(Role.role_code == role_code, Role.is_active.is_(True))
    )
    return found is not None


# =========================
# LIST / GET
# =========================
async def list_roles(db: AsyncSession) -> list[RoleOut]:
    result = await db.execute(select(Role).order_by(Role.id))
    return [await _map_role(db, r) for r in result.scalars().all()]


async def get_role(db: AsyncSession, role_code: str) -> RoleOut:
    return await _map_role(db, await _get_role(db, role_code))


# =========================
# CREATE
# =========================
async def create_role(db: AsyncSession, payload: RoleCreate, admin: User) -> RoleOut:
    exists = await db.scalar(
        select(Role.id).where(
            (Role.role_code == payload.role_code) | (Role.role_name == payload.role_name)
        )
    )
    if exists:
        raise AppException(409, "Role already exists", ErrorCode.ROLE_CODE_EXISTS)

    pairs = _validate_permission_map(payload.permissions)

    role = Role(
        role_code=payload.role_code,
        role_name=payload.role_name,
        description=payload.description,
    )
    db.add(role)
    await db.flush()

    db.add_all([
        RolePermission(role_code=role.role_code, module_id=module, action=action)
        for module, action in pairs
    ])

    await emit_activity(
        db=db,
        actor=admin,
        code=ActivityCode.CREATE_ROLE,
        target_name=role.role_code,
    )

    await db.commit()
    logger.info("Role created", extra={"role_code": role.role_code})
    return await _map_role(db, role)


# =========================
# UPDATE
# =========================
async def update_role(db: AsyncSession, role_code: str, payload: RoleUpdate, admin: User) -> RoleOut:
    role = await _get_role(db, role_code)

    changes: list[str] = []

    if payload.role_name is not None and payload.role_name != role.role_name:
        taken = await db.scalar(
            select(Role.id).where(Role.role_name == payload.role_name, Role.id != role.id)
        )
        if taken:
            raise AppException(409, "Role name already in use", ErrorCode.ROLE_CODE_EXISTS)
        changes.append(f"name: '{role.role_name}' → '{payload.role_name}'")
        role.role_name = payload.role_name

    if payload.description is not None and payload.description != role.description:
        changes.append("description")
        role.description = payload.description

    if payload.is_active is not None and payload.is_active != role.is_active:
        if role.role_code == ADMIN_ROLE and not payload.is_active:
            raise AppException(400, "The admin role cannot be deactivated", ErrorCode.VALIDATION_ERROR)
        changes.append("activated" if payload.is_active else "deactivated")
        role.is_active = payload.is_active

    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    await emit_activity(
        db=db,
        actor=admin,
        code=ActivityCode.UPDATE_ROLE,
        target_name=role.role_code,
        changes=", ".join(changes),
    )

    await db.commit()
    return await _map_role(db, role)


# =========================
# DELETE
# =========================
async def delete_role(db: AsyncSession, role_code: str, admin: User) -> None:
    role = await _get_role(db, role_code)

    if role.role_code == ADMIN_ROLE:
        raise AppException(400, "The admin role cannot be deleted", ErrorCode.VALIDATION_ERROR)

    in_use = await db.scalar(select(func.count(User.id)).where(User.role == role.role_code))
    if in_use:
        raise AppException(
            409,
            "Role is assigned to users",
            ErrorCode.ROLE_IN_USE,
            {"user_count": in_use},
        )

    rule_count = await db.scalar(
        select(func.count(func.distinct(ApprovalLevel.rule_id))).where(ApprovalLevel.role == role.role_code)
    )
    if rule_count:
        raise AppException(
            409,
            "Role is an approver in the approval matrix",
            ErrorCode.ROLE_IN_USE,
            {"approval_rule_count": rule_count},
        )

    await db.execute(delete(RolePermission).where(RolePermission.role_code == role.role_code))
    await db.delete(role)

    await emit_activity(
        db=db,
        actor=admin,
        code=ActivityCode.DELETE_ROLE,
        target_name=role_code,
    )

    await db.commit()
    logger.info("Role deleted", extra={"role_code": role_code})


# =========================
# PERMISSIONS
# =========================
async def replace_role_permissions(
    db: AsyncSession,
    role_code: str,
    permissions: PermissionMap,
    admin: User,
) -> PermissionMap:
    role = await _get_role(db, role_code)
    pairs = _validate_permission_map(permissions)

    await db.execute(delete(RolePermission).where(RolePermission.role_code == role.role_code))
    db.add_all([
        RolePermission(role_code=role.role_code, module_id=module, action=action)
        for module, action in pairs
    ])

    await emit_activity(
        db=db,
        actor=admin,
        code=ActivityCode.UPDATE_ROLE_PERMISSIONS,
        target_name=role.role_code,
        count=len(pairs),
    )

    await db.commit()
    return await get_permission_map(db, role.role_code)
