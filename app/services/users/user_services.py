from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, or_

from app.models.users.user_models import User
from app.schemas.users.user_schemas import (
    UserCreateSchema,
    UserUpdateSchema,
    UserListFilters,
    UserListItemSchema,
    UserDetailSchema,
)
from app.services.users.role_services import role_exists
from app.core.security import hash_password
from app.utils.activity_helpers import emit_activity
from app.constants.activity_codes import ActivityCode
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


async def _reload_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(
        select(User)
        .where(User.id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


# =========================
# CREATE USER
# =========================
async def create_user(db: AsyncSession, payload: UserCreateSchema, admin: User):
    if not await role_exists(db, payload.role):
        raise AppException(400, "Invalid role", ErrorCode.USER_ROLE_INVALID)

    exists = await db.scalar(select(User.id).where(User.username == payload.email))
    if exists:
        raise AppException(409, "User already exists", ErrorCode.USER_EMAIL_EXISTS)

    user = User(
        username=payload.email,
        full_name=payload.full_name,
        department=payload.department,
        password_hash=hash_password(payload.password),
        role=payload.role,
        created_by_admin_id=admin.id,
    )

    db.add(user)
    await db.flush()

    await emit_activity(
        db=db,
        actor=admin,
        code=ActivityCode.CREATE_USER,
        target_email=user.username,
        target_role=user.role.capitalize(),
    )

    await db.commit()

    logger.info("User created", extra={"user_id": user.id})
    return UserDetailSchema.model_validate(user)


# =========================
# LIST USERS
# =========================
async def list_users(
    db: AsyncSession,
    filters: UserListFilters,
) -> dict:
    base_stmt = select(User)

    # --------------------
    # Filters
    # --------------------
    if filters.search:
        pattern = f"%{filters.search}%"
        base_stmt = base_stmt.where(
            or_(User.username.ilike(pattern), User.full_name.ilike(pattern))
        )

    if filters.role:
        base_stmt = base_stmt.where(User.role == filters.role)

    if filters.is_active is not None:
        base_stmt = base_stmt.where(User.is_active == filters.is_active)

    total = await db.scalar(
        select(func.count()).select_from(base_stmt.subquery())
    )

    # --------------------
    # Sorting (safe)
    # --------------------
    sort_map = {
        "created_at": User.created_at,
        "username": User.username,
        "full_name": User.full_name,
    }

    sort_col = sort_map.get(filters.sort_by)
    if sort_col is None:
        raise AppException(400, "Invalid sort field", ErrorCode.VALIDATION_ERROR)

    sort_col = (
        sort_col.desc()
        if filters.sort_order.lower() == "desc"
        else sort_col.asc()
    )

    result = await db.execute(
        base_stmt
        .order_by(sort_col, User.id)
        .limit(filters.limit)
        .offset(filters.offset)
    )
    users = result.scalars().all()

    return {
        "items": [
            UserListItemSchema(
                id=u.id,
                username=u.username,
                full_name=u.full_name,
                role=u.role,
                department=u.department,
                status="active" if u.is_active else "inactive",
                is_online=u.is_online,
                last_login=u.last_login,
            )
            for u in users
        ],
        "total": total or 0,
    }


# =========================
# GET USER BY ID
# =========================
async def get_user_by_id(db: AsyncSession, user_id: int):
    user = await db.get(User, user_id)
    if not user:
        raise AppException(404, "User not found", ErrorCode.USER_NOT_FOUND)
    return UserDetailSchema.model_validate(user)


# =========================
# UPDATE USER
# =========================
async def update_user(
    db: AsyncSession,
    user_id: int,
    payload: UserUpdateSchema,
    admin: User,
):
    user = await db.get(User, user_id)
    if not user:
        raise AppException(404, "User not found", ErrorCode.USER_NOT_FOUND)

    values: dict = {}
    changes: list[str] = []

    if payload.email and payload.email != user.username:
        exists = await db.scalar(
            select(User.id).where(
                User.username == payload.email,
                User.id != user_id,
            )
        )
        if exists:
            raise AppException(409, "Email already in use", ErrorCode.USER_EMAIL_EXISTS)
        values["username"] = payload.email
        changes.append(f"email: '{user.username}' → '{payload.email}'")

    if payload.password:
        values["password_hash"] = hash_password(payload.password)
        # existing sessions must log in again
        values["token_version"] = User.token_version + 1
        changes.append("password reset")

    if payload.role and payload.role != user.role:
        if not await role_exists(db, payload.role):
            raise AppException(400, "Invalid role", ErrorCode.USER_ROLE_INVALID)
        values["role"] = payload.role
        values["token_version"] = User.token_version + 1
        changes.append(f"role: {user.role} → {payload.role}")

    if payload.full_name is not None and payload.full_name != user.full_name:
        values["full_name"] = payload.full_name
        changes.append("full name")

    if payload.department is not None and payload.department != user.department:
        values["department"] = payload.department
        changes.append("department")

    if not values:
        raise AppException(400, "No changes provided", ErrorCode.VALIDATION_ERROR)

    # -------------------------------------------------
    # OPTIMISTIC UPDATE
    # -------------------------------------------------
    result = await db.execute(
        update(User)
        .where(
            User.id == user_id,
            User.version == payload.version,
        )
        .values(**values, version=User.version + 1)
        .returning(User.id)
        .execution_options(synchronize_session=False)
    )

    if result.scalar_one_or_none() is None:
        raise AppException(
            409,
            "User was modified by another process",
            ErrorCode.USER_VERSION_CONFLICT,
        )

    await emit_activity(
        db=db,
        actor=admin,
        code=ActivityCode.UPDATE_USER,
        target_email=values.get("username", user.username),
        changes=", ".join(changes),
    )

    await db.commit()
    return UserDetailSchema.model_validate(await _reload_user(db, user_id))


# =========================
# ACTIVATE / DEACTIVATE
# =========================
async def _set_user_active(
    db: AsyncSession,
    user_id: int,
    version: int,
    admin: User,
    active: bool,
):
    if not active and user_id == admin.id:
        raise AppException(400, "You cannot deactivate your own account", ErrorCode.CANNOT_DEACTIVATE_SELF)

    user = await db.get(User, user_id)
    if not user:
        raise AppException(404, "User not found", ErrorCode.USER_NOT_FOUND)

    if user.is_active == active:
        raise AppException(
            409,
            "User already active" if active else "User already inactive",
            ErrorCode.USER_ALREADY_ACTIVE if active else ErrorCode.USER_ALREADY_INACTIVE,
        )

    values = {"is_active": active, "version": User.version + 1}
    if not active:
        values["token_version"] = User.token_version + 1
        values["is_online"] = False

    result = await db.execute(
        update(User)
        .where(User.id == user_id, User.version == version)
        .values(**values)
        .returning(User.id)
        .execution_options(synchronize_session=False)
    )

    if result.scalar_one_or_none() is None:
        logger.warning("User version conflict", extra={"target_user_id": user_id})
        raise AppException(
            409,
            "User was modified by another process",
            ErrorCode.USER_VERSION_CONFLICT,
        )

    await emit_activity(
        db,
        actor=admin,
        code=ActivityCode.REACTIVATE_USER if active else ActivityCode.DEACTIVATE_USER,
        target_email=user.username,
    )

    await db.commit()

    logger.info(
        "User reactivated" if active else "User deactivated",
        extra={"target_user_id": user_id, "actor_id": admin.id},
    )
    return UserDetailSchema.model_validate(await _reload_user(db, user_id))


async def deactivate_user(db: AsyncSession, user_id: int, version: int, admin: User):
    return await _set_user_active(db, user_id, version, admin, active=False)


async def reactivate_user(db: AsyncSession, user_id: int, version: int, admin: User):
    return await _set_user_active(db, user_id, version, admin, active=True)
