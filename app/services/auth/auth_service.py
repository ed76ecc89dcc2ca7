from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from app.models.users.user_models import User, RefreshToken
from app.core.security import verify_password, create_access_token, new_refresh_token
from app.services.users.role_services import get_permission_map
from app.utils.activity_helpers import emit_activity
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger("auth.service")


def _issue_refresh_token(user: User) -> RefreshToken:
    value, expires_at = new_refresh_token()
    return RefreshToken(user_id=user.id, token=value, expires_at=expires_at)


# =====================================================
# LOGIN
# =====================================================
async def login_user(db: AsyncSession, email: str, password: str):
    logger.info("Authenticating user", extra={"email": email})

    result = await db.execute(
        select(User).where(User.username == email)
    )
    user = result.scalars().first()

    if not user or not verify_password(password, user.password_hash):
        logger.warning("Invalid credentials", extra={"email": email})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not user.is_active:
        logger.warning("Inactive user login blocked", extra={"email": email})
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    user.last_login = datetime.now(timezone.utc)
    user.is_online = True

    access_token = create_access_token(user)
    refresh_token = _issue_refresh_token(user)
    db.add(refresh_token)

    await emit_activity(
        db=db,
        actor=user,
        code=ActivityCode.LOGIN,
    )

    await db.commit()

    logger.info("Login successful", extra={"user_id": user.id})

    return {
        "auth": {
            "access_token": access_token,
            "refresh_token": refresh_token.token,
            "token_type": "bearer",
        },
        "user": {
            "id": user.id,
            "username": user.username,
            "full_name": user.full_name,
            "role": user.role,
            "permissions": await get_permission_map(db, user.role),
        },
    }


# =====================================================
# REFRESH
# =====================================================
async def refresh_tokens(db: AsyncSession, refresh_token_value: str):
    logger.info("Refreshing token")

    result = await db.execute(
        select(RefreshToken).where(
            RefreshToken.token == refresh_token_value,
            RefreshToken.revoked.is_(False),
            RefreshToken.expires_at > datetime.now(timezone.utc),
        )
    )
    token = result.scalars().first()

    if not token:
        logger.warning("Invalid refresh token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token",
        )

    user = await db.get(User, token.user_id)
    if not user or not user.is_active:
        logger.warning("Refresh blocked for inactive user", extra={"user_id": token.user_id})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User invalid or inactive",
        )

    # rotate: a refresh token is single use
    token.revoked = True
    new_token = _issue_refresh_token(user)
    db.add(new_token)

    access_token = create_access_token(user)

    await db.commit()

    logger.info("Token refreshed", extra={"user_id": user.id})

    return {
        "access_token": access_token,
        "refresh_token": new_token.token,
        "token_type": "bearer",
        "role": user.role,
    }


# =====================================================
# LOGOUT
# =====================================================
async def logout_user(db: AsyncSession, user: User):
    logger.info("Logging out user", extra={"user_id": user.id})

    user.token_version += 1
    user.is_online = False

    await db.execute(
        update(RefreshToken)
        .where(RefreshToken.user_id == user.id)
        .values(revoked=True)
    )

    await emit_activity(
        db=db,
        actor=user,
        code=ActivityCode.LOGOUT,
    )

    await db.commit()

    logger.info("Logout successful", extra={"user_id": user.id})


# =====================================================
# ME
# =====================================================
async def get_me(db: AsyncSession, user: User) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "full_name": user.full_name,
        "role": user.role,
        "department": user.department,
        "permissions": await get_permission_map(db, user.role),
    }
