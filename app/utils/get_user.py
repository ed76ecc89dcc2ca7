from typing import Optional

from fastapi import Depends, HTTPException, Header, status, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.security import bearer_token, decode_access_token
from app.models.users.user_models import User
from app.utils.logger import get_logger

logger = get_logger("auth.guard")


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user.

    The token must carry the user's current `token_version`; anything
    issued before a logout or role change is refused with 401.
    """
    payload = decode_access_token(bearer_token(authorization))

    user = await db.get(User, int(payload["sub"]))

    if not user:
        logger.warning("Token user not found", extra={"user_id": payload["sub"]})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    if not user.is_active:
        logger.warning("Inactive user access blocked", extra={"user_id": user.id})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    if user.token_version != payload.get("token_version"):
        logger.warning("Token version mismatch", extra={"user_id": user.id})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")

    request.state.user = user
    return user
