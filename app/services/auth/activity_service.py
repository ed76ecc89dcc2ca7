# app/services/auth/activity_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc, asc

from app.models.support.activity_models import UserActivity
from app.schemas.auth.activity_schemas import (
    UserActivityOut,
    UserActivityFilters,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.logger import get_logger

logger = get_logger(__name__)

ALLOWED_SORT_FIELDS = {
    "created_at": UserActivity.created_at,
    "username": UserActivity.username_snapshot,
}


async def list_user_activities(
    *,
    db: AsyncSession,
    filters: UserActivityFilters,
):
    conditions = []

    if filters.user_id:
        conditions.append(UserActivity.user_id == filters.user_id)

    if filters.username:
        conditions.append(UserActivity.username_snapshot.ilike(f"%{filters.username}%"))

    if filters.search:
        conditions.append(UserActivity.message.ilike(f"%{filters.search}%"))

    sort_column = ALLOWED_SORT_FIELDS.get(filters.sort_by)
    if sort_column is None:
        raise AppException(
            400,
            "Invalid sort field",
            ErrorCode.VALIDATION_ERROR,
        )

    order_fn = desc if filters.sort_order == "desc" else asc
    offset = (filters.page - 1) * filters.page_size

    total = await db.scalar(select(func.count(UserActivity.id)).where(*conditions))
    result = await db.execute(
        select(UserActivity)
        .where(*conditions)
        .order_by(order_fn(sort_column), order_fn(UserActivity.id))
        .limit(filters.page_size)
        .offset(offset)
    )
    activities = result.scalars().all()

    logger.info(
        "User activities fetched",
        extra={
            "total": total,
            "page": filters.page,
            "page_size": filters.page_size,
        },
    )

    return {
        "total": total or 0,
        "items": [UserActivityOut.model_validate(a) for a in activities],
    }
