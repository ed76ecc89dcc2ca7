from sqlalchemy.ext.asyncio import AsyncSession
from app.models.support.activity_models import UserActivity
from app.constants.activity_templates import ACTIVITY_TEMPLATES
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger(__name__)


def actor_context(user) -> dict:
    """Template fields that describe who acted."""
    return {
        "actor_role": user.role.capitalize(),
        "actor_email": user.username,
    }


async def emit_activity(
    db: AsyncSession,
    *,
    code: ActivityCode,
    actor=None,
    user_id: int | None = None,
    username: str | None = None,
    **context,
):
    """Queue a user_activity row on the session; the caller commits."""
    if actor is not None:
        user_id = actor.id
        username = actor.username
        context = {**actor_context(actor), **context}

    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        message = template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )

    db.add(
        UserActivity(
            user_id=user_id,
            username_snapshot=username or "system",
            message=message,
        )
    )
    logger.debug("Activity queued", extra={"activity_code": code.value, "user_id": user_id})
