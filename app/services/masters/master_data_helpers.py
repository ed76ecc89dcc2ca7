# app/services/masters/master_data_helpers.py

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from pydantic import BaseModel

from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity


def collect_changes(current, payload: BaseModel) -> tuple[dict, list[str]]:
    """Compare an update payload against the stored row.

    Returns the column values that actually differ and a readable
    change list for the activity log. Only fields the client sent are
    considered.
    """
    values: dict = {}
    changes: list[str] = []

    for field, new_value in payload.model_dump(exclude_unset=True, exclude={"version"}).items():
        old_value = getattr(current, field)
        if new_value != old_value:
            values[field] = new_value
            changes.append(f"{field}: '{old_value}' → '{new_value}'")

    return values, changes


async def reload(db: AsyncSession, model, obj_id: int):
    result = await db.execute(
        select(model)
        .where(model.id == obj_id)
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one()


async def versioned_update(
    db: AsyncSession,
    model,
    obj_id: int,
    version: int,
    values: dict,
    user,
) -> None:
    result = await db.execute(
        update(model)
        .where(
            model.id == obj_id,
            model.version == version,
            model.is_active.is_(True),
        )
        .values(
            **values,
            updated_by_id=user.id,
            version=model.version + 1,
        )
        .returning(model.id)
        .execution_options(synchronize_session=False)
    )

    if result.scalar_one_or_none() is None:
        raise AppException(
            409,
            f"{model.__name__} was modified by another process",
            ErrorCode.MASTER_DATA_VERSION_CONFLICT,
        )


async def log_master_data(db: AsyncSession, user, code: ActivityCode, entity: str, target_name: str, **extra):
    await emit_activity(
        db=db,
        actor=user,
        code=code,
        entity=entity,
        target_name=target_name,
        **extra,
    )
