# app/services/masters/equipment_size_service.py
#
# Container and truck sizes share one shape: unique name + optional unique
# code, numeric dimensions, display order and an active flag.

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_

from app.models.masters.equipment_size_models import ContainerSize, TruckSize
from app.models.enums.master_data_types import TruckType
from app.schemas.masters.equipment_size_schemas import (
    ContainerSizeCreate,
    ContainerSizeUpdate,
    ContainerSizeOut,
    ContainerSizeListData,
    TruckSizeCreate,
    TruckSizeUpdate,
    TruckSizeOut,
    TruckSizeListData,
)
from app.services.masters.master_data_helpers import (
    collect_changes,
    reload,
    versioned_update,
    log_master_data,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger(__name__)

_ENTITY = {
    ContainerSize: ("container size", ErrorCode.CONTAINER_SIZE_NOT_FOUND, ErrorCode.CONTAINER_SIZE_EXISTS),
    TruckSize: ("truck size", ErrorCode.TRUCK_SIZE_NOT_FOUND, ErrorCode.TRUCK_SIZE_EXISTS),
}


async def _get_active(db: AsyncSession, model, size_id: int):
    label, not_found, _ = _ENTITY[model]
    size = await db.get(model, size_id)
    if not size or not size.is_active:
        raise AppException(404, f"{label.capitalize()} not found", not_found)
    return size


async def _ensure_unique(db: AsyncSession, model, name: Optional[str], code: Optional[str], exclude_id: Optional[int] = None):
    label, _, exists_code = _ENTITY[model]

    clauses = []
    if name:
        clauses.append(func.lower(model.size_name) == name.lower())
    if code:
        clauses.append(func.lower(model.size_code) == code.lower())
    if not clauses:
        return

    stmt = select(model.id).where(or_(*clauses))
    if exclude_id is not None:
        stmt = stmt.where(model.id != exclude_id)

    if await db.scalar(stmt):
        raise AppException(409, f"{label.capitalize()} name or code already exists", exists_code)


async def _create(db: AsyncSession, model, payload, user):
    await _ensure_unique(db, model, payload.size_name, payload.size_code)

    size = model(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(size)
    await db.flush()

    await log_master_data(db, user, ActivityCode.CREATE_MASTER_DATA, _ENTITY[model][0], size.size_name)

    await db.commit()
    logger.info("Equipment size created", extra={"model": model.__tablename__, "size_id": size.id})
    return await reload(db, model, size.id)


async def _list(db: AsyncSession, model, include_inactive: bool, *conditions):
    conditions = list(conditions)
    if not include_inactive:
        conditions.append(model.is_active.is_(True))

    result = await db.execute(
        select(model)
        .where(*conditions)
        .order_by(model.display_order, model.size_name)
    )
    return result.unique().scalars().all()


async def _update(db: AsyncSession, model, size_id: int, payload, user):
    current = await _get_active(db, model, size_id)

    values, changes = collect_changes(current, payload)
    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    await _ensure_unique(db, model, values.get("size_name"), values.get("size_code"), exclude_id=size_id)
    await versioned_update(db, model, size_id, payload.version, values, user)

    await log_master_data(
        db, user, ActivityCode.UPDATE_MASTER_DATA, _ENTITY[model][0], current.size_name,
        changes=", ".join(changes),
    )

    await db.commit()
    return await reload(db, model, size_id)


async def _deactivate(db: AsyncSession, model, size_id: int, user):
    size = await _get_active(db, model, size_id)

    size.is_active = False
    size.updated_by_id = user.id
    size.version += 1

    await log_master_data(db, user, ActivityCode.DEACTIVATE_MASTER_DATA, _ENTITY[model][0], size.size_name)

    await db.commit()
    return await reload(db, model, size_id)


# =====================================================
# CONTAINER SIZES
# =====================================================

async def create_container_size(db: AsyncSession, payload: ContainerSizeCreate, user) -> ContainerSizeOut:
    return ContainerSizeOut.model_validate(await _create(db, ContainerSize, payload, user))


async def get_container_size(db: AsyncSession, size_id: int) -> ContainerSizeOut:
    return ContainerSizeOut.model_validate(await _get_active(db, ContainerSize, size_id))


async def list_container_sizes(db: AsyncSession, *, include_inactive: bool = False) -> ContainerSizeListData:
    rows = await _list(db, ContainerSize, include_inactive)
    return ContainerSizeListData(
        total=len(rows),
        items=[ContainerSizeOut.model_validate(r) for r in rows],
    )


async def update_container_size(db: AsyncSession, size_id: int, payload: ContainerSizeUpdate, user) -> ContainerSizeOut:
    return ContainerSizeOut.model_validate(await _update(db, ContainerSize, size_id, payload, user))


async def deactivate_container_size(db: AsyncSession, size_id: int, user) -> ContainerSizeOut:
    return ContainerSizeOut.model_validate(await _deactivate(db, ContainerSize, size_id, user))


# =====================================================
# TRUCK SIZES
# =====================================================

async def create_truck_size(db: AsyncSession, payload: TruckSizeCreate, user) -> TruckSizeOut:
    return TruckSizeOut.model_validate(await _create(db, TruckSize, payload, user))


async def get_truck_size(db: AsyncSession, size_id: int) -> TruckSizeOut:
    return TruckSizeOut.model_validate(await _get_active(db, TruckSize, size_id))


async def list_truck_sizes(
    db: AsyncSession,
    *,
    truck_type: Optional[TruckType] = None,
    include_inactive: bool = False,
) -> TruckSizeListData:
    conditions = [TruckSize.truck_type == truck_type] if truck_type else []
    rows = await _list(db, TruckSize, include_inactive, *conditions)
    return TruckSizeListData(
        total=len(rows),
        items=[TruckSizeOut.model_validate(r) for r in rows],
    )


async def update_truck_size(db: AsyncSession, size_id: int, payload: TruckSizeUpdate, user) -> TruckSizeOut:
    return TruckSizeOut.model_validate(await _update(db, TruckSize, size_id, payload, user))


async def deactivate_truck_size(db: AsyncSession, size_id: int, user) -> TruckSizeOut:
    return TruckSizeOut.model_validate(await _deactivate(db, TruckSize, size_id, user))
