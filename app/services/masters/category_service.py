# app/services/masters/category_service.py

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from app.models.masters.category_models import Category
from app.models.enums.master_data_types import CategoryType
from app.schemas.masters.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryListData,
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


def _map_category(c: Category) -> CategoryOut:
    return CategoryOut(
        id=c.id,
        category_name=c.category_name,
        category_type=c.category_type,
        parent_category_id=c.parent_category_id,
        description=c.description,
        display_order=c.display_order,
        is_active=c.is_active,
        version=c.version,
        created_by_name=c.created_by_username,
        updated_by_name=c.updated_by_username,
        created_at=c.created_at,
        updated_at=c.updated_at,
    )


async def _get_active_category(db: AsyncSession, category_id: int) -> Category:
    category = await db.get(Category, category_id)
    if not category or not category.is_active:
        raise AppException(404, "Category not found", ErrorCode.CATEGORY_NOT_FOUND)
    return category


async def _ensure_name_free(db: AsyncSession, name: str, exclude_id: Optional[int] = None):
    stmt = select(Category.id).where(func.lower(Category.category_name) == name.lower())
    if exclude_id is not None:
        stmt = stmt.where(Category.id != exclude_id)
    if await db.scalar(stmt):
        raise AppException(409, "Category name already exists", ErrorCode.CATEGORY_NAME_EXISTS)


async def _ensure_parent(db: AsyncSession, parent_id: Optional[int], self_id: Optional[int] = None):
    if parent_id is None:
        return
    if parent_id == self_id:
        raise AppException(400, "A category cannot be its own parent", ErrorCode.VALIDATION_ERROR)
    await _get_active_category(db, parent_id)


async def create_category(db: AsyncSession, payload: CategoryCreate, user) -> CategoryOut:
    await _ensure_name_free(db, payload.category_name)
    await _ensure_parent(db, payload.parent_category_id)

    category = Category(
        **payload.model_dump(),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(category)
    await db.flush()

    await log_master_data(db, user, ActivityCode.CREATE_MASTER_DATA, "category", category.category_name)

    await db.commit()
    logger.info("Category created", extra={"category_id": category.id})
    return _map_category(await reload(db, Category, category.id))


async def get_category(db: AsyncSession, category_id: int) -> CategoryOut:
    return _map_category(await _get_active_category(db, category_id))


async def list_categories(
    db: AsyncSession,
    *,
    category_type: Optional[CategoryType] = None,
    include_inactive: bool = False,
) -> CategoryListData:
    conditions = []
    if not include_inactive:
        conditions.append(Category.is_active.is_(True))
    if category_type:
        conditions.append(Category.category_type == category_type)

    result = await db.execute(
        select(Category)
        .where(*conditions)
        .order_by(Category.category_type, Category.display_order, Category.category_name)
    )
    items = [_map_category(c) for c in result.unique().scalars().all()]
    return CategoryListData(total=len(items), items=items)


async def update_category(db: AsyncSession, category_id: int, payload: CategoryUpdate, user) -> CategoryOut:
    current = await _get_active_category(db, category_id)

    values, changes = collect_changes(current, payload)
    if not changes:
        raise AppException(400, "No changes detected", ErrorCode.VALIDATION_ERROR)

    if "category_name" in values:
        await _ensure_name_free(db, values["category_name"], exclude_id=category_id)
    if "parent_category_id" in values:
        await _ensure_parent(db, values["parent_category_id"], self_id=category_id)

    await versioned_update(db, Category, category_id, payload.version, values, user)

    await log_master_data(
        db, user, ActivityCode.UPDATE_MASTER_DATA, "category", current.category_name,
        changes=", ".join(changes),
    )

    await db.commit()
    return _map_category(await reload(db, Category, category_id))


async def deactivate_category(db: AsyncSession, category_id: int, user) -> CategoryOut:
    category = await _get_active_category(db, category_id)

    category.is_active = False
    category.updated_by_id = user.id
    category.version += 1

    await log_master_data(db, user, ActivityCode.DEACTIVATE_MASTER_DATA, "category", category.category_name)

    await db.commit()
    return _map_category(await reload(db, Category, category_id))
