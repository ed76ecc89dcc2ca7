# app/routers/masters/category_router.py

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.master_data_types import CategoryType
from app.schemas.masters.category_schemas import (
    CategoryCreate,
    CategoryUpdate,
    CategoryOut,
    CategoryListData,
)
from app.services.masters.category_service import (
    create_category,
    get_category,
    list_categories,
    update_category,
    deactivate_category,
)
from app.utils.check_roles import require_permission
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/categories", tags=["Categories"])
logger = get_logger(__name__)


@router.get("", response_model=APIResponse[CategoryListData])
async def list_categories_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
    category_type: Optional[CategoryType] = Query(None, alias="type"),
    include_inactive: bool = Query(False),
):
    data = await list_categories(db, category_type=category_type, include_inactive=include_inactive)
    return success_response("Categories fetched successfully", data)


@router.get("/{category_id}", response_model=APIResponse[CategoryOut])
async def get_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
):
    return success_response("Category fetched successfully", await get_category(db, category_id))


@router.post("", response_model=APIResponse[CategoryOut])
async def create_category_api(
    payload: CategoryCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "create")),
):
    logger.info("Create category", extra={"category_name": payload.category_name})
    return success_response("Category created successfully", await create_category(db, payload, user))


@router.patch("/{category_id}", response_model=APIResponse[CategoryOut])
async def update_category_api(
    category_id: int,
    payload: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "edit")),
):
    logger.info("Update category", extra={"category_id": category_id})
    return success_response("Category updated successfully", await update_category(db, category_id, payload, user))


@router.delete("/{category_id}", response_model=APIResponse[CategoryOut])
async def deactivate_category_api(
    category_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "delete")),
):
    logger.info("Deactivate category", extra={"category_id": category_id})
    return success_response("Category deactivated successfully", await deactivate_category(db, category_id, user))
