# app/routers/masters/equipment_size_router.py

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
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
from app.services.masters import equipment_size_service as svc
from app.utils.check_roles import require_permission
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

container_router = APIRouter(prefix="/container-sizes", tags=["Container Sizes"])
truck_router = APIRouter(prefix="/truck-sizes", tags=["Truck Sizes"])
logger = get_logger(__name__)


# =====================================================
# CONTAINER SIZES
# =====================================================

@container_router.get("", response_model=APIResponse[ContainerSizeListData])
async def list_container_sizes_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
    include_inactive: bool = Query(False),
):
    data = await svc.list_container_sizes(db, include_inactive=include_inactive)
    return success_response("Container sizes fetched successfully", data)


@container_router.get("/{size_id}", response_model=APIResponse[ContainerSizeOut])
async def get_container_size_api(
    size_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
):
    return success_response("Container size fetched successfully", await svc.get_container_size(db, size_id))


@container_router.post("", response_model=APIResponse[ContainerSizeOut])
async def create_container_size_api(
    payload: ContainerSizeCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "create")),
):
    logger.info("Create container size", extra={"size_name": payload.size_name})
    return success_response("Container size created successfully", await svc.create_container_size(db, payload, user))


@container_router.patch("/{size_id}", response_model=APIResponse[ContainerSizeOut])
async def update_container_size_api(
    size_id: int,
    payload: ContainerSizeUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "edit")),
):
    logger.info("Update container size", extra={"size_id": size_id})
    return success_response("Container size updated successfully", await svc.update_container_size(db, size_id, payload, user))


@container_router.delete("/{size_id}", response_model=APIResponse[ContainerSizeOut])
async def deactivate_container_size_api(
    size_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "delete")),
):
    logger.info("Deactivate container size", extra={"size_id": size_id})
    return success_response("Container size deactivated successfully", await svc.deactivate_container_size(db, size_id, user))


# =====================================================
# TRUCK SIZES
# =====================================================

@truck_router.get("", response_model=APIResponse[TruckSizeListData])
async def list_truck_sizes_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
    truck_type: Optional[TruckType] = Query(None, alias="type"),
    include_inactive: bool = Query(False),
):
    data = await svc.list_truck_sizes(db, truck_type=truck_type, include_inactive=include_inactive)
    return success_response("Truck sizes fetched successfully", data)


@truck_router.get("/{size_id}", response_model=APIResponse[TruckSizeOut])
async def get_truck_size_api(
    size_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
):
    return success_response("Truck size fetched successfully", await svc.get_truck_size(db, size_id))


@truck_router.post("", response_model=APIResponse[TruckSizeOut])
async def create_truck_size_api(
    payload: TruckSizeCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "create")),
):
    logger.info("Create truck size", extra={"size_name": payload.size_name})
    return success_response("Truck size created successfully", await svc.create_truck_size(db, payload, user))


@truck_router.patch("/{size_id}", response_model=APIResponse[TruckSizeOut])
async def update_truck_size_api(
    size_id: int,
    payload: TruckSizeUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "edit")),
):
    logger.info("Update truck size", extra={"size_id": size_id})
    return success_response("Truck size updated successfully", await svc.update_truck_size(db, size_id, payload, user))


@truck_router.delete("/{size_id}", response_model=APIResponse[TruckSizeOut])
async def deactivate_truck_size_api(
    size_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "delete")),
):
    logger.info("Deactivate truck size", extra={"size_id": size_id})
    return success_response("Truck size deactivated successfully", await svc.deactivate_truck_size(db, size_id, user))
