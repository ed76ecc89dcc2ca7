# app/routers/masters/client_router.py

from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.masters.client_schemas import (
    ClientCreate,
    ClientUpdate,
    ClientOut,
    ClientListData,
)
from app.services.masters.client_service import (
    create_client,
    get_client,
    list_clients,
    update_client,
    deactivate_client,
)
from app.utils.check_roles import require_permission
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/clients", tags=["Clients"])
logger = get_logger(__name__)


@router.post("", response_model=APIResponse[ClientOut])
async def create_client_api(
    payload: ClientCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "create")),
):
    logger.info("Create client", extra={"client_code": payload.client_code})
    client = await create_client(db, payload, user)
    return success_response("Client created successfully", client)


@router.get("", response_model=APIResponse[ClientListData])
async def list_clients_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
    search: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_clients(
        db,
        search=search,
        include_inactive=include_inactive,
        page=page,
        page_size=page_size,
    )
    return success_response("Clients fetched successfully", data)


@router.get("/{client_id}", response_model=APIResponse[ClientOut])
async def get_client_api(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "view")),
):
    return success_response("Client fetched successfully", await get_client(db, client_id))


@router.patch("/{client_id}", response_model=APIResponse[ClientOut])
async def update_client_api(
    client_id: int,
    payload: ClientUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "edit")),
):
    logger.info("Update client", extra={"client_id": client_id})
    client = await update_client(db, client_id, payload, user)
    return success_response("Client updated successfully", client)


@router.delete("/{client_id}", response_model=APIResponse[ClientOut])
async def deactivate_client_api(
    client_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("master_data", "delete")),
):
    logger.info("Deactivate client", extra={"client_id": client_id})
    client = await deactivate_client(db, client_id, user)
    return success_response("Client deactivated successfully", client)
