from fastapi import APIRouter, Depends, Query
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.transaction_status import TransactionStatus
from app.schemas.transactions.quotation_schemas import TransitionRequest
from app.schemas.transactions.rfp_schemas import (
    RfpCreate,
    RfpUpdate,
    RfpOut,
    RfpListData,
)
from app.services.transactions.rfp_service import (
    create_rfp,
    get_rfp,
    list_rfps,
    update_rfp,
    delete_rfp,
    submit_rfp,
    cancel_rfp,
    revise_rfp,
)
from app.utils.check_roles import require_permission
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/rfps", tags=["Requests for Payment"])
logger = get_logger(__name__)


@router.post("", response_model=APIResponse[RfpOut])
async def create_rfp_api(
    payload: RfpCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "create")),
):
    logger.info("Create RFP", extra={"payee_name": payload.payee_name})
    return success_response("RFP created successfully", await create_rfp(db, payload, user))


@router.get("", response_model=APIResponse[RfpListData])
async def list_rfps_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "view")),
    status: Optional[TransactionStatus] = Query(None),
    search: Optional[str] = Query(None),
    include_deleted: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
):
    data = await list_rfps(
        db,
        status=status,
        search=search,
        include_deleted=include_deleted,
        page=page,
        page_size=page_size,
    )
    return success_response("RFPs fetched successfully", data)


@router.get("/{rfp_id}", response_model=APIResponse[RfpOut])
async def get_rfp_api(
    rfp_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "view")),
):
    return success_response("RFP fetched successfully", await get_rfp(db, rfp_id))


@router.patch("/{rfp_id}", response_model=APIResponse[RfpOut])
async def update_rfp_api(
    rfp_id: int,
    payload: RfpUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "edit")),
):
    logger.info("Update RFP", extra={"rfp_id": rfp_id})
    return success_response("RFP updated successfully", await update_rfp(db, rfp_id, payload, user))


@router.delete("/{rfp_id}", response_model=APIResponse[RfpOut])
async def delete_rfp_api(
    rfp_id: int,
    version: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "delete")),
):
    logger.info("Delete RFP", extra={"rfp_id": rfp_id})
    return success_response("RFP deleted successfully", await delete_rfp(db, rfp_id, version, user))


@router.post("/{rfp_id}/submit", response_model=APIResponse[RfpOut])
async def submit_rfp_api(
    rfp_id: int,
    payload: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "view")),
):
    payload = payload or TransitionRequest()
    return success_response("RFP submitted for approval", await submit_rfp(db, rfp_id, user, payload.comments, payload.version))


@router.post("/{rfp_id}/cancel", response_model=APIResponse[RfpOut])
async def cancel_rfp_api(
    rfp_id: int,
    payload: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "view")),
):
    payload = payload or TransitionRequest()
    return success_response("Approval request cancelled", await cancel_rfp(db, rfp_id, user, payload.comments, payload.version))


@router.post("/{rfp_id}/revise", response_model=APIResponse[RfpOut])
async def revise_rfp_api(
    rfp_id: int,
    payload: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("rfp", "view")),
):
    payload = payload or TransitionRequest()
    return success_response("RFP reopened for revision", await revise_rfp(db, rfp_id, user, payload.comments, payload.version))
