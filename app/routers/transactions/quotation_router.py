from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.transaction_status import TransactionStatus
from app.schemas.transactions.quotation_schemas import (
    QuotationCreate,
    QuotationUpdate,
    QuotationOut,
    QuotationItemOut,
    QuotationListData,
    QuotationStats,
    TransitionRequest,
)
from app.services.transactions.quotation_service import (
    create_quotation,
    get_quotation,
    get_quotation_items,
    list_quotations,
    get_quotation_stats,
    update_quotation,
    delete_quotation,
    restore_quotation,
    submit_quotation,
    cancel_quotation,
    revise_quotation,
)
from app.utils.check_roles import require_permission
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/quotations", tags=["Quotations"])
logger = get_logger(__name__)


@router.post("", response_model=APIResponse[QuotationOut])
async def create_quotation_api(
    payload: QuotationCreate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "create")),
):
    logger.info("Create quotation", extra={"client_id": payload.client_id})
    return success_response("Quotation created successfully", await create_quotation(db, payload, user))


@router.get("", response_model=APIResponse[QuotationListData])
async def list_quotations_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
    client_id: Optional[int] = Query(None),
    status: Optional[TransactionStatus] = Query(None),
    search: Optional[str] = Query(None),
    include_deleted: bool = Query(False),
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    sort_by: str = Query("created_at"),
    order: str = Query("desc", pattern="^(asc|desc)$"),
):
    data = await list_quotations(
        db,
        client_id=client_id,
        status=status,
        search=search,
        include_deleted=include_deleted,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        order=order,
    )
    return success_response("Quotations fetched successfully", data)


@router.get("/stats", response_model=APIResponse[QuotationStats])
async def quotation_stats_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
):
    return success_response("Quotation stats fetched", await get_quotation_stats(db))


@router.get("/{quotation_id}", response_model=APIResponse[QuotationOut])
async def get_quotation_api(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
):
    return success_response("Quotation fetched successfully", await get_quotation(db, quotation_id))


@router.get("/{quotation_id}/items", response_model=APIResponse[List[QuotationItemOut]])
async def get_quotation_items_api(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
):
    return success_response("Quotation items fetched", await get_quotation_items(db, quotation_id))


@router.patch("/{quotation_id}", response_model=APIResponse[QuotationOut])
async def update_quotation_api(
    quotation_id: int,
    payload: QuotationUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "edit")),
):
    logger.info("Update quotation", extra={"quotation_id": quotation_id})
    return success_response("Quotation updated successfully", await update_quotation(db, quotation_id, payload, user))


@router.delete("/{quotation_id}", response_model=APIResponse[QuotationOut])
async def delete_quotation_api(
    quotation_id: int,
    version: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "delete")),
):
    logger.info("Delete quotation", extra={"quotation_id": quotation_id})
    return success_response("Quotation deleted successfully", await delete_quotation(db, quotation_id, version, user))


@router.post("/{quotation_id}/restore", response_model=APIResponse[QuotationOut])
async def restore_quotation_api(
    quotation_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "delete")),
):
    logger.info("Restore quotation", extra={"quotation_id": quotation_id})
    return success_response("Quotation restored successfully", await restore_quotation(db, quotation_id, user))


# =====================================================
# WORKFLOW (permission checked per action by the workflow)
# =====================================================

@router.post("/{quotation_id}/submit", response_model=APIResponse[QuotationOut])
async def submit_quotation_api(
    quotation_id: int,
    payload: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
):
    payload = payload or TransitionRequest()
    q = await submit_quotation(db, quotation_id, user, payload.comments, payload.version)
    return success_response("Quotation submitted for approval", q)


@router.post("/{quotation_id}/cancel", response_model=APIResponse[QuotationOut])
async def cancel_quotation_api(
    quotation_id: int,
    payload: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
):
    payload = payload or TransitionRequest()
    q = await cancel_quotation(db, quotation_id, user, payload.comments, payload.version)
    return success_response("Approval request cancelled", q)


@router.post("/{quotation_id}/revise", response_model=APIResponse[QuotationOut])
async def revise_quotation_api(
    quotation_id: int,
    payload: Optional[TransitionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("quotations", "view")),
):
    payload = payload or TransitionRequest()
    q = await revise_quotation(db, quotation_id, user, payload.comments, payload.version)
    return success_response("Quotation reopened for revision", q)
