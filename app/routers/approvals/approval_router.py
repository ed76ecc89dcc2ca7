from fastapi import APIRouter, Depends, Query
from typing import List, Optional, Union
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_type import TransactionType
from app.schemas.approvals.approval_schemas import (
    ApprovalDecisionRequest,
    ApprovalListData,
    ApprovalStats,
    ApprovalHistoryOut,
    ApprovalResult,
)
from app.schemas.transactions.quotation_schemas import QuotationOut
from app.schemas.transactions.rfp_schemas import RfpOut
from app.services.approvals.approval_service import (
    list_approvals,
    get_approval_stats,
    get_transaction_details,
    get_approval_history,
    decide,
)
from app.utils.check_roles import require_permission
from app.utils.get_user import get_current_user
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/approvals", tags=["Approvals"])
logger = get_logger(__name__)


@router.get("", response_model=APIResponse[ApprovalListData])
async def list_approvals_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approvals", "view")),
    status: Optional[str] = Query(None),
    transaction_type: Optional[str] = Query(None, alias="type"),
):
    data = await list_approvals(db, status=status, transaction_type=transaction_type)
    return success_response("Approvals fetched successfully", data)


@router.get("/stats", response_model=APIResponse[ApprovalStats])
async def approval_stats_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approvals", "view")),
):
    return success_response("Approval stats fetched", await get_approval_stats(db))


@router.get(
    "/{transaction_type}/{transaction_id}",
    response_model=APIResponse[Union[QuotationOut, RfpOut]],
)
async def approval_details_api(
    transaction_type: TransactionType,
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approvals", "view")),
):
    data = await get_transaction_details(db, transaction_type, transaction_id)
    return success_response("Transaction details fetched", data)


@router.get(
    "/{transaction_type}/{transaction_id}/history",
    response_model=APIResponse[List[ApprovalHistoryOut]],
)
async def approval_history_api(
    transaction_type: TransactionType,
    transaction_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approvals", "view")),
):
    data = await get_approval_history(db, transaction_type, transaction_id)
    return success_response("Approval history fetched", data)


# Approve / reject check permissions inside the workflow so that an
# administrator override can skip the normal approver rule.
@router.post(
    "/{transaction_type}/{transaction_id}/approve",
    response_model=APIResponse[ApprovalResult],
)
async def approve_api(
    transaction_type: TransactionType,
    transaction_id: int,
    payload: Optional[ApprovalDecisionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    payload = payload or ApprovalDecisionRequest()
    logger.info(
        "Approve request",
        extra={
            "transaction_type": transaction_type.value,
            "transaction_id": transaction_id,
            "is_override": payload.is_override,
        },
    )
    result = await decide(
        db,
        transaction_type=transaction_type,
        transaction_id=transaction_id,
        action=ApprovalAction.approved,
        actor=user,
        comments=payload.comments,
        is_override=payload.is_override,
        version=payload.version,
    )
    return success_response("Transaction approved", result)


@router.post(
    "/{transaction_type}/{transaction_id}/reject",
    response_model=APIResponse[ApprovalResult],
)
async def reject_api(
    transaction_type: TransactionType,
    transaction_id: int,
    payload: Optional[ApprovalDecisionRequest] = None,
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
):
    payload = payload or ApprovalDecisionRequest()
    logger.info(
        "Reject request",
        extra={
            "transaction_type": transaction_type.value,
            "transaction_id": transaction_id,
            "is_override": payload.is_override,
        },
    )
    result = await decide(
        db,
        transaction_type=transaction_type,
        transaction_id=transaction_id,
        action=ApprovalAction.rejected,
        actor=user,
        comments=payload.comments,
        is_override=payload.is_override,
        version=payload.version,
    )
    return success_response("Transaction rejected", result)
