# app/routers/approvals/approval_matrix_router.py

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.enums.transaction_type import TransactionType
from app.schemas.approvals.approval_matrix_schemas import (
    ApprovalRuleIn,
    ApprovalRuleUpdate,
    ApprovalRuleOut,
    ApprovalRuleListData,
)
from app.services.approvals.approval_matrix_service import (
    list_rules,
    get_rule,
    resolve_rule,
    create_rule,
    update_rule,
    delete_rule,
)
from app.utils.check_roles import require_permission
from app.utils.response import APIResponse, success_response
from app.utils.logger import get_logger

router = APIRouter(prefix="/approval_matrix", tags=["Approval Matrix"])
logger = get_logger(__name__)


@router.get("", response_model=APIResponse[ApprovalRuleListData])
async def list_rules_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approval_matrix", "view")),
    transaction_type: Optional[TransactionType] = Query(None, alias="type"),
    include_inactive: bool = Query(False),
):
    data = await list_rules(db, transaction_type=transaction_type, include_inactive=include_inactive)
    return success_response("Approval rules fetched successfully", data)


@router.get("/resolve", response_model=APIResponse[ApprovalRuleOut])
async def resolve_rule_api(
    transaction_type: TransactionType = Query(..., alias="type"),
    amount: Decimal = Query(..., ge=0),
    department: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approval_matrix", "view")),
):
    data = await resolve_rule(db, transaction_type=transaction_type, amount=amount, department=department)
    return success_response("Approval rule resolved", data)


@router.get("/{rule_id}", response_model=APIResponse[ApprovalRuleOut])
async def get_rule_api(
    rule_id: int,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approval_matrix", "view")),
):
    return success_response("Approval rule fetched successfully", await get_rule(db, rule_id))


@router.post("", response_model=APIResponse[ApprovalRuleOut])
async def create_rule_api(
    payload: ApprovalRuleIn,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approval_matrix", "manage")),
):
    logger.info("Create approval rule", extra={"transaction_type": payload.transaction_type.value})
    return success_response("Approval rule created successfully", await create_rule(db, payload, user))


@router.put("/{rule_id}", response_model=APIResponse[ApprovalRuleOut])
async def update_rule_api(
    rule_id: int,
    payload: ApprovalRuleUpdate,
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approval_matrix", "manage")),
):
    logger.info("Update approval rule", extra={"rule_id": rule_id})
    return success_response("Approval rule updated successfully", await update_rule(db, rule_id, payload, user))


@router.delete("/{rule_id}", response_model=APIResponse)
async def delete_rule_api(
    rule_id: int,
    version: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    user=Depends(require_permission("approval_matrix", "manage")),
):
    logger.info("Delete approval rule", extra={"rule_id": rule_id})
    await delete_rule(db, rule_id, version, user)
    return success_response("Approval rule deleted successfully")
