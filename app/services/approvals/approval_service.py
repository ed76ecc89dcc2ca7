from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.approvals.approval_history_models import ApprovalHistory
from app.models.transactions.quotation_models import Quotation
from app.models.transactions.rfp_models import RequestForPayment
from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType
from app.schemas.approvals.approval_schemas import (
    ApprovalItem,
    ApprovalListData,
    ApprovalStats,
    ApprovalHistoryOut,
    ApprovalResult,
)
from app.services.workflow.approval_workflow import transition, DOCUMENTS
from app.services.transactions.quotation_service import get_quotation
from app.services.transactions.rfp_service import get_rfp
from app.core.config import (
    BASE_CURRENCY,
    PRIORITY_HIGH_THRESHOLD,
    PRIORITY_MEDIUM_THRESHOLD,
)
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.utils.priority import calculate_priority
from app.utils.logger import get_logger

logger = get_logger(__name__)


def parse_status_filter(status: Optional[str]) -> Optional[TransactionStatus]:
    if not status or status == "all":
        return None
    try:
        return TransactionStatus(status)
    except ValueError:
        raise AppException(
            400,
            "Invalid status filter",
            ErrorCode.VALIDATION_ERROR,
            {"allowed": ["all"] + [s.value for s in TransactionStatus]},
        )


def parse_type(value: Optional[str]) -> Optional[TransactionType]:
    if not value or value == "all":
        return None
    try:
        return TransactionType(value)
    except ValueError:
        raise AppException(
            400,
            "Invalid transaction type",
            ErrorCode.VALIDATION_ERROR,
            {"allowed": [t.value for t in TransactionType]},
        )


def _priority(amount, currency, exchange_rate) -> str:
    return calculate_priority(
        amount,
        currency,
        exchange_rate,
        base_currency=BASE_CURRENCY,
        high_threshold=PRIORITY_HIGH_THRESHOLD,
        medium_threshold=PRIORITY_MEDIUM_THRESHOLD,
    )


def _quotation_item(q: Quotation) -> ApprovalItem:
    return ApprovalItem(
        id=q.id,
        type=TransactionType.quotation,
        reference_no=q.quotation_number,
        client_name=q.client.client_name if q.client else None,
        amount=q.total_amount,
        currency=q.base_currency,
        exchange_rate=q.exchange_rate,
        submitted_by=q.submitted_by.display_name if q.submitted_by else None,
        submitted_date=q.submitted_at,
        status=q.status,
        priority=_priority(q.total_amount, q.base_currency, q.exchange_rate),
        booking_no=q.booking_no,
        description=q.service_description,
        version=q.version,
    )


def _rfp_item(r: RequestForPayment) -> ApprovalItem:
    description = r.notes
    if not description and r.particulars:
        description = r.particulars[0].description

    return ApprovalItem(
        id=r.id,
        type=TransactionType.rfp,
        reference_no=r.rfp_number,
        client_name=r.client.client_name if r.client else r.payee_name,
        amount=r.total_amount,
        currency=r.currency_code,
        exchange_rate=r.exchange_rate,
        submitted_by=r.submitted_by.display_name if r.submitted_by else None,
        submitted_date=r.submitted_at,
        status=r.status,
        priority=_priority(r.total_amount, r.currency_code, r.exchange_rate),
        booking_no=None,
        description=description,
        version=r.version,
    )


# =====================================================
# LIST
# =====================================================
async def list_approvals(
    db: AsyncSession,
    status: Optional[str] = None,
    transaction_type: Optional[str] = None,
) -> ApprovalListData:
    status_filter = parse_status_filter(status)
    type_filter = parse_type(transaction_type)

    items: list[ApprovalItem] = []

    if type_filter in (None, TransactionType.quotation):
        stmt = select(Quotation).where(Quotation.is_deleted.is_(False))
        if status_filter:
            stmt = stmt.where(Quotation.status == status_filter)
        result = await db.execute(stmt)
        items.extend(_quotation_item(q) for q in result.unique().scalars().all())

    if type_filter in (None, TransactionType.rfp):
        stmt = select(RequestForPayment).where(RequestForPayment.is_deleted.is_(False))
        if status_filter:
            stmt = stmt.where(RequestForPayment.status == status_filter)
        result = await db.execute(stmt)
        items.extend(_rfp_item(r) for r in result.unique().scalars().all())

    # most recently submitted first; never-submitted drafts last
    items.sort(
        key=lambda i: (i.submitted_date is not None, i.submitted_date.timestamp() if i.submitted_date else 0, i.id),
        reverse=True,
    )

    return ApprovalListData(total=len(items), items=items)


# =====================================================
# STATS
# =====================================================
async def get_approval_stats(db: AsyncSession) -> ApprovalStats:
    totals = {"total": 0, "pending_approvals": 0, "approved": 0, "rejected": 0}

    for model in (Quotation, RequestForPayment):
        row = (
            await db.execute(
                select(
                    func.count(model.id).label("total"),
                    func.count(model.id).filter(model.status == TransactionStatus.pending_approval).label("pending_approvals"),
                    func.count(model.id).filter(model.status == TransactionStatus.approved).label("approved"),
                    func.count(model.id).filter(model.status == TransactionStatus.rejected).label("rejected"),
                ).where(model.is_deleted.is_(False))
            )
        ).one()

        for key in totals:
            totals[key] += getattr(row, key) or 0

    return ApprovalStats(**totals)


# =====================================================
# DETAIL
# =====================================================
async def get_transaction_details(db: AsyncSession, transaction_type: TransactionType, transaction_id: int):
    if transaction_type == TransactionType.quotation:
        return await get_quotation(db, transaction_id)
    return await get_rfp(db, transaction_id)


# =====================================================
# HISTORY
# =====================================================
async def get_approval_history(
    db: AsyncSession,
    transaction_type: TransactionType,
    transaction_id: int,
) -> list[ApprovalHistoryOut]:
    model, _, label, not_found = DOCUMENTS[transaction_type]

    # soft-deleted documents keep their audit trail
    exists = await db.scalar(select(model.id).where(model.id == transaction_id))
    if not exists:
        raise AppException(404, f"{label.capitalize()} not found", not_found)

    result = await db.execute(
        select(ApprovalHistory)
        .where(
            ApprovalHistory.transaction_type == transaction_type,
            ApprovalHistory.transaction_id == transaction_id,
        )
        .order_by(ApprovalHistory.action_at.asc(), ApprovalHistory.approval_id.asc())
    )
    return [ApprovalHistoryOut.model_validate(h) for h in result.scalars().all()]


# =====================================================
# DECISIONS
# =====================================================
async def decide(
    db: AsyncSession,
    *,
    transaction_type: TransactionType,
    transaction_id: int,
    action: ApprovalAction,
    actor,
    comments: Optional[str] = None,
    is_override: bool = False,
    version: Optional[int] = None,
) -> ApprovalResult:
    document, entry = await transition(
        db,
        transaction_type=transaction_type,
        transaction_id=transaction_id,
        action=action,
        actor=actor,
        comments=comments,
        is_override=is_override,
        expected_version=version,
    )

    return ApprovalResult(
        id=document.id,
        type=transaction_type,
        reference_no=document.reference_no,
        status=document.status,
        version=document.version,
        history=ApprovalHistoryOut.model_validate(entry),
    )
