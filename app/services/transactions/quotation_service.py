from decimal import Decimal
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, asc, desc, case

from app.models.transactions.quotation_models import Quotation, QuotationItem
from app.models.masters.client_models import Client
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType
from app.models.enums.approval_action import ApprovalAction

from app.schemas.transactions.quotation_schemas import (
    QuotationCreate,
    QuotationUpdate,
    QuotationItemIn,
    QuotationOut,
    QuotationItemOut,
    QuotationListData,
    QuotationListItem,
    QuotationStats,
)

from app.services.workflow.approval_workflow import transition
from app.services.transactions.transaction_helpers import claim_for_write, reject_nulls
from app.core.config import BASE_CURRENCY
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.decimal_utils import line_amount, sum_amounts
from app.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_STATUSES = {TransactionStatus.draft}
DELETABLE_STATUSES = {TransactionStatus.draft, TransactionStatus.rejected}
# columns a PATCH may change but never clear
REQUIRED_FIELDS = {"client_id", "quotation_date", "base_currency", "exchange_rate", "items"}


def _build_items(items: List[QuotationItemIn]) -> List[QuotationItem]:
    return [
        QuotationItem(
            item_sequence=seq,
            description=i.description.strip(),
            category=i.category,
            warehouse=i.warehouse,
            container_size=i.container_size,
            equipment_type=i.equipment_type,
            currency=i.currency.upper(),
            quantity=i.quantity,
            unit=i.unit,
            rate=i.rate,
            amount=line_amount(i.quantity, i.rate),
        )
        for seq, i in enumerate(items, start=1)
    ]


def recalculate_totals(q: Quotation) -> None:
    q.receipted_total = sum_amounts(i.amount for i in q.items if i.category == "receipted")
    q.non_receipted_total = sum_amounts(i.amount for i in q.items if i.category != "receipted")
    q.total_amount = q.receipted_total + q.non_receipted_total


async def _get_quotation(
    db: AsyncSession,
    quotation_id: int,
    include_deleted: bool = False,
) -> Quotation:
    stmt = (
        select(Quotation)
        .where(Quotation.id == quotation_id)
        .execution_options(populate_existing=True)
    )
    if not include_deleted:
        stmt = stmt.where(Quotation.is_deleted.is_(False))

    q = (await db.execute(stmt)).unique().scalar_one_or_none()
    if not q:
        raise AppException(404, "Quotation not found", ErrorCode.QUOTATION_NOT_FOUND)
    return q


async def _get_active_client(db: AsyncSession, client_id: int) -> Client:
    client = await db.get(Client, client_id)
    if not client or not client.is_active:
        raise AppException(404, "Client not found", ErrorCode.CLIENT_NOT_FOUND)
    return client


def _user_name(user) -> Optional[str]:
    return user.display_name if user else None


def map_quotation(q: Quotation) -> QuotationOut:
    client = q.client
    return QuotationOut(
        id=q.id,
        quotation_number=q.quotation_number,
        reference_no=q.reference_no,
        status=q.status,
        client_id=q.client_id,
        client_code=client.client_code if client else None,
        client_name=client.client_name if client else None,
        client_contact_person=client.contact_person if client else None,
        client_email=client.email if client else None,
        client_phone=client.phone if client else None,
        client_address=client.address if client else None,
        booking_no=q.booking_no,
        quotation_date=q.quotation_date,
        valid_until=q.valid_until,
        origin=q.origin,
        destination=q.destination,
        base_currency=q.base_currency,
        exchange_rate=q.exchange_rate,
        service_description=q.service_description,
        notes=q.notes,
        contact_person=q.contact_person,
        payment_term=q.payment_term,
        receipted_total=q.receipted_total,
        non_receipted_total=q.non_receipted_total,
        total_amount=q.total_amount,
        submitted_by_name=_user_name(q.submitted_by),
        submitted_at=q.submitted_at,
        approved_by_name=_user_name(q.approved_by),
        approved_at=q.approved_at,
        is_deleted=q.is_deleted,
        version=q.version,
        created_by_name=q.created_by_username,
        updated_by_name=q.updated_by_username,
        created_at=q.created_at,
        updated_at=q.updated_at,
        items=[QuotationItemOut.model_validate(i) for i in q.items],
    )


async def _log(db: AsyncSession, user, code: ActivityCode, q: Quotation, **extra) -> None:
    await emit_activity(
        db=db,
        actor=user,
        code=code,
        entity="quotation",
        target_name=q.quotation_number,
        **extra,
    )


# =====================================================
# CREATE
# =====================================================
async def create_quotation(
    db: AsyncSession,
    payload: QuotationCreate,
    user,
) -> QuotationOut:
    client = await _get_active_client(db, payload.client_id)

    q = Quotation(
        quotation_number="TEMP",
        client_id=client.id,
        status=TransactionStatus.draft,
        booking_no=payload.booking_no,
        quotation_date=payload.quotation_date or date.today(),
        valid_until=payload.valid_until,
        origin=payload.origin,
        destination=payload.destination,
        base_currency=payload.base_currency.upper(),
        exchange_rate=payload.exchange_rate,
        service_description=payload.service_description,
        notes=payload.notes,
        contact_person=payload.contact_person or client.contact_person,
        payment_term=payload.payment_term or client.payment_terms,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    q.items = _build_items(payload.items)
    recalculate_totals(q)

    db.add(q)
    await db.flush()

    q.quotation_number = f"QT-{q.id:06d}"

    await _log(db, user, ActivityCode.CREATE_TRANSACTION, q)
    await db.commit()

    logger.info("Quotation created", extra={"quotation_id": q.id, "quotation_number": q.quotation_number})
    return map_quotation(await _get_quotation(db, q.id))


# =====================================================
# READ
# =====================================================
async def get_quotation(db: AsyncSession, quotation_id: int) -> QuotationOut:
    return map_quotation(await _get_quotation(db, quotation_id))


async def get_quotation_items(db: AsyncSession, quotation_id: int) -> List[QuotationItemOut]:
    q = await _get_quotation(db, quotation_id)
    return [QuotationItemOut.model_validate(i) for i in q.items]


async def list_quotations(
    db: AsyncSession,
    client_id: Optional[int] = None,
    status: Optional[TransactionStatus] = None,
    search: Optional[str] = None,
    include_deleted: bool = False,
    page: int = 1,
    page_size: int = 20,
    sort_by: str = "created_at",
    order: str = "desc",
) -> QuotationListData:
    conditions = []
    if not include_deleted:
        conditions.append(Quotation.is_deleted.is_(False))
    if client_id:
        conditions.append(Quotation.client_id == client_id)
    if status:
        conditions.append(Quotation.status == status)
    if search:
        pattern = f"%{search}%"
        conditions.append(
            Quotation.quotation_number.ilike(pattern)
            | Client.client_name.ilike(pattern)
            | Quotation.booking_no.ilike(pattern)
        )

    total = await db.scalar(
        select(func.count(Quotation.id))
        .select_from(Quotation)
        .outerjoin(Client, Client.id == Quotation.client_id)
        .where(*conditions)
    )

    sort_map = {
        "created_at": Quotation.created_at,
        "quotation_number": Quotation.quotation_number,
        "quotation_date": Quotation.quotation_date,
        "total_amount": Quotation.total_amount,
    }
    sort_col = sort_map.get(sort_by)
    if sort_col is None:
        raise AppException(400, "Invalid sort field", ErrorCode.VALIDATION_ERROR)

    result = await db.execute(
        select(
            Quotation.id,
            Quotation.quotation_number,
            Client.client_name,
            Quotation.status,
            Quotation.quotation_date,
            Quotation.valid_until,
            Quotation.base_currency,
            Quotation.total_amount,
            Quotation.is_deleted,
            Quotation.version,
            Quotation.created_at,
            func.count(QuotationItem.id).label("items_count"),
        )
        .outerjoin(Client, Client.id == Quotation.client_id)
        .outerjoin(QuotationItem, QuotationItem.quotation_id == Quotation.id)
        .where(*conditions)
        .group_by(Quotation.id, Client.client_name)
        .order_by(asc(sort_col) if order == "asc" else desc(sort_col), desc(Quotation.id))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return QuotationListData(
        total=total or 0,
        items=[QuotationListItem(**r._mapping) for r in result.all()],
    )


async def get_quotation_stats(db: AsyncSession) -> QuotationStats:
    base_amount = case(
        (Quotation.base_currency == BASE_CURRENCY, Quotation.total_amount),
        else_=Quotation.total_amount * Quotation.exchange_rate,
    )

    row = (
        await db.execute(
            select(
                func.count(Quotation.id).label("total"),
                func.count(Quotation.id).filter(Quotation.status == TransactionStatus.draft).label("draft"),
                func.count(Quotation.id).filter(Quotation.status == TransactionStatus.pending_approval).label("pending_approval"),
                func.count(Quotation.id).filter(Quotation.status == TransactionStatus.approved).label("approved"),
                func.count(Quotation.id).filter(Quotation.status == TransactionStatus.rejected).label("rejected"),
                func.coalesce(
                    func.sum(base_amount).filter(Quotation.status == TransactionStatus.approved),
                    0,
                ).label("approved_value"),
            ).where(Quotation.is_deleted.is_(False))
        )
    ).one()

    return QuotationStats(
        total=row.total,
        draft=row.draft,
        pending_approval=row.pending_approval,
        approved=row.approved,
        rejected=row.rejected,
        approved_value=Decimal(str(row.approved_value)).quantize(Decimal("0.01")),
    )


# =====================================================
# UPDATE (DRAFT ONLY)
# =====================================================
async def update_quotation(
    db: AsyncSession,
    quotation_id: int,
    payload: QuotationUpdate,
    user,
) -> QuotationOut:
    reject_nulls(payload.model_dump(exclude_unset=True), REQUIRED_FIELDS)

    q = await _get_quotation(db, quotation_id)

    if q.status not in EDITABLE_STATUSES:
        raise AppException(
            409,
            "Only draft quotations can be edited",
            ErrorCode.TRANSACTION_NOT_EDITABLE,
            {"status": q.status.value},
        )

    if q.version != payload.version:
        raise AppException(409, "Quotation was modified by another process", ErrorCode.VERSION_CONFLICT)

    changes: list[str] = []
    fields = payload.model_dump(exclude_unset=True, exclude={"version", "items"})

    if "client_id" in fields and fields["client_id"] != q.client_id:
        await _get_active_client(db, fields["client_id"])

    pending: dict = {}
    for field, value in fields.items():
        if field == "base_currency":
            value = value.upper()
        if value != getattr(q, field):
            pending[field] = value
            changes.append(field)

    if payload.items is not None:
        changes.append("items")

    if not changes:
        return map_quotation(q)

    await claim_for_write(
        db, q,
        version=payload.version,
        user=user,
        label="Quotation",
        statuses=EDITABLE_STATUSES,
    )

    for field, value in pending.items():
        setattr(q, field, value)

    if payload.items is not None:
        q.items = _build_items(payload.items)
        recalculate_totals(q)

    await _log(db, user, ActivityCode.UPDATE_TRANSACTION, q, changes=", ".join(changes))
    await db.commit()

    return map_quotation(await _get_quotation(db, quotation_id))


# =====================================================
# DELETE / RESTORE (SOFT)
# =====================================================
async def delete_quotation(
    db: AsyncSession,
    quotation_id: int,
    version: Optional[int],
    user,
) -> QuotationOut:
    q = await _get_quotation(db, quotation_id)

    if q.status not in DELETABLE_STATUSES:
        raise AppException(
            409,
            "Only draft or rejected quotations can be deleted",
            ErrorCode.QUOTATION_CANNOT_DELETE,
            {"status": q.status.value},
        )

    if version is not None and q.version != version:
        raise AppException(409, "Quotation was modified by another process", ErrorCode.VERSION_CONFLICT)

    await claim_for_write(
        db, q,
        version=q.version if version is None else version,
        user=user,
        label="Quotation",
        statuses=DELETABLE_STATUSES,
    )
    q.is_deleted = True

    await _log(db, user, ActivityCode.DELETE_TRANSACTION, q)
    await db.commit()

    return map_quotation(await _get_quotation(db, quotation_id, include_deleted=True))


async def restore_quotation(db: AsyncSession, quotation_id: int, user) -> QuotationOut:
    q = await _get_quotation(db, quotation_id, include_deleted=True)

    if not q.is_deleted:
        raise AppException(409, "Quotation is not deleted", ErrorCode.CONFLICT)

    await claim_for_write(db, q, version=q.version, user=user, label="Quotation", deleted=True)
    q.is_deleted = False

    await _log(db, user, ActivityCode.RESTORE_TRANSACTION, q)
    await db.commit()

    return map_quotation(await _get_quotation(db, quotation_id))


# =====================================================
# WORKFLOW
# =====================================================
async def _run_transition(db, quotation_id, action, user, comments=None, version=None) -> QuotationOut:
    q, _ = await transition(
        db,
        transaction_type=TransactionType.quotation,
        transaction_id=quotation_id,
        action=action,
        actor=user,
        comments=comments,
        expected_version=version,
    )
    return map_quotation(q)


async def submit_quotation(db: AsyncSession, quotation_id: int, user, comments=None, version=None) -> QuotationOut:
    return await _run_transition(db, quotation_id, ApprovalAction.submitted, user, comments, version)


async def cancel_quotation(db: AsyncSession, quotation_id: int, user, comments=None, version=None) -> QuotationOut:
    return await _run_transition(db, quotation_id, ApprovalAction.cancelled, user, comments, version)


async def revise_quotation(db: AsyncSession, quotation_id: int, user, comments=None, version=None) -> QuotationOut:
    return await _run_transition(db, quotation_id, ApprovalAction.revised, user, comments, version)
