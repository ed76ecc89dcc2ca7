from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, desc

from app.models.transactions.rfp_models import RequestForPayment, RfpParticular
from app.models.masters.client_models import Client
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType
from app.models.enums.approval_action import ApprovalAction

from app.schemas.transactions.rfp_schemas import (
    RfpCreate,
    RfpUpdate,
    RfpParticularIn,
    RfpOut,
    RfpParticularOut,
    RfpListData,
    RfpListItem,
)

from app.services.workflow.approval_workflow import transition
from app.services.transactions.transaction_helpers import claim_for_write, reject_nulls
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.decimal_utils import to_decimal, sum_amounts
from app.utils.logger import get_logger

logger = get_logger(__name__)

EDITABLE_STATUSES = {TransactionStatus.draft}
DELETABLE_STATUSES = {TransactionStatus.draft, TransactionStatus.rejected}
# columns a PATCH may change but never clear
REQUIRED_FIELDS = {"payee_name", "rfp_date", "mode_of_payment", "currency", "exchange_rate", "particulars"}

# payload field -> column
_FIELD_COLUMNS = {"currency": "currency_code"}


def _build_particulars(particulars: List[RfpParticularIn]) -> List[RfpParticular]:
    return [
        RfpParticular(
            sequence=seq,
            description=p.description.strip(),
            charging=p.charging,
            invoice_no=p.invoice_no,
            ifd_no=p.ifd_no,
            unit_port=p.unit_port,
            amount=to_decimal(p.amount),
        )
        for seq, p in enumerate(particulars, start=1)
    ]


async def _get_rfp(db: AsyncSession, rfp_id: int, include_deleted: bool = False) -> RequestForPayment:
    stmt = (
        select(RequestForPayment)
        .where(RequestForPayment.id == rfp_id)
        .execution_options(populate_existing=True)
    )
    if not include_deleted:
        stmt = stmt.where(RequestForPayment.is_deleted.is_(False))

    rfp = (await db.execute(stmt)).unique().scalar_one_or_none()
    if not rfp:
        raise AppException(404, "RFP not found", ErrorCode.RFP_NOT_FOUND)
    return rfp


async def _check_client(db: AsyncSession, client_id: Optional[int]) -> None:
    if client_id is None:
        return
    client = await db.get(Client, client_id)
    if not client or not client.is_active:
        raise AppException(404, "Client not found", ErrorCode.CLIENT_NOT_FOUND)


def map_rfp(r: RequestForPayment) -> RfpOut:
    return RfpOut(
        id=r.id,
        rfp_number=r.rfp_number,
        reference_no=r.reference_no,
        status=r.status,
        client_id=r.client_id,
        client_name=r.client.client_name if r.client else None,
        payee_name=r.payee_name,
        requesting_unit=r.requesting_unit,
        rfp_date=r.rfp_date,
        due_date=r.due_date,
        mode_of_payment=r.mode_of_payment,
        currency=r.currency_code,
        exchange_rate=r.exchange_rate,
        amount=r.total_amount,
        notes=r.notes,
        submitted_by_name=r.submitted_by.display_name if r.submitted_by else None,
        submitted_at=r.submitted_at,
        approved_by_name=r.approved_by.display_name if r.approved_by else None,
        approved_at=r.approved_at,
        is_deleted=r.is_deleted,
        version=r.version,
        created_by_name=r.created_by_username,
        created_at=r.created_at,
        updated_at=r.updated_at,
        particulars=[RfpParticularOut.model_validate(p) for p in r.particulars],
    )


async def _log(db: AsyncSession, user, code: ActivityCode, r: RequestForPayment, **extra) -> None:
    await emit_activity(
        db=db,
        actor=user,
        code=code,
        entity="RFP",
        target_name=r.rfp_number,
        **extra,
    )


async def create_rfp(db: AsyncSession, payload: RfpCreate, user) -> RfpOut:
    await _check_client(db, payload.client_id)

    rfp = RequestForPayment(
        rfp_number="TEMP",
        client_id=payload.client_id,
        status=TransactionStatus.draft,
        rfp_date=payload.rfp_date or date.today(),
        due_date=payload.due_date,
        payee_name=payload.payee_name,
        requesting_unit=payload.requesting_unit,
        mode_of_payment=payload.mode_of_payment,
        currency_code=payload.currency.upper(),
        exchange_rate=payload.exchange_rate,
        notes=payload.notes,
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    rfp.particulars = _build_particulars(payload.particulars)
    rfp.total_amount = sum_amounts(p.amount for p in rfp.particulars)

    db.add(rfp)
    await db.flush()

    rfp.rfp_number = f"RFP-{rfp.id:06d}"

    await _log(db, user, ActivityCode.CREATE_TRANSACTION, rfp)
    await db.commit()

    logger.info("RFP created", extra={"rfp_id": rfp.id, "rfp_number": rfp.rfp_number})
    return map_rfp(await _get_rfp(db, rfp.id))


async def get_rfp(db: AsyncSession, rfp_id: int) -> RfpOut:
    return map_rfp(await _get_rfp(db, rfp_id))


async def list_rfps(
    db: AsyncSession,
    status: Optional[TransactionStatus] = None,
    search: Optional[str] = None,
    include_deleted: bool = False,
    page: int = 1,
    page_size: int = 20,
) -> RfpListData:
    conditions = []
    if not include_deleted:
        conditions.append(RequestForPayment.is_deleted.is_(False))
    if status:
        conditions.append(RequestForPayment.status == status)
    if search:
        pattern = f"%{search}%"
        conditions.append(
            RequestForPayment.rfp_number.ilike(pattern)
            | RequestForPayment.payee_name.ilike(pattern)
        )

    total = await db.scalar(select(func.count(RequestForPayment.id)).where(*conditions))

    result = await db.execute(
        select(
            RequestForPayment.id,
            RequestForPayment.rfp_number,
            RequestForPayment.payee_name,
            Client.client_name,
            RequestForPayment.status,
            RequestForPayment.rfp_date,
            RequestForPayment.currency_code.label("currency"),
            RequestForPayment.total_amount.label("amount"),
            RequestForPayment.is_deleted,
            RequestForPayment.version,
            RequestForPayment.created_at,
        )
        .outerjoin(Client, Client.id == RequestForPayment.client_id)
        .where(*conditions)
        .order_by(desc(RequestForPayment.created_at), desc(RequestForPayment.id))
        .offset((page - 1) * page_size)
        .limit(page_size)
    )

    return RfpListData(
        total=total or 0,
        items=[RfpListItem(**r._mapping) for r in result.all()],
    )


async def update_rfp(db: AsyncSession, rfp_id: int, payload: RfpUpdate, user) -> RfpOut:
    reject_nulls(payload.model_dump(exclude_unset=True), REQUIRED_FIELDS)

    rfp = await _get_rfp(db, rfp_id)

    if rfp.status not in EDITABLE_STATUSES:
        raise AppException(
            409,
            "Only draft RFPs can be edited",
            ErrorCode.TRANSACTION_NOT_EDITABLE,
            {"status": rfp.status.value},
        )

    if rfp.version != payload.version:
        raise AppException(409, "RFP was modified by another process", ErrorCode.VERSION_CONFLICT)

    changes: list[str] = []
    fields = payload.model_dump(exclude_unset=True, exclude={"version", "particulars"})

    if "client_id" in fields and fields["client_id"] != rfp.client_id:
        await _check_client(db, fields["client_id"])

    pending: dict = {}
    for field, value in fields.items():
        column = _FIELD_COLUMNS.get(field, field)
        if column == "currency_code":
            value = value.upper()
        if value != getattr(rfp, column):
            pending[column] = value
            changes.append(field)

    if payload.particulars is not None:
        changes.append("particulars")

    if not changes:
        return map_rfp(rfp)

    await claim_for_write(
        db, rfp,
        version=payload.version,
        user=user,
        label="RFP",
        statuses=EDITABLE_STATUSES,
    )

    for column, value in pending.items():
        setattr(rfp, column, value)

    if payload.particulars is not None:
        rfp.particulars = _build_particulars(payload.particulars)
        rfp.total_amount = sum_amounts(p.amount for p in rfp.particulars)

    await _log(db, user, ActivityCode.UPDATE_TRANSACTION, rfp, changes=", ".join(changes))
    await db.commit()

    return map_rfp(await _get_rfp(db, rfp_id))


async def delete_rfp(db: AsyncSession, rfp_id: int, version: Optional[int], user) -> RfpOut:
    rfp = await _get_rfp(db, rfp_id)

    if rfp.status not in DELETABLE_STATUSES:
        raise AppException(
            409,
            "Only draft or rejected RFPs can be deleted",
            ErrorCode.RFP_CANNOT_DELETE,
            {"status": rfp.status.value},
        )

    if version is not None and rfp.version != version:
        raise AppException(409, "RFP was modified by another process", ErrorCode.VERSION_CONFLICT)

    await claim_for_write(
        db, rfp,
        version=rfp.version if version is None else version,
        user=user,
        label="RFP",
        statuses=DELETABLE_STATUSES,
    )
    rfp.is_deleted = True

    await _log(db, user, ActivityCode.DELETE_TRANSACTION, rfp)
    await db.commit()

    return map_rfp(await _get_rfp(db, rfp_id, include_deleted=True))


async def _run_transition(db, rfp_id, action, user, comments=None, version=None) -> RfpOut:
    rfp, _ = await transition(
        db,
        transaction_type=TransactionType.rfp,
        transaction_id=rfp_id,
        action=action,
        actor=user,
        comments=comments,
        expected_version=version,
    )
    return map_rfp(rfp)


async def submit_rfp(db: AsyncSession, rfp_id: int, user, comments=None, version=None) -> RfpOut:
    return await _run_transition(db, rfp_id, ApprovalAction.submitted, user, comments, version)


async def cancel_rfp(db: AsyncSession, rfp_id: int, user, comments=None, version=None) -> RfpOut:
    return await _run_transition(db, rfp_id, ApprovalAction.cancelled, user, comments, version)


async def revise_rfp(db: AsyncSession, rfp_id: int, user, comments=None, version=None) -> RfpOut:
    return await _run_transition(db, rfp_id, ApprovalAction.revised, user, comments, version)
