"""Two writers that read the same version: the one that commits second gets 409.

Each test lets the first writer load the document, then commits a
competing change from a separate session before the first writer
reaches its write.
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.constants.error_codes import ErrorCode
from app.core.db import AsyncSessionLocal
from app.core.exceptions import AppException
from app.models.approvals.approval_history_models import ApprovalHistory
from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType
from app.models.transactions.quotation_models import Quotation
from app.models.transactions.rfp_models import RequestForPayment
from app.schemas.transactions.quotation_schemas import QuotationCreate, QuotationItemIn, QuotationUpdate
from app.schemas.transactions.rfp_schemas import RfpCreate, RfpParticularIn
from app.services.transactions import quotation_service, rfp_service
from app.services.workflow import approval_workflow
from app.services.workflow.approval_workflow import transition


async def _stored(model, document_id):
    async with AsyncSessionLocal() as session:
        return (
            await session.execute(
                select(model.status, model.version, model.is_deleted).where(model.id == document_id)
            )
        ).one()


async def _history_count(transaction_type, transaction_id):
    async with AsyncSessionLocal() as session:
        return await session.scalar(
            select(func.count(ApprovalHistory.approval_id)).where(
                ApprovalHistory.transaction_type == transaction_type,
                ApprovalHistory.transaction_id == transaction_id,
            )
        )


def _after_first_read(monkeypatch, module, name, competitor):
    """Run `competitor` in its own session right after the first call to module.name."""
    original = getattr(module, name)
    done = False

    async def wrapped(*args, **kwargs):
        nonlocal done
        result = await original(*args, **kwargs)
        if not done:
            done = True
            async with AsyncSessionLocal() as other:
                await competitor(other)
        return result

    monkeypatch.setattr(module, name, wrapped)


async def test_edit_does_not_land_on_quotation_submitted_meanwhile(db, users, sample_client_id, monkeypatch):
    operator = users["operator"]
    q = await quotation_service.create_quotation(
        db,
        QuotationCreate(
            client_id=sample_client_id,
            items=[QuotationItemIn(description="Trucking", rate=Decimal("5000"))],
        ),
        operator,
    )

    _after_first_read(
        monkeypatch,
        quotation_service,
        "_get_quotation",
        lambda other: quotation_service.submit_quotation(other, q.id, operator),
    )

    edit = QuotationUpdate(
        version=q.version,
        items=[QuotationItemIn(description="Trucking", rate=Decimal("999999"))],
    )
    with pytest.raises(AppException) as exc:
        await quotation_service.update_quotation(db, q.id, edit, operator)

    assert exc.value.status_code == 409
    assert exc.value.error_code == ErrorCode.VERSION_CONFLICT

    status, version, _ = await _stored(Quotation, q.id)
    assert status == TransactionStatus.pending_approval
    assert version == q.version + 1

    async with AsyncSessionLocal() as session:
        total = await session.scalar(select(Quotation.total_amount).where(Quotation.id == q.id))
    assert Decimal(str(total)) == Decimal("5000")


async def test_delete_does_not_hide_rfp_submitted_meanwhile(db, users, monkeypatch):
    operator = users["operator"]
    rfp = await rfp_service.create_rfp(
        db,
        RfpCreate(
            payee_name="Harbor Services Inc.",
            particulars=[RfpParticularIn(description="Port charges", amount=Decimal("12500"))],
        ),
        operator,
    )

    _after_first_read(
        monkeypatch,
        rfp_service,
        "_get_rfp",
        lambda other: rfp_service.submit_rfp(other, rfp.id, operator),
    )

    with pytest.raises(AppException) as exc:
        await rfp_service.delete_rfp(db, rfp.id, None, operator)

    assert exc.value.error_code == ErrorCode.VERSION_CONFLICT

    status, version, is_deleted = await _stored(RequestForPayment, rfp.id)
    assert status == TransactionStatus.pending_approval
    assert version == rfp.version + 1
    assert is_deleted is False


async def test_second_decision_on_same_version_is_refused(db, users, sample_client_id, monkeypatch):
    operator, manager = users["operator"], users["manager"]
    q = await quotation_service.create_quotation(
        db,
        QuotationCreate(
            client_id=sample_client_id,
            items=[QuotationItemIn(description="Trucking", rate=Decimal("5000"))],
        ),
        operator,
    )
    await quotation_service.submit_quotation(db, q.id, operator)

    async def reject_elsewhere(other):
        await transition(
            other,
            transaction_type=TransactionType.quotation,
            transaction_id=q.id,
            action=ApprovalAction.rejected,
            actor=manager,
            comments="rates outdated",
        )

    # the approver has loaded the pending quotation; the rejection commits before its write
    _after_first_read(monkeypatch, approval_workflow, "has_permission", reject_elsewhere)

    with pytest.raises(AppException) as exc:
        await transition(
            db,
            transaction_type=TransactionType.quotation,
            transaction_id=q.id,
            action=ApprovalAction.approved,
            actor=manager,
        )

    assert exc.value.status_code == 409
    assert exc.value.error_code == ErrorCode.VERSION_CONFLICT

    status, _, _ = await _stored(Quotation, q.id)
    assert status == TransactionStatus.rejected
    # submitted + rejected; the losing approval wrote nothing
    assert await _history_count(TransactionType.quotation, q.id) == 2
