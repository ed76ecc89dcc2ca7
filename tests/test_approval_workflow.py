from decimal import Decimal

import pytest
from sqlalchemy import func, select

from app.constants.error_codes import ErrorCode
from app.core.exceptions import AppException
from app.models.approvals.approval_history_models import ApprovalHistory
from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType
from app.models.transactions.quotation_models import Quotation
from app.schemas.transactions.quotation_schemas import QuotationCreate, QuotationItemIn
from app.schemas.transactions.rfp_schemas import RfpCreate, RfpParticularIn
from app.services.transactions.quotation_service import create_quotation
from app.services.transactions.rfp_service import create_rfp
from app.services.workflow import approval_workflow
from app.services.workflow.approval_workflow import transition


async def _quotation(db, user, client_id, items=None):
    if items is None:
        items = [QuotationItemIn(description="Trucking", quantity=Decimal("1"), rate=Decimal("5000"))]
    return await create_quotation(db, QuotationCreate(client_id=client_id, items=items), user)


async def _history_count(db, transaction_id, transaction_type=TransactionType.quotation):
    return await db.scalar(
        select(func.count(ApprovalHistory.approval_id)).where(
            ApprovalHistory.transaction_type == transaction_type,
            ApprovalHistory.transaction_id == transaction_id,
        )
    )


async def _status(db, quotation_id):
    return await db.scalar(
        select(Quotation.status)
        .where(Quotation.id == quotation_id)
        .execution_options(populate_existing=True)
    )


def _run(db, q_id, action, actor, **kwargs):
    return transition(
        db,
        transaction_type=TransactionType.quotation,
        transaction_id=q_id,
        action=action,
        actor=actor,
        **kwargs,
    )


async def test_submit_then_approve_records_each_step(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)

    doc, entry = await _run(db, q.id, ApprovalAction.submitted, users["operator"])
    assert doc.status == TransactionStatus.pending_approval
    assert doc.submitted_by_id == users["operator"].id
    assert entry.previous_status == TransactionStatus.draft

    doc, entry = await _run(db, q.id, ApprovalAction.approved, users["manager"], comments="ok")
    assert doc.status == TransactionStatus.approved
    assert doc.approved_by_id == users["manager"].id
    assert doc.version == q.version + 2
    assert entry.action == ApprovalAction.approved
    assert entry.action_by_name == "Maria Manager"
    assert entry.comments == "ok"
    assert entry.is_override is False

    assert await _history_count(db, q.id) == 2


async def test_reject_requires_comments_before_any_change(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.rejected, users["manager"], comments="   ")

    assert exc.value.status_code == 400
    assert exc.value.error_code == ErrorCode.VALIDATION_ERROR
    assert await _status(db, q.id) == TransactionStatus.pending_approval
    assert await _history_count(db, q.id) == 1


async def test_reject_then_revise_returns_to_draft(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    doc, entry = await _run(db, q.id, ApprovalAction.rejected, users["manager"], comments="missing invoice")
    assert doc.status == TransactionStatus.rejected
    assert entry.comments == "missing invoice"

    doc, _ = await _run(db, q.id, ApprovalAction.revised, users["operator"])
    assert doc.status == TransactionStatus.draft
    assert doc.submitted_at is None
    assert doc.approved_by_id is None


async def test_cancel_withdraws_pending_request(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    doc, entry = await _run(db, q.id, ApprovalAction.cancelled, users["operator"])

    assert doc.status == TransactionStatus.draft
    assert doc.submitted_by_id is None
    assert entry.action == ApprovalAction.cancelled


async def test_approve_outside_pending_needs_override(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.approved, users["manager"])

    assert exc.value.status_code == 409
    assert exc.value.error_code == ErrorCode.INVALID_STATE
    assert exc.value.details["requires_override"] is True
    assert await _history_count(db, q.id) == 0


async def test_admin_override_from_draft(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)

    doc, entry = await _run(
        db, q.id, ApprovalAction.approved, users["admin"], comments="urgent shipment", is_override=True
    )

    assert doc.status == TransactionStatus.approved
    assert entry.is_override is True
    assert entry.previous_status == TransactionStatus.draft
    assert entry.comments == "[ADMIN OVERRIDE from draft] urgent shipment"


async def test_override_can_reverse_an_approval(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.submitted, users["operator"])
    await _run(db, q.id, ApprovalAction.approved, users["manager"])

    _, entry = await _run(db, q.id, ApprovalAction.rejected, users["admin"], comments="wrong rate", is_override=True)

    assert entry.previous_status == TransactionStatus.approved
    assert entry.new_status == TransactionStatus.rejected
    assert entry.comments.startswith("[ADMIN OVERRIDE from approved]")


async def test_override_is_admin_only(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.approved, users["manager"], is_override=True)

    assert exc.value.status_code == 403
    assert exc.value.error_code == ErrorCode.OVERRIDE_NOT_ALLOWED


async def test_override_to_current_status_is_rejected(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.approved, users["admin"], is_override=True)

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.approved, users["admin"], is_override=True)

    assert exc.value.status_code == 409
    assert await _history_count(db, q.id) == 1


async def test_override_only_for_decisions(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.submitted, users["admin"], is_override=True)

    assert exc.value.status_code == 400


async def test_viewer_cannot_approve(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.approved, users["viewer"])

    assert exc.value.status_code == 403
    assert exc.value.error_code == ErrorCode.APPROVER_ROLE_REQUIRED


async def test_viewer_cannot_submit(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.submitted, users["viewer"])

    assert exc.value.error_code == ErrorCode.PERMISSION_DENIED


@pytest.mark.parametrize(
    "items",
    [
        [],
        [QuotationItemIn(description="   ", rate=Decimal("10"))],
    ],
)
async def test_submit_needs_described_line_item(db, users, sample_client_id, items):
    q = await _quotation(db, users["operator"], sample_client_id, items=items)

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    assert exc.value.error_code == ErrorCode.NO_LINE_ITEMS
    assert await _status(db, q.id) == TransactionStatus.draft


async def test_stale_version_is_refused(db, users, sample_client_id):
    q = await _quotation(db, users["operator"], sample_client_id)
    await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    with pytest.raises(AppException) as exc:
        await _run(db, q.id, ApprovalAction.approved, users["manager"], expected_version=q.version)

    assert exc.value.status_code == 409
    assert exc.value.error_code == ErrorCode.VERSION_CONFLICT
    assert await _status(db, q.id) == TransactionStatus.pending_approval


async def test_missing_document_is_404(db, users):
    with pytest.raises(AppException) as exc:
        await _run(db, 9999, ApprovalAction.submitted, users["operator"])

    assert exc.value.status_code == 404
    assert exc.value.error_code == ErrorCode.QUOTATION_NOT_FOUND


async def test_failed_audit_write_rolls_back_status(db, users, sample_client_id, monkeypatch):
    q = await _quotation(db, users["operator"], sample_client_id)

    async def broken_emit(*args, **kwargs):
        raise RuntimeError("activity store unavailable")

    monkeypatch.setattr(approval_workflow, "emit_activity", broken_emit)

    with pytest.raises(RuntimeError):
        await _run(db, q.id, ApprovalAction.submitted, users["operator"])

    assert await _status(db, q.id) == TransactionStatus.draft
    assert await _history_count(db, q.id) == 0


async def test_rfp_goes_through_same_workflow(db, users):
    rfp = await create_rfp(
        db,
        RfpCreate(
            payee_name="Harbor Services Inc.",
            particulars=[RfpParticularIn(description="Port charges", amount=Decimal("12500"))],
        ),
        users["operator"],
    )

    await transition(
        db,
        transaction_type=TransactionType.rfp,
        transaction_id=rfp.id,
        action=ApprovalAction.submitted,
        actor=users["operator"],
    )
    doc, entry = await transition(
        db,
        transaction_type=TransactionType.rfp,
        transaction_id=rfp.id,
        action=ApprovalAction.approved,
        actor=users["manager"],
    )

    assert doc.status == TransactionStatus.approved
    assert entry.reference_no == rfp.rfp_number
    assert await _history_count(db, rfp.id, TransactionType.rfp) == 2
