"""Approval state machine shared by quotations and RFPs.

Every transition performs, inside one database transaction:

1. a conditional status update guarded by the status and version that
   were read (optimistic concurrency), bumping ``version``;
2. one append-only ``approval_history`` row;
3. one ``user_activity`` row.

Either all three are committed or none is.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.approvals.approval_history_models import ApprovalHistory
from app.models.transactions.quotation_models import Quotation
from app.models.transactions.rfp_models import RequestForPayment
from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType
from app.core.config import OVERRIDE_ROLES
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.activity_helpers import emit_activity
from app.utils.check_roles import has_permission
from app.utils.logger import get_logger

logger = get_logger(__name__)

# action -> (allowed source states, target state)
TRANSITIONS = {
    ApprovalAction.submitted: ({TransactionStatus.draft}, TransactionStatus.pending_approval),
    ApprovalAction.approved: ({TransactionStatus.pending_approval}, TransactionStatus.approved),
    ApprovalAction.rejected: ({TransactionStatus.pending_approval}, TransactionStatus.rejected),
    ApprovalAction.cancelled: ({TransactionStatus.pending_approval}, TransactionStatus.draft),
    ApprovalAction.revised: ({TransactionStatus.rejected}, TransactionStatus.draft),
}

OVERRIDABLE_ACTIONS = {ApprovalAction.approved, ApprovalAction.rejected}

DOCUMENTS = {
    TransactionType.quotation: (Quotation, "quotations", "quotation", ErrorCode.QUOTATION_NOT_FOUND),
    TransactionType.rfp: (RequestForPayment, "rfp", "RFP", ErrorCode.RFP_NOT_FOUND),
}

ACTION_VERBS = {
    ApprovalAction.submitted: "submit",
    ApprovalAction.approved: "approve",
    ApprovalAction.rejected: "reject",
    ApprovalAction.cancelled: "cancel",
    ApprovalAction.revised: "revise",
}

ACTION_ACTIVITY = {
    ApprovalAction.submitted: ActivityCode.SUBMIT_TRANSACTION,
    ApprovalAction.approved: ActivityCode.APPROVE_TRANSACTION,
    ApprovalAction.rejected: ActivityCode.REJECT_TRANSACTION,
    ApprovalAction.cancelled: ActivityCode.CANCEL_TRANSACTION,
    ApprovalAction.revised: ActivityCode.REVISE_TRANSACTION,
}


def required_permission(transaction_type: TransactionType, action: ApprovalAction) -> tuple[str, str]:
    module = DOCUMENTS[transaction_type][1]
    if action == ApprovalAction.approved:
        return "approvals", "approve"
    if action == ApprovalAction.rejected:
        return "approvals", "reject"
    if action == ApprovalAction.revised:
        return module, "edit"
    return module, "submit"


def can_override(actor) -> bool:
    return actor.role.lower() in OVERRIDE_ROLES


def has_line_items(document) -> bool:
    return any(item.description and item.description.strip() for item in document.items)


def override_comment(previous: TransactionStatus, comments: Optional[str]) -> str:
    prefix = f"[ADMIN OVERRIDE from {previous.value}]"
    return f"{prefix} {comments}" if comments else prefix


def _status_values(action: ApprovalAction, actor, now: datetime) -> dict:
    if action == ApprovalAction.submitted:
        return {
            "submitted_by_id": actor.id,
            "submitted_at": now,
            "approved_by_id": None,
            "approved_at": None,
        }
    if action in (ApprovalAction.approved, ApprovalAction.rejected):
        # the reviewer is recorded for both outcomes
        return {"approved_by_id": actor.id, "approved_at": now}
    # back to draft
    return {
        "submitted_by_id": None,
        "submitted_at": None,
        "approved_by_id": None,
        "approved_at": None,
    }


async def load_document(db: AsyncSession, transaction_type: TransactionType, transaction_id: int):
    model, _, label, not_found = DOCUMENTS[transaction_type]
    result = await db.execute(
        select(model)
        .where(model.id == transaction_id, model.is_deleted.is_(False))
        .execution_options(populate_existing=True)
    )
    document = result.unique().scalar_one_or_none()
    if not document:
        raise AppException(404, f"{label.capitalize()} not found", not_found)
    return document


async def transition(
    db: AsyncSession,
    *,
    transaction_type: TransactionType,
    transaction_id: int,
    action: ApprovalAction,
    actor,
    comments: Optional[str] = None,
    is_override: bool = False,
    expected_version: Optional[int] = None,
):
    """Move a quotation or RFP through the approval workflow.

    Returns ``(document, history_entry)`` with the document reloaded
    after commit.
    """
    comments = (comments or "").strip() or None

    # -------------------------------------------------
    # VALIDATION (before any read)
    # -------------------------------------------------
    if action == ApprovalAction.rejected and not comments:
        raise AppException(
            400,
            "Comments are required when rejecting",
            ErrorCode.VALIDATION_ERROR,
            {"field": "comments"},
        )

    if is_override and action not in OVERRIDABLE_ACTIONS:
        raise AppException(
            400,
            "Override is only available for approve and reject",
            ErrorCode.VALIDATION_ERROR,
        )

    model, _, label, _ = DOCUMENTS[transaction_type]
    document = await load_document(db, transaction_type, transaction_id)

    # -------------------------------------------------
    # AUTHORIZATION
    # -------------------------------------------------
    if is_override:
        if not can_override(actor):
            raise AppException(
                403,
                "Only administrators can override the approval workflow",
                ErrorCode.OVERRIDE_NOT_ALLOWED,
            )
    else:
        module, perm_action = required_permission(transaction_type, action)
        if not await has_permission(db, actor, module, perm_action):
            raise AppException(
                403,
                "You are not allowed to perform this action",
                ErrorCode.APPROVER_ROLE_REQUIRED
                if action in OVERRIDABLE_ACTIONS
                else ErrorCode.PERMISSION_DENIED,
                {"required": f"{module}.{perm_action}"},
            )

    # -------------------------------------------------
    # STATE CHECK
    # -------------------------------------------------
    allowed_from, target = TRANSITIONS[action]
    previous = document.status

    if is_override:
        if previous == target:
            raise AppException(
                409,
                f"{label.capitalize()} is already {target.value}",
                ErrorCode.INVALID_STATE,
                {"current_status": previous.value},
            )
    elif previous not in allowed_from:
        raise AppException(
            409,
            f"Cannot {ACTION_VERBS[action]} a {label} in status {previous.value}",
            ErrorCode.INVALID_STATE,
            {
                "current_status": previous.value,
                "allowed_from": sorted(s.value for s in allowed_from),
                "requires_override": action in OVERRIDABLE_ACTIONS,
            },
        )

    if expected_version is not None and expected_version != document.version:
        raise AppException(
            409,
            f"{label.capitalize()} was modified by another process",
            ErrorCode.VERSION_CONFLICT,
            {"current_version": document.version},
        )

    if action == ApprovalAction.submitted and not has_line_items(document):
        raise AppException(
            400,
            f"{label.capitalize()} needs at least one line item with a description",
            ErrorCode.NO_LINE_ITEMS,
        )

    # -------------------------------------------------
    # WRITE: status + history + activity, one commit
    # -------------------------------------------------
    now = datetime.now(timezone.utc)
    reference_no = document.reference_no
    observed_version = document.version
    history_comments = override_comment(previous, comments) if is_override else comments

    try:
        result = await db.execute(
            update(model)
            .where(
                model.id == transaction_id,
                model.status == previous,
                model.version == observed_version,
                model.is_deleted.is_(False),
            )
            .values(
                status=target,
                version=model.version + 1,
                updated_by_id=actor.id,
                **_status_values(action, actor, now),
            )
            .returning(model.id)
            .execution_options(synchronize_session=False)
        )

        if result.scalar_one_or_none() is None:
            raise AppException(
                409,
                f"{label.capitalize()} was modified by another process",
                ErrorCode.VERSION_CONFLICT,
            )

        entry = ApprovalHistory(
            transaction_type=transaction_type,
            transaction_id=transaction_id,
            reference_no=reference_no,
            action=action,
            action_by=actor.id,
            action_by_name=actor.display_name,
            action_at=now,
            comments=history_comments,
            previous_status=previous,
            new_status=target,
            is_override=is_override,
        )
        db.add(entry)

        if is_override:
            await emit_activity(
                db=db,
                actor=actor,
                code=ActivityCode.OVERRIDE_TRANSACTION,
                entity=label,
                target_name=reference_no,
                previous_status=previous.value,
                new_status=target.value,
            )
        else:
            await emit_activity(
                db=db,
                actor=actor,
                code=ACTION_ACTIVITY[action],
                entity=label,
                target_name=reference_no,
            )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    log_extra = {
        "transaction_type": transaction_type.value,
        "transaction_id": transaction_id,
        "reference_no": reference_no,
        "action": action.value,
        "previous_status": previous.value,
        "new_status": target.value,
        "actor_id": actor.id,
    }
    if is_override:
        logger.warning("Approval workflow override", extra=log_extra)
    else:
        logger.info("Approval transition", extra=log_extra)

    document = await load_document(db, transaction_type, transaction_id)
    return document, entry
