# app/services/approvals/approval_matrix_service.py

from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update, case, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.approvals.approval_matrix_models import ApprovalRule, ApprovalLevel, ALL_DEPARTMENTS
from app.models.enums.transaction_type import TransactionType
from app.models.users.user_models import User
from app.schemas.approvals.approval_matrix_schemas import (
    ApprovalRuleIn,
    ApprovalRuleUpdate,
    ApprovalRuleOut,
    ApprovalRuleListData,
    ApproverLevelIn,
    ApproverLevelOut,
)
from app.services.masters.master_data_helpers import reload
from app.services.users.role_services import role_exists
from app.utils.activity_helpers import emit_activity
from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode
from app.constants.activity_codes import ActivityCode
from app.utils.logger import get_logger

logger = get_logger(__name__)

# the matrix screen sends this for "No Limit"
NO_LIMIT = Decimal("999999999")


def _label(rule: ApprovalRule) -> str:
    return f"#{rule.id} ({rule.transaction_type.value}, {rule.department})"


def _map_rule(rule: ApprovalRule) -> ApprovalRuleOut:
    return ApprovalRuleOut(
        id=rule.id,
        transaction_type=rule.transaction_type,
        department=rule.department,
        min_amount=rule.min_amount,
        max_amount=rule.max_amount,
        is_active=rule.is_active,
        version=rule.version,
        approvers=[
            ApproverLevelOut(
                level=lvl.level,
                role=lvl.role,
                user_id=lvl.user_id,
                user_name=lvl.user.display_name if lvl.user else None,
                required=lvl.required,
                can_delegate=lvl.can_delegate,
            )
            for lvl in rule.levels
        ],
        created_by_name=rule.created_by_username,
        updated_by_name=rule.updated_by_username,
        created_at=rule.created_at,
        updated_at=rule.updated_at,
    )


async def _get_rule(db: AsyncSession, rule_id: int) -> ApprovalRule:
    rule = await db.get(ApprovalRule, rule_id)
    if not rule:
        raise AppException(404, "Approval rule not found", ErrorCode.APPROVAL_RULE_NOT_FOUND)
    return rule


def _band(payload: ApprovalRuleIn) -> tuple[Decimal, Optional[Decimal]]:
    max_amount = payload.max_amount
    if max_amount is not None and max_amount >= NO_LIMIT:
        max_amount = None
    if max_amount is not None and max_amount < payload.min_amount:
        raise AppException(
            400,
            "Maximum amount must not be below the minimum amount",
            ErrorCode.VALIDATION_ERROR,
            {"min_amount": str(payload.min_amount), "max_amount": str(max_amount)},
        )
    return payload.min_amount, max_amount


async def _validate_approvers(db: AsyncSession, approvers: list[ApproverLevelIn]) -> None:
    unknown_roles = sorted({a.role for a in approvers if not await role_exists(db, a.role)})
    if unknown_roles:
        raise AppException(
            400,
            "Unknown approver role",
            ErrorCode.USER_ROLE_INVALID,
            {"roles": unknown_roles},
        )

    user_ids = {a.user_id for a in approvers if a.user_id is not None}
    if user_ids:
        found = set(
            (
                await db.execute(
                    select(User.id).where(User.id.in_(user_ids), User.is_active.is_(True))
                )
            ).scalars().all()
        )
        missing = sorted(user_ids - found)
        if missing:
            raise AppException(
                404,
                "Approver user not found",
                ErrorCode.USER_NOT_FOUND,
                {"user_ids": missing},
            )


def _build_levels(approvers: list[ApproverLevelIn]) -> list[ApprovalLevel]:
    return [
        ApprovalLevel(
            level=position,
            role=a.role,
            user_id=a.user_id,
            required=a.required,
            can_delegate=a.can_delegate,
        )
        for position, a in enumerate(approvers, start=1)
    ]


# =========================
# LIST / GET
# =========================
async def list_rules(
    db: AsyncSession,
    *,
    transaction_type: Optional[TransactionType] = None,
    include_inactive: bool = False,
) -> ApprovalRuleListData:
    conditions = []
    if not include_inactive:
        conditions.append(ApprovalRule.is_active.is_(True))
    if transaction_type:
        conditions.append(ApprovalRule.transaction_type == transaction_type)

    result = await db.execute(
        select(ApprovalRule).where(*conditions).order_by(ApprovalRule.id.desc())
    )
    items = [_map_rule(r) for r in result.unique().scalars().all()]
    return ApprovalRuleListData(total=len(items), items=items)


async def get_rule(db: AsyncSession, rule_id: int) -> ApprovalRuleOut:
    return _map_rule(await _get_rule(db, rule_id))


async def resolve_rule(
    db: AsyncSession,
    *,
    transaction_type: TransactionType,
    amount: Decimal,
    department: Optional[str] = None,
) -> ApprovalRuleOut:
    """Find the active rule that applies to a document of this amount.

    Both band edges are inclusive. A rule for the given department wins
    over an "All Departments" rule; among those, the band with the
    highest minimum wins.
    """
    departments = [ALL_DEPARTMENTS]
    if department and department != ALL_DEPARTMENTS:
        departments.append(department)

    result = await db.execute(
        select(ApprovalRule)
        .where(
            ApprovalRule.is_active.is_(True),
            ApprovalRule.transaction_type == transaction_type,
            ApprovalRule.department.in_(departments),
            ApprovalRule.min_amount <= amount,
            or_(ApprovalRule.max_amount.is_(None), ApprovalRule.max_amount >= amount),
        )
        .order_by(
            case((ApprovalRule.department == ALL_DEPARTMENTS, 1), else_=0),
            ApprovalRule.min_amount.desc(),
            ApprovalRule.id,
        )
        .limit(1)
    )
    rule = result.unique().scalars().first()
    if not rule:
        raise AppException(
            404,
            "No approval rule covers this amount",
            ErrorCode.APPROVAL_RULE_NOT_FOUND,
            {"transaction_type": transaction_type.value, "amount": str(amount)},
        )
    return _map_rule(rule)


# =========================
# CREATE / UPDATE / DELETE
# =========================
async def create_rule(db: AsyncSession, payload: ApprovalRuleIn, user: User) -> ApprovalRuleOut:
    min_amount, max_amount = _band(payload)
    await _validate_approvers(db, payload.approvers)

    rule = ApprovalRule(
        transaction_type=payload.transaction_type,
        department=payload.department,
        min_amount=min_amount,
        max_amount=max_amount,
        is_active=payload.is_active,
        levels=_build_levels(payload.approvers),
        created_by_id=user.id,
        updated_by_id=user.id,
    )
    db.add(rule)
    await db.flush()

    await emit_activity(
        db=db,
        actor=user,
        code=ActivityCode.CREATE_APPROVAL_RULE,
        target_name=_label(rule),
        levels=len(payload.approvers),
    )

    await db.commit()
    logger.info("Approval rule created", extra={"rule_id": rule.id, "levels": len(payload.approvers)})
    return _map_rule(await reload(db, ApprovalRule, rule.id))


async def update_rule(db: AsyncSession, rule_id: int, payload: ApprovalRuleUpdate, user: User) -> ApprovalRuleOut:
    """Replace a rule and its whole approver list."""
    rule = await _get_rule(db, rule_id)
    min_amount, max_amount = _band(payload)
    await _validate_approvers(db, payload.approvers)

    result = await db.execute(
        update(ApprovalRule)
        .where(ApprovalRule.id == rule_id, ApprovalRule.version == payload.version)
        .values(
            transaction_type=payload.transaction_type,
            department=payload.department,
            min_amount=min_amount,
            max_amount=max_amount,
            is_active=payload.is_active,
            updated_by_id=user.id,
            version=ApprovalRule.version + 1,
        )
        .returning(ApprovalRule.id)
        .execution_options(synchronize_session=False)
    )
    if result.scalar_one_or_none() is None:
        raise AppException(
            409,
            "Approval rule was modified by another process",
            ErrorCode.VERSION_CONFLICT,
        )

    # old levels must be gone before the new ones take their numbers
    rule.levels.clear()
    await db.flush()
    rule.levels.extend(_build_levels(payload.approvers))
    await db.flush()

    rule = await reload(db, ApprovalRule, rule_id)
    await emit_activity(
        db=db,
        actor=user,
        code=ActivityCode.UPDATE_APPROVAL_RULE,
        target_name=_label(rule),
    )

    await db.commit()
    logger.info("Approval rule updated", extra={"rule_id": rule_id, "version": rule.version})
    return _map_rule(rule)


async def delete_rule(db: AsyncSession, rule_id: int, version: Optional[int], user: User) -> None:
    rule = await _get_rule(db, rule_id)
    if version is not None and version != rule.version:
        raise AppException(
            409,
            "Approval rule was modified by another process",
            ErrorCode.VERSION_CONFLICT,
        )

    label = _label(rule)
    await db.delete(rule)

    await emit_activity(
        db=db,
        actor=user,
        code=ActivityCode.DELETE_APPROVAL_RULE,
        target_name=label,
    )

    await db.commit()
    logger.info("Approval rule deleted", extra={"rule_id": rule_id})
