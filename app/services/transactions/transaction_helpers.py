# app/services/transactions/transaction_helpers.py

from typing import Iterable, Optional

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.core.exceptions import AppException
from app.constants.error_codes import ErrorCode


def reject_nulls(fields: dict, required: Iterable[str]) -> None:
    """Refuse an explicit null for a column that cannot be empty."""
    nulls = sorted(name for name in required if name in fields and fields[name] is None)
    if nulls:
        raise AppException(
            400,
            f"{', '.join(nulls)} cannot be null",
            ErrorCode.VALIDATION_ERROR,
            {"fields": nulls},
        )


async def claim_for_write(
    db: AsyncSession,
    document,
    *,
    version: int,
    user,
    label: str,
    statuses: Optional[Iterable] = None,
    deleted: bool = False,
) -> None:
    """Take the row for an edit, delete or restore.

    The row is bumped to the next version only if it still has the
    version (and one of the statuses) the caller checked. A concurrent
    writer that got there first makes this raise 409, and the caller's
    in-memory changes are never flushed over its work. The row stays
    locked until the caller commits.
    """
    model = type(document)
    conditions = [
        model.id == document.id,
        model.version == version,
        model.is_deleted.is_(deleted),
    ]
    if statuses is not None:
        conditions.append(model.status.in_(list(statuses)))

    result = await db.execute(
        update(model)
        .where(*conditions)
        .values(version=model.version + 1, updated_by_id=user.id)
        .returning(model.version)
        .execution_options(synchronize_session=False)
    )
    new_version = result.scalar_one_or_none()

    if new_version is None:
        raise AppException(
            409,
            f"{label} was modified by another process",
            ErrorCode.VERSION_CONFLICT,
        )

    # keep the ORM from writing the old version back on flush
    set_committed_value(document, "version", new_version)
    set_committed_value(document, "updated_by_id", user.id)
