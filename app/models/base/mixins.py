from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey, Enum
from sqlalchemy.orm import declared_attr, relationship
from sqlalchemy.sql import func

from app.models.enums.transaction_status import TransactionStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    # Python-side values so the ORM never has to reload them after a flush
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True
    )


class SoftDeleteMixin:
    is_deleted = Column(Boolean, default=False, nullable=False)


class AuditMixin:
    @declared_attr
    def created_by_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    @declared_attr
    def updated_by_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    @declared_attr
    def created_by(cls):
        return relationship(
            "User",
            foreign_keys=[cls.created_by_id],
            lazy="joined"
        )

    @declared_attr
    def updated_by(cls):
        return relationship(
            "User",
            foreign_keys=[cls.updated_by_id],
            lazy="joined"
        )

    @property
    def created_by_username(self):
        return self.created_by.username if self.created_by else None

    @property
    def updated_by_username(self):
        return self.updated_by.username if self.updated_by else None


class WorkflowMixin:
    """Columns shared by every document that goes through approval."""

    @declared_attr
    def status(cls):
        return Column(
            Enum(TransactionStatus, name="transactionstatus"),
            nullable=False,
            default=TransactionStatus.draft,
            index=True,
        )

    version = Column(Integer, nullable=False, default=1)

    @declared_attr
    def submitted_by_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    submitted_at = Column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def approved_by_id(cls):
        return Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    approved_at = Column(DateTime(timezone=True), nullable=True)

    @declared_attr
    def submitted_by(cls):
        return relationship("User", foreign_keys=[cls.submitted_by_id], lazy="joined")

    @declared_attr
    def approved_by(cls):
        return relationship("User", foreign_keys=[cls.approved_by_id], lazy="joined")
