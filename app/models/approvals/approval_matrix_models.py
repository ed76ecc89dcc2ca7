from decimal import Decimal

from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Numeric, Enum, Index, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin
from app.models.enums.transaction_type import TransactionType

ALL_DEPARTMENTS = "All Departments"


class ApprovalRule(Base, TimestampMixin, AuditMixin):
    """Who signs off a transaction type within an amount band.

    `max_amount` NULL means no upper limit. Amounts are in the base
    currency.
    """

    __tablename__ = "approval_matrix"

    id = Column(Integer, primary_key=True)
    transaction_type = Column(Enum(TransactionType, name="transactiontype"), nullable=False)
    department = Column(String(100), nullable=False, default=ALL_DEPARTMENTS)
    min_amount = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    max_amount = Column(Numeric(15, 2), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    levels = relationship(
        "ApprovalLevel",
        back_populates="rule",
        cascade="all, delete-orphan",
        order_by="ApprovalLevel.level",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_approval_matrix_type_active", "transaction_type", "is_active"),
        CheckConstraint("min_amount >= 0", name="ck_approval_matrix_min_non_negative"),
    )

    def __repr__(self):
        return f"<ApprovalRule {self.id} {self.transaction_type} {self.department}>"


class ApprovalLevel(Base, TimestampMixin):
    __tablename__ = "approval_levels"

    id = Column(Integer, primary_key=True)
    rule_id = Column(Integer, ForeignKey("approval_matrix.id", ondelete="CASCADE"), nullable=False)
    level = Column(Integer, nullable=False)
    role = Column(String(50), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    required = Column(Boolean, default=True, nullable=False)
    can_delegate = Column(Boolean, default=False, nullable=False)

    rule = relationship("ApprovalRule", back_populates="levels")
    user = relationship("User", lazy="joined")

    __table_args__ = (
        UniqueConstraint("rule_id", "level", name="uq_approval_level"),
        Index("idx_approval_levels_role", "role"),
    )
