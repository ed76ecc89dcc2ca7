from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Enum, Index
from sqlalchemy.sql import func
from app.core.db import Base
from app.models.base.mixins import utcnow
from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType


class ApprovalHistory(Base):
    """Approval audit trail. APPEND-ONLY. Never updated, never deleted."""

    __tablename__ = "approval_history"

    approval_id = Column(Integer, primary_key=True)
    transaction_type = Column(Enum(TransactionType, name="transactiontype"), nullable=False)
    transaction_id = Column(Integer, nullable=False)
    reference_no = Column(String(50), nullable=False)
    action = Column(Enum(ApprovalAction, name="approvalaction"), nullable=False)

    action_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    action_by_name = Column(String(255), nullable=False)
    action_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    comments = Column(String, nullable=True)
    previous_status = Column(Enum(TransactionStatus, name="transactionstatus"), nullable=True)
    new_status = Column(Enum(TransactionStatus, name="transactionstatus"), nullable=False)
    is_override = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("idx_approval_history_type_id", "transaction_type", "transaction_id"),
        Index("idx_approval_history_reference", "reference_no"),
        Index("idx_approval_history_date", "action_at"),
    )

    def __repr__(self):
        return (
            f"<ApprovalHistory {self.transaction_type}:{self.transaction_id} "
            f"{self.previous_status}->{self.new_status}>"
        )
