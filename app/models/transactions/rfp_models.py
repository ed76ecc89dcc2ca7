from decimal import Decimal
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Index, CheckConstraint, Date
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, SoftDeleteMixin, AuditMixin, WorkflowMixin


class RequestForPayment(Base, TimestampMixin, SoftDeleteMixin, AuditMixin, WorkflowMixin):
    """Internal budget / disbursement request (RFP)."""

    __tablename__ = "rfps"

    id = Column(Integer, primary_key=True)
    rfp_number = Column(String(50), nullable=False, unique=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=True, index=True)

    rfp_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    payee_name = Column(String(255), nullable=False)
    requesting_unit = Column(String(150), nullable=True)
    mode_of_payment = Column(String(50), nullable=False, default="Cash")

    currency_code = Column(String(10), nullable=False, default="PHP")
    exchange_rate = Column(Numeric(12, 4), nullable=False, default=Decimal("1.0000"))
    total_amount = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    notes = Column(String, nullable=True)

    client = relationship("Client", lazy="joined")
    particulars = relationship(
        "RfpParticular",
        back_populates="rfp",
        cascade="all, delete-orphan",
        order_by="RfpParticular.sequence",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_rfp_status_date", "status", "rfp_date"),
        CheckConstraint("total_amount >= 0", name="ck_rfp_total_non_negative"),
    )

    @hybrid_property
    def reference_no(self):
        return self.rfp_number

    @hybrid_property
    def amount(self):
        return self.total_amount

    @hybrid_property
    def currency(self):
        return self.currency_code

    @property
    def items(self):
        return self.particulars

    def __repr__(self):
        return f"<RequestForPayment {self.rfp_number} status={self.status}>"


class RfpParticular(Base, TimestampMixin):
    __tablename__ = "rfp_particulars"

    id = Column(Integer, primary_key=True)
    rfp_id = Column(Integer, ForeignKey("rfps.id", ondelete="CASCADE"), nullable=False, index=True)
    sequence = Column(Integer, nullable=False, default=1)
    charging = Column(String(150), nullable=True)
    invoice_no = Column(String(100), nullable=True)
    ifd_no = Column(String(100), nullable=True)
    unit_port = Column(String(100), nullable=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))

    rfp = relationship("RequestForPayment", back_populates="particulars", lazy="noload")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_rfp_particular_amount_non_negative"),
    )

    def __repr__(self):
        return f"<RfpParticular id={self.id} seq={self.sequence} amount={self.amount}>"
