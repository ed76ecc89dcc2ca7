from decimal import Decimal
from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Index, CheckConstraint, Date
from sqlalchemy.orm import relationship
from sqlalchemy.ext.hybrid import hybrid_property
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, SoftDeleteMixin, AuditMixin, WorkflowMixin


class Quotation(Base, TimestampMixin, SoftDeleteMixin, AuditMixin, WorkflowMixin):
    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True)
    quotation_number = Column(String(50), nullable=False, unique=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="RESTRICT"), nullable=False, index=True)
    booking_no = Column(String(50), nullable=True)

    quotation_date = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=True)
    origin = Column(String(255), nullable=True)
    destination = Column(String(255), nullable=True)

    base_currency = Column(String(10), nullable=False, default="PHP")
    exchange_rate = Column(Numeric(12, 4), nullable=False, default=Decimal("1.0000"))

    service_description = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    contact_person = Column(String(255), nullable=True)
    payment_term = Column(String(100), nullable=True)

    receipted_total = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    non_receipted_total = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    total_amount = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))

    client = relationship("Client", lazy="joined")
    items = relationship(
        "QuotationItem",
        back_populates="quotation",
        cascade="all, delete-orphan",
        order_by="QuotationItem.item_sequence",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_quotation_client_status", "client_id", "status"),
        Index("ix_quotation_date", "quotation_date"),
        CheckConstraint("total_amount >= 0", name="ck_quotation_total_non_negative"),
        CheckConstraint("exchange_rate > 0", name="ck_quotation_exchange_rate_positive"),
    )

    @hybrid_property
    def reference_no(self):
        return self.quotation_number

    @hybrid_property
    def amount(self):
        return self.total_amount

    @hybrid_property
    def currency(self):
        return self.base_currency

    def __repr__(self):
        return f"<Quotation {self.quotation_number} status={self.status}>"


class QuotationItem(Base, TimestampMixin):
    __tablename__ = "quotation_items"

    id = Column(Integer, primary_key=True)
    quotation_id = Column(Integer, ForeignKey("quotations.id", ondelete="CASCADE"), nullable=False, index=True)
    item_sequence = Column(Integer, nullable=False, default=1)
    description = Column(String, nullable=False)
    category = Column(String(30), nullable=False, default="non-receipted")
    warehouse = Column(String(255), nullable=True)
    container_size = Column(String(50), nullable=True)
    equipment_type = Column(String(50), nullable=True)
    currency = Column(String(10), nullable=False, default="PHP")
    quantity = Column(Numeric(10, 2), nullable=False, default=Decimal("1.00"))
    unit = Column(String(50), nullable=False, default="pcs")
    rate = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    amount = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))

    quotation = relationship("Quotation", back_populates="items", lazy="noload")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_quotation_item_quantity_positive"),
        CheckConstraint("rate >= 0", name="ck_quotation_item_rate_non_negative"),
    )

    def __repr__(self):
        return f"<QuotationItem id={self.id} seq={self.item_sequence} amount={self.amount}>"
