from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, Numeric, Index
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin


class Client(Base, TimestampMixin, AuditMixin):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True)
    client_code = Column(String(50), nullable=False, unique=True, index=True)
    client_name = Column(String(255), nullable=False, index=True)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    phone = Column(String(50), nullable=True)
    address = Column(String, nullable=True)
    payment_terms = Column(String(100), nullable=False, default="Net 30 Days")
    credit_limit = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))

    is_active = Column(Boolean, default=True, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (Index("ix_clients_active", "is_active"),)

    def __repr__(self):
        return f"<Client id={self.id} code={self.client_code} name={self.client_name} active={self.is_active}>"
