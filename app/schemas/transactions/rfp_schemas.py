from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from datetime import datetime, date

from app.models.enums.transaction_status import TransactionStatus


class RfpParticularIn(BaseModel):
    description: str = ""
    charging: Optional[str] = None
    invoice_no: Optional[str] = None
    ifd_no: Optional[str] = None
    unit_port: Optional[str] = None
    amount: Decimal = Field(default=Decimal("0"), ge=0)


class RfpParticularOut(BaseModel):
    id: int
    sequence: int
    description: str
    charging: Optional[str]
    invoice_no: Optional[str]
    ifd_no: Optional[str]
    unit_port: Optional[str]
    amount: Decimal

    class Config:
        from_attributes = True


class RfpCreate(BaseModel):
    payee_name: str = Field(min_length=1, max_length=255)
    client_id: Optional[int] = None
    rfp_date: Optional[date] = None
    due_date: Optional[date] = None
    requesting_unit: Optional[str] = None
    mode_of_payment: str = "Cash"
    currency: str = Field(default="PHP", min_length=3, max_length=10)
    exchange_rate: Decimal = Field(default=Decimal("1"), gt=0)
    notes: Optional[str] = None
    particulars: List[RfpParticularIn] = Field(default_factory=list)


class RfpUpdate(BaseModel):
    payee_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    client_id: Optional[int] = None
    rfp_date: Optional[date] = None
    due_date: Optional[date] = None
    requesting_unit: Optional[str] = None
    mode_of_payment: Optional[str] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=10)
    exchange_rate: Optional[Decimal] = Field(default=None, gt=0)
    notes: Optional[str] = None
    particulars: Optional[List[RfpParticularIn]] = None

    version: int


class RfpOut(BaseModel):
    id: int
    rfp_number: str
    reference_no: str
    status: TransactionStatus

    client_id: Optional[int]
    client_name: Optional[str]
    payee_name: str
    requesting_unit: Optional[str]
    rfp_date: date
    due_date: Optional[date]
    mode_of_payment: str
    currency: str
    exchange_rate: Decimal
    amount: Decimal
    notes: Optional[str]

    submitted_by_name: Optional[str]
    submitted_at: Optional[datetime]
    approved_by_name: Optional[str]
    approved_at: Optional[datetime]

    is_deleted: bool
    version: int
    created_by_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    particulars: List[RfpParticularOut]


class RfpListItem(BaseModel):
    id: int
    rfp_number: str
    payee_name: str
    client_name: Optional[str]
    status: TransactionStatus
    rfp_date: date
    currency: str
    amount: Decimal
    is_deleted: bool
    version: int
    created_at: datetime


class RfpListData(BaseModel):
    total: int
    items: List[RfpListItem]
