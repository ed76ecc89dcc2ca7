from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from decimal import Decimal
from datetime import datetime, date

from app.models.enums.transaction_status import TransactionStatus

# =====================================================
# ITEM PAYLOADS
# =====================================================

class QuotationItemIn(BaseModel):
    description: str = ""
    category: Literal["receipted", "non-receipted"] = "non-receipted"
    warehouse: Optional[str] = None
    container_size: Optional[str] = None
    equipment_type: Optional[str] = None
    currency: str = Field(default="PHP", min_length=3, max_length=10)
    quantity: Decimal = Field(default=Decimal("1"), gt=0)
    unit: str = "pcs"
    rate: Decimal = Field(default=Decimal("0"), ge=0)


class QuotationItemOut(BaseModel):
    id: int
    item_sequence: int
    description: str
    category: str
    warehouse: Optional[str]
    container_size: Optional[str]
    equipment_type: Optional[str]
    currency: str
    quantity: Decimal
    unit: str
    rate: Decimal
    amount: Decimal

    class Config:
        from_attributes = True


# =====================================================
# QUOTATION CREATE / UPDATE
# =====================================================

class QuotationCreate(BaseModel):
    client_id: int
    booking_no: Optional[str] = None
    quotation_date: Optional[date] = None
    valid_until: Optional[date] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    base_currency: str = Field(default="PHP", min_length=3, max_length=10)
    exchange_rate: Decimal = Field(default=Decimal("1"), gt=0)
    service_description: Optional[str] = None
    notes: Optional[str] = None
    contact_person: Optional[str] = None
    payment_term: Optional[str] = None
    items: List[QuotationItemIn] = Field(default_factory=list)


class QuotationUpdate(BaseModel):
    client_id: Optional[int] = None
    booking_no: Optional[str] = None
    quotation_date: Optional[date] = None
    valid_until: Optional[date] = None
    origin: Optional[str] = None
    destination: Optional[str] = None
    base_currency: Optional[str] = Field(default=None, min_length=3, max_length=10)
    exchange_rate: Optional[Decimal] = Field(default=None, gt=0)
    service_description: Optional[str] = None
    notes: Optional[str] = None
    contact_person: Optional[str] = None
    payment_term: Optional[str] = None
    items: Optional[List[QuotationItemIn]] = None

    version: int


# =====================================================
# QUOTATION RESPONSES
# =====================================================

class QuotationOut(BaseModel):
    id: int
    quotation_number: str
    reference_no: str
    status: TransactionStatus

    client_id: int
    client_code: Optional[str]
    client_name: Optional[str]
    client_contact_person: Optional[str]
    client_email: Optional[str]
    client_phone: Optional[str]
    client_address: Optional[str]

    booking_no: Optional[str]
    quotation_date: date
    valid_until: Optional[date]
    origin: Optional[str]
    destination: Optional[str]
    base_currency: str
    exchange_rate: Decimal
    service_description: Optional[str]
    notes: Optional[str]
    contact_person: Optional[str]
    payment_term: Optional[str]

    receipted_total: Decimal
    non_receipted_total: Decimal
    total_amount: Decimal

    submitted_by_name: Optional[str]
    submitted_at: Optional[datetime]
    approved_by_name: Optional[str]
    approved_at: Optional[datetime]

    is_deleted: bool
    version: int
    created_by_name: Optional[str]
    updated_by_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    items: List[QuotationItemOut]


class QuotationListItem(BaseModel):
    id: int
    quotation_number: str
    client_name: Optional[str]
    status: TransactionStatus
    quotation_date: date
    valid_until: Optional[date]
    base_currency: str
    total_amount: Decimal
    items_count: int
    is_deleted: bool
    version: int
    created_at: datetime


class QuotationListData(BaseModel):
    total: int
    items: List[QuotationListItem]


class QuotationStats(BaseModel):
    total: int
    draft: int
    pending_approval: int
    approved: int
    rejected: int
    approved_value: Decimal


# =====================================================
# WORKFLOW
# =====================================================

class TransitionRequest(BaseModel):
    comments: Optional[str] = None
    version: Optional[int] = None
