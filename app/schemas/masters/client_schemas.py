# app/schemas/masters/client_schemas.py

from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime


class ClientBase(BaseModel):
    client_name: str = Field(min_length=1, max_length=255)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_terms: str = "Net 30 Days"
    credit_limit: Decimal = Field(default=Decimal("0.00"), ge=0)


class ClientCreate(ClientBase):
    client_code: str = Field(min_length=1, max_length=50)


class ClientUpdate(BaseModel):
    client_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contact_person: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_terms: Optional[str] = None
    credit_limit: Optional[Decimal] = Field(default=None, ge=0)

    version: int


class ClientOut(ClientBase):
    id: int
    client_code: str
    email: Optional[str] = None
    is_active: bool
    version: int

    created_by: Optional[int]
    updated_by: Optional[int]
    created_by_name: Optional[str]
    updated_by_name: Optional[str]

    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ClientListData(BaseModel):
    total: int
    items: List[ClientOut]
