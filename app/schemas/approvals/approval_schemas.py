from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from decimal import Decimal
from datetime import datetime

from app.models.enums.approval_action import ApprovalAction
from app.models.enums.transaction_status import TransactionStatus
from app.models.enums.transaction_type import TransactionType


class ApprovalDecisionRequest(BaseModel):
    """Body of approve / reject. Accepts ``isOverride`` as well."""

    model_config = ConfigDict(populate_by_name=True)

    comments: Optional[str] = None
    is_override: bool = Field(default=False, alias="isOverride")
    version: Optional[int] = None


class ApprovalItem(BaseModel):
    id: int
    type: TransactionType
    reference_no: str
    client_name: Optional[str]
    amount: Decimal
    currency: str
    exchange_rate: Decimal
    submitted_by: Optional[str]
    submitted_date: Optional[datetime]
    status: TransactionStatus
    priority: str
    booking_no: Optional[str]
    description: Optional[str]
    version: int


class ApprovalStats(BaseModel):
    total: int
    pending_approvals: int
    approved: int
    rejected: int


class ApprovalHistoryOut(BaseModel):
    approval_id: int
    transaction_type: TransactionType
    transaction_id: int
    reference_no: str
    action: ApprovalAction
    action_by: Optional[int]
    action_by_name: str
    action_at: datetime
    comments: Optional[str]
    previous_status: Optional[TransactionStatus]
    new_status: TransactionStatus
    is_override: bool

    class Config:
        from_attributes = True


class ApprovalResult(BaseModel):
    id: int
    type: TransactionType
    reference_no: str
    status: TransactionStatus
    version: int
    history: ApprovalHistoryOut


class ApprovalListData(BaseModel):
    total: int
    items: List[ApprovalItem]
