from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from app.models.approvals.approval_matrix_models import ALL_DEPARTMENTS
from app.models.enums.transaction_type import TransactionType

# the matrix screen posts camelCase; snake_case is accepted too
_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApproverLevelIn(BaseModel):
    model_config = _CAMEL

    role: str = Field(min_length=1, max_length=50)
    user_id: Optional[int] = None
    required: bool = True
    can_delegate: bool = False


class ApprovalRuleIn(BaseModel):
    """Levels are numbered from the order of `approvers`, starting at 1."""

    model_config = _CAMEL

    transaction_type: TransactionType
    department: str = Field(default=ALL_DEPARTMENTS, min_length=1, max_length=100)
    min_amount: Decimal = Field(default=Decimal("0"), ge=0)
    max_amount: Optional[Decimal] = Field(default=None, gt=0)
    is_active: bool = Field(default=True, alias="active")
    approvers: List[ApproverLevelIn] = Field(min_length=1)


class ApprovalRuleUpdate(ApprovalRuleIn):
    version: int


class ApproverLevelOut(BaseModel):
    level: int
    role: str
    user_id: Optional[int]
    user_name: Optional[str]
    required: bool
    can_delegate: bool


class ApprovalRuleOut(BaseModel):
    id: int
    transaction_type: TransactionType
    department: str
    min_amount: Decimal
    max_amount: Optional[Decimal]
    is_active: bool
    version: int
    approvers: List[ApproverLevelOut]
    created_by_name: Optional[str]
    updated_by_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]


class ApprovalRuleListData(BaseModel):
    total: int
    items: List[ApprovalRuleOut]
