# app/schemas/masters/category_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.enums.master_data_types import CategoryType


class CategoryCreate(BaseModel):
    category_name: str = Field(min_length=1, max_length=150)
    category_type: CategoryType
    parent_category_id: Optional[int] = None
    description: Optional[str] = None
    display_order: int = 0


class CategoryUpdate(BaseModel):
    category_name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    category_type: Optional[CategoryType] = None
    parent_category_id: Optional[int] = None
    description: Optional[str] = None
    display_order: Optional[int] = None

    version: int


class CategoryOut(BaseModel):
    id: int
    category_name: str
    category_type: CategoryType
    parent_category_id: Optional[int]
    description: Optional[str]
    display_order: int
    is_active: bool
    version: int
    created_by_name: Optional[str]
    updated_by_name: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class CategoryListData(BaseModel):
    total: int
    items: List[CategoryOut]
