# app/schemas/masters/equipment_size_schemas.py

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from app.models.enums.master_data_types import TruckType


# =====================================================
# CONTAINER SIZES
# =====================================================

class ContainerSizeCreate(BaseModel):
    size_name: str = Field(min_length=1, max_length=100)
    size_code: Optional[str] = Field(default=None, max_length=20)
    teu_equivalent: float = Field(default=1.0, gt=0)
    length_ft: Optional[float] = Field(default=None, gt=0)
    width_ft: Optional[float] = Field(default=None, gt=0)
    height_ft: Optional[float] = Field(default=None, gt=0)
    max_weight_kg: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    display_order: int = 0


class ContainerSizeUpdate(BaseModel):
    size_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    size_code: Optional[str] = Field(default=None, max_length=20)
    teu_equivalent: Optional[float] = Field(default=None, gt=0)
    length_ft: Optional[float] = Field(default=None, gt=0)
    width_ft: Optional[float] = Field(default=None, gt=0)
    height_ft: Optional[float] = Field(default=None, gt=0)
    max_weight_kg: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    display_order: Optional[int] = None

    version: int


class ContainerSizeOut(ContainerSizeCreate):
    id: int
    is_active: bool
    version: int
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class ContainerSizeListData(BaseModel):
    total: int
    items: List[ContainerSizeOut]


# =====================================================
# TRUCK SIZES
# =====================================================

class TruckSizeCreate(BaseModel):
    size_name: str = Field(min_length=1, max_length=100)
    size_code: Optional[str] = Field(default=None, max_length=20)
    truck_type: TruckType = TruckType.other
    capacity_tons: Optional[float] = Field(default=None, gt=0)
    length_ft: Optional[float] = Field(default=None, gt=0)
    width_ft: Optional[float] = Field(default=None, gt=0)
    height_ft: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    display_order: int = 0


class TruckSizeUpdate(BaseModel):
    size_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    size_code: Optional[str] = Field(default=None, max_length=20)
    truck_type: Optional[TruckType] = None
    capacity_tons: Optional[float] = Field(default=None, gt=0)
    length_ft: Optional[float] = Field(default=None, gt=0)
    width_ft: Optional[float] = Field(default=None, gt=0)
    height_ft: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None
    display_order: Optional[int] = None

    version: int


class TruckSizeOut(TruckSizeCreate):
    id: int
    is_active: bool
    version: int
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class TruckSizeListData(BaseModel):
    total: int
    items: List[TruckSizeOut]
