from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List
from datetime import datetime


# =========================
# CREATE / UPDATE
# =========================
class UserCreateSchema(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    role: str
    full_name: Optional[str] = None
    department: Optional[str] = None


class UserUpdateSchema(BaseModel):
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[str] = None
    full_name: Optional[str] = None
    department: Optional[str] = None
    version: int


class VersionOnlySchema(BaseModel):
    version: int


# =========================
# LIST FILTERS
# =========================
class UserListFilters(BaseModel):
    search: Optional[str] = None
    role: Optional[str] = None
    is_active: Optional[bool] = None
    sort_by: str = "created_at"
    sort_order: str = "desc"
    limit: int = 50
    offset: int = 0


# =========================
# RESPONSE SCHEMAS
# =========================
class UserListItemSchema(BaseModel):
    id: int
    username: EmailStr
    full_name: Optional[str]
    role: str
    department: Optional[str]
    status: str
    is_online: bool
    last_login: Optional[datetime]

    class Config:
        from_attributes = True


class UserListData(BaseModel):
    total: int
    items: List[UserListItemSchema]


class UserDetailSchema(BaseModel):
    id: int
    username: EmailStr
    full_name: Optional[str]
    role: str
    department: Optional[str]
    is_active: bool
    is_online: bool
    last_login: Optional[datetime]
    created_at: datetime
    updated_at: Optional[datetime]
    created_by_admin_id: Optional[int]
    version: int

    class Config:
        from_attributes = True
