from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime


PermissionMap = Dict[str, List[str]]


class RoleCreate(BaseModel):
    role_code: str = Field(min_length=2, max_length=50, pattern=r"^[a-z][a-z0-9_]*$")
    role_name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = None
    permissions: PermissionMap = Field(default_factory=dict)


class RoleUpdate(BaseModel):
    role_name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = None
    is_active: Optional[bool] = None


class RolePermissionsUpdate(BaseModel):
    permissions: PermissionMap


class RoleOut(BaseModel):
    id: int
    role_code: str
    role_name: str
    description: Optional[str]
    is_active: bool
    user_count: int = 0
    permissions: PermissionMap = Field(default_factory=dict)
    created_at: datetime

    class Config:
        from_attributes = True


class PermissionCatalogOut(BaseModel):
    modules: PermissionMap
