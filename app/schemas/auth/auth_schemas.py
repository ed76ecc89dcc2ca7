from pydantic import BaseModel, EmailStr
from typing import Optional, Literal

from app.schemas.users.role_schemas import PermissionMap


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str]
    token_type: Literal["bearer"] = "bearer"
    role: str


class CurrentUserOut(BaseModel):
    id: int
    username: str
    full_name: Optional[str]
    role: str
    department: Optional[str]
    permissions: PermissionMap
