from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint, Index
from app.core.db import Base
from app.models.base.mixins import TimestampMixin


class Role(Base, TimestampMixin):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    role_code = Column(String(50), unique=True, nullable=False, index=True)
    role_name = Column(String(100), unique=True, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    def __repr__(self):
        return f"<Role {self.role_code} active={self.is_active}>"


class RolePermission(Base, TimestampMixin):
    __tablename__ = "role_permissions"

    id = Column(Integer, primary_key=True)
    role_code = Column(String(50), ForeignKey("roles.role_code", ondelete="CASCADE"), nullable=False)
    module_id = Column(String(50), nullable=False)
    action = Column(String(30), nullable=False)
    is_granted = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("role_code", "module_id", "action", name="uq_role_permission"),
        Index("ix_role_permissions_role", "role_code"),
    )

    def __repr__(self):
        return f"<RolePermission {self.role_code}:{self.module_id}.{self.action}>"
