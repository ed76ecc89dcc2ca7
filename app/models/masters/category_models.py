from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Enum, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin
from app.models.enums.master_data_types import CategoryType


class Category(Base, TimestampMixin, AuditMixin):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    category_name = Column(String(150), nullable=False, unique=True)
    category_type = Column(Enum(CategoryType, name="categorytype"), nullable=False)
    parent_category_id = Column(Integer, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    parent = relationship("Category", remote_side=[id], lazy="noload")

    __table_args__ = (
        Index("idx_categories_type", "category_type"),
        Index("idx_categories_active", "is_active"),
        Index("idx_categories_parent", "parent_category_id"),
    )

    def __repr__(self):
        return f"<Category {self.category_name} type={self.category_type}>"
