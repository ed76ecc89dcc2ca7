from sqlalchemy import Column, Integer, String, Boolean, Float, Enum, Index
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, AuditMixin
from app.models.enums.master_data_types import TruckType


class ContainerSize(Base, TimestampMixin, AuditMixin):
    __tablename__ = "container_sizes"

    id = Column(Integer, primary_key=True)
    size_name = Column(String(100), nullable=False, unique=True)
    size_code = Column(String(20), nullable=True, unique=True)
    teu_equivalent = Column(Float, nullable=False, default=1.0)
    length_ft = Column(Float, nullable=True)
    width_ft = Column(Float, nullable=True)
    height_ft = Column(Float, nullable=True)
    max_weight_kg = Column(Float, nullable=True)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("idx_container_sizes_active", "is_active"),
    )

    def __repr__(self):
        return f"<ContainerSize {self.size_code} teu={self.teu_equivalent}>"


class TruckSize(Base, TimestampMixin, AuditMixin):
    __tablename__ = "truck_sizes"

    id = Column(Integer, primary_key=True)
    size_name = Column(String(100), nullable=False, unique=True)
    size_code = Column(String(20), nullable=True, unique=True)
    truck_type = Column(Enum(TruckType, name="trucktype"), nullable=False, default=TruckType.other)
    capacity_tons = Column(Float, nullable=True)
    length_ft = Column(Float, nullable=True)
    width_ft = Column(Float, nullable=True)
    height_ft = Column(Float, nullable=True)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)
    version = Column(Integer, nullable=False, default=1)

    __table_args__ = (
        Index("idx_truck_sizes_active", "is_active"),
        Index("idx_truck_sizes_type", "truck_type"),
    )

    def __repr__(self):
        return f"<TruckSize {self.size_code} type={self.truck_type}>"
