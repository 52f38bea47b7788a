"""
Vehicle Models

Vehicles are tenant-scoped. Vehicle types are a global reference table
shared by every tenant.
"""
from sqlalchemy import Column, String, Text, DateTime, Date, ForeignKey, Integer, Float, JSON, Index
from sqlalchemy.orm import relationship
from datetime import datetime
from fleetpro.database import Base
import uuid
import enum


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"


DIMENSION_KEYS = ("max_weight", "max_height", "max_length", "max_width")


class VehicleType(Base):
    __tablename__ = "vehicle_types"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)

    # Weight in kg, lengths in metres
    max_weight = Column(Float, nullable=True)
    max_height = Column(Float, nullable=True)
    max_length = Column(Float, nullable=True)
    max_width = Column(Float, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<VehicleType {self.name}>"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    registration = Column(String(20), unique=True, nullable=False, index=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=True)

    vehicle_type_id = Column(String(36), ForeignKey("vehicle_types.id"), nullable=True)

    # {max_weight, max_height, max_length, max_width}
    dimensions = Column(JSON, nullable=True)
    adr_classifications = Column(JSON, nullable=False, default=list)
    fuel_type = Column(String(50), nullable=False, default="diesel")
    status = Column(String(20), nullable=False, default=VehicleStatus.AVAILABLE.value, index=True)

    # WKT, e.g. "POINT(-1.8904 52.4862)"
    current_location = Column(String(100), nullable=True)

    tax_due_date = Column(Date, nullable=True)
    mot_due_date = Column(Date, nullable=True)
    tacho_expiry_date = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    vehicle_type = relationship("VehicleType")

    __table_args__ = (
        Index('idx_vehicle_tenant_status', 'tenant_id', 'status'),
    )

    def __repr__(self):
        return f"<Vehicle {self.registration} (tenant={self.tenant_id})>"
