"""
Depot Models

Depots are the operating bases of a fleet. Vehicles and drivers are
attached to at most one depot through the depot_vehicles and
depot_drivers join tables.
"""
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Integer, JSON, Index
from datetime import datetime
from fleetpro.database import Base
import uuid


FACILITY_OPTIONS = (
    "fuel_station",
    "maintenance_bay",
    "loading_dock",
    "storage",
    "wash_bay",
    "inspection_area",
    "office_space",
    "canteen",
    "parking",
    "security_gate",
)


def default_operating_hours() -> dict:
    weekday = {"open": "08:00", "close": "18:00"}
    return {
        "monday": dict(weekday),
        "tuesday": dict(weekday),
        "wednesday": dict(weekday),
        "thursday": dict(weekday),
        "friday": dict(weekday),
        "saturday": {"open": "09:00", "close": "17:00"},
        "sunday": {"open": "10:00", "close": "16:00"},
    }


class Depot(Base):
    __tablename__ = "depots"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # {street, city, postcode, country}
    address = Column(JSON, nullable=True)

    contact_person = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    contact_email = Column(String(255), nullable=True)

    operating_hours = Column(JSON, nullable=False, default=default_operating_hours)
    facilities = Column(JSON, nullable=False, default=list)
    capacity = Column(Integer, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_depot_tenant_name', 'tenant_id', 'name'),
    )

    def __repr__(self):
        return f"<Depot {self.name} (tenant={self.tenant_id})>"


class DepotVehicle(Base):
    __tablename__ = "depot_vehicles"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    depot_id = Column(String(36), ForeignKey("depots.id", ondelete="CASCADE"), nullable=False, index=True)
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    assigned_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class DepotDriver(Base):
    __tablename__ = "depot_drivers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    depot_id = Column(String(36), ForeignKey("depots.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(String(36), ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    assigned_at = Column(DateTime, default=datetime.utcnow, nullable=False)
