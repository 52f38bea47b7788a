"""
Inspection Models

InspectionSchedule: a planned inspection of a vehicle, repeating every
frequency_weeks. InspectionCompletion: the outcome recorded by the
provider. SafetyInspection: an ad-hoc or periodic safety check logged
directly by an inspector.
"""
from sqlalchemy import (
    Column, String, Text, Boolean, DateTime, Date, ForeignKey, Integer, JSON, Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime
from fleetpro.database import Base
import uuid
import enum


class InspectionType(str, enum.Enum):
    SAFETY_INSPECTION = "safety_inspection"
    TAX = "tax"
    MOT = "mot"
    TACHO_CALIBRATION = "tacho_calibration"


class SafetyInspectionType(str, enum.Enum):
    ANNUAL = "annual"
    INTERIM = "interim"
    AD_HOC = "ad_hoc"


class InspectionSchedule(Base):
    __tablename__ = "inspection_schedules"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    maintenance_provider_id = Column(
        String(36),
        ForeignKey("maintenance_providers.id", ondelete="SET NULL"),
        nullable=True
    )

    inspection_type = Column(String(50), nullable=False)
    scheduled_date = Column(Date, nullable=False, index=True)
    frequency_weeks = Column(Integer, nullable=False, default=26)
    notes = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    vehicle = relationship("Vehicle")
    maintenance_provider = relationship("MaintenanceProvider")
    completion = relationship(
        "InspectionCompletion",
        back_populates="inspection_schedule",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint('frequency_weeks >= 1 AND frequency_weeks <= 104', name='ck_inspection_frequency'),
        Index('idx_inspection_vehicle_type', 'vehicle_id', 'inspection_type', 'is_active'),
    )

    def __repr__(self):
        return f"<InspectionSchedule {self.inspection_type} {self.scheduled_date} (vehicle={self.vehicle_id})>"


class InspectionCompletion(Base):
    __tablename__ = "inspection_completions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    inspection_schedule_id = Column(
        String(36),
        ForeignKey("inspection_schedules.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    completed_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    inspection_passed = Column(Boolean, nullable=False)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    inspection_schedule = relationship("InspectionSchedule", back_populates="completion")


class SafetyInspection(Base):
    __tablename__ = "safety_inspections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    inspector_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    # {inspection_type, mileage, inspection_passed, ...}
    inspection_data = Column(JSON, nullable=False, default=dict)
    inspection_passed = Column(Boolean, nullable=False)
    inspection_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    next_inspection_due = Column(Date, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
