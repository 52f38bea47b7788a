"""
Vehicle Defect Model
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from datetime import datetime
from fleetpro.database import Base
import uuid
import enum


class DefectType(str, enum.Enum):
    MINOR = "minor"
    MAJOR = "major"
    CRITICAL = "critical"


class DefectStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CLOSED = "closed"


# A vehicle with defects in these states can't pass a new inspection
UNRESOLVED_DEFECT_STATUSES = (DefectStatus.OPEN.value, DefectStatus.IN_PROGRESS.value)


class VehicleDefect(Base):
    __tablename__ = "vehicle_defects"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    inspection_schedule_id = Column(
        String(36),
        ForeignKey("inspection_schedules.id", ondelete="SET NULL"),
        nullable=True
    )

    defect_type = Column(String(20), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String(20), nullable=False, default=DefectStatus.OPEN.value)
    reported_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_defect_vehicle_status', 'vehicle_id', 'status'),
    )

    def __repr__(self):
        return f"<VehicleDefect {self.defect_type} (vehicle={self.vehicle_id})>"
