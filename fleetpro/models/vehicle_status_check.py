"""
Vehicle Status Check Model

Snapshot of a DVLA vehicle enquiry stored against a fleet vehicle.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, JSON
from datetime import datetime
from fleetpro.database import Base
import uuid


class VehicleStatusCheck(Base):
    __tablename__ = "vehicle_status_checks"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    registration = Column(String(20), nullable=False)
    check_date = Column(DateTime, default=datetime.utcnow, nullable=False)

    mot_data = Column(JSON, nullable=True)
    tax_data = Column(JSON, nullable=True)
    mot_valid = Column(Boolean, nullable=False, default=False)
    mot_expires_soon = Column(Boolean, nullable=False, default=False)
    tax_valid = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
