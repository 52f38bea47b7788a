"""
Driver Model

A driver is the licence and duty record attached to a user with the
driver role.
"""
from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Float
from sqlalchemy.orm import relationship
from datetime import datetime
from fleetpro.database import Base
import uuid
import enum


class DriverStatus(str, enum.Enum):
    AVAILABLE = "available"
    ON_DUTY = "on_duty"
    ON_BREAK = "on_break"
    OFF_DUTY = "off_duty"


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )

    # NULL until the invited driver fills in their licence details
    licence_number = Column(String(50), unique=True, nullable=True)
    licence_expiry = Column(Date, nullable=True)
    cpc_expiry = Column(Date, nullable=True)
    tacho_card_expiry = Column(Date, nullable=True)

    status = Column(String(20), nullable=False, default=DriverStatus.AVAILABLE.value)
    max_driving_hours = Column(Float, nullable=False, default=9.0)
    current_driving_hours = Column(Float, nullable=False, default=0.0)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="driver")

    def __repr__(self):
        return f"<Driver {self.licence_number} (tenant={self.tenant_id})>"
