"""
Work Order Model

A repair or service job against a vehicle, optionally raised from a
reported defect.
"""
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Integer, Numeric, Index
from datetime import datetime
from fleetpro.database import Base
import uuid
import enum


class WorkOrderPriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class WorkOrderStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    vehicle_id = Column(String(36), ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    defect_id = Column(String(36), ForeignKey("vehicle_defects.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String(20), nullable=False, default=WorkOrderPriority.NORMAL.value)
    status = Column(String(20), nullable=False, default=WorkOrderStatus.OPEN.value, index=True)

    estimated_cost = Column(Numeric(10, 2), nullable=True)
    actual_cost = Column(Numeric(10, 2), nullable=True)
    # Minutes
    estimated_duration = Column(Integer, nullable=True)
    actual_duration = Column(Integer, nullable=True)

    assigned_mechanic_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    scheduled_start = Column(DateTime, nullable=True)
    scheduled_end = Column(DateTime, nullable=True)
    actual_start = Column(DateTime, nullable=True)
    actual_end = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_work_order_tenant_status', 'tenant_id', 'status'),
    )

    def __repr__(self):
        return f"<WorkOrder {self.title} ({self.status})>"
