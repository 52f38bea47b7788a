"""
Work Order Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone
from fleetpro.models.work_order import WorkOrderPriority, WorkOrderStatus


def _to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Stored columns are naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class WorkOrderCreate(BaseModel):
    vehicle_id: str
    defect_id: Optional[str] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    priority: WorkOrderPriority = WorkOrderPriority.NORMAL
    estimated_cost: Optional[float] = Field(None, ge=0)
    estimated_duration: Optional[int] = Field(None, ge=0)
    assigned_mechanic_id: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None

    naive_schedule = field_validator("scheduled_start", "scheduled_end")(_to_naive_utc)


class WorkOrderUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    priority: Optional[WorkOrderPriority] = None
    status: Optional[WorkOrderStatus] = None
    estimated_cost: Optional[float] = Field(None, ge=0)
    actual_cost: Optional[float] = Field(None, ge=0)
    estimated_duration: Optional[int] = Field(None, ge=0)
    actual_duration: Optional[int] = Field(None, ge=0)
    assigned_mechanic_id: Optional[str] = None
    scheduled_start: Optional[datetime] = None
    scheduled_end: Optional[datetime] = None
    actual_start: Optional[datetime] = None
    actual_end: Optional[datetime] = None

    naive_times = field_validator(
        "scheduled_start", "scheduled_end", "actual_start", "actual_end"
    )(_to_naive_utc)


class WorkOrderResponse(BaseModel):
    id: str
    tenant_id: str
    vehicle_id: str
    defect_id: Optional[str]
    title: str
    description: Optional[str]
    priority: WorkOrderPriority
    status: WorkOrderStatus
    estimated_cost: Optional[float]
    actual_cost: Optional[float]
    estimated_duration: Optional[int]
    actual_duration: Optional[int]
    assigned_mechanic_id: Optional[str]
    scheduled_start: Optional[datetime]
    scheduled_end: Optional[datetime]
    actual_start: Optional[datetime]
    actual_end: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WorkOrderListResponse(BaseModel):
    work_orders: list[WorkOrderResponse]
    total: int
    page: int
    page_size: int
