"""
Work Order Endpoints

Repair jobs for admins and maintenance providers. Moving a job to
in_progress or completed stamps the actual start / end if the caller
didn't supply them.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle
from fleetpro.models.defect import VehicleDefect
from fleetpro.models.work_order import WorkOrder, WorkOrderPriority, WorkOrderStatus
from fleetpro.schemas.work_order import (
    WorkOrderCreate,
    WorkOrderUpdate,
    WorkOrderResponse,
    WorkOrderListResponse,
)
from fleetpro.api.deps import get_current_tenant, require_fleet_staff
from fleetpro.core.exceptions import InvalidInputError
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/work-orders", tags=["work orders"])

_REQUIRED_COLUMNS = {"title", "priority", "status"}


def _check_references(
    db: Session,
    tenant: Tenant,
    vehicle_id: Optional[str] = None,
    defect_id: Optional[str] = None,
    mechanic_id: Optional[str] = None,
) -> None:
    if vehicle_id:
        get_scoped_or_404(db, Vehicle, vehicle_id, tenant, "Vehicle")
    if defect_id:
        defect = get_scoped_or_404(db, VehicleDefect, defect_id, tenant, "Defect")
        if vehicle_id and defect.vehicle_id != vehicle_id:
            raise InvalidInputError("Defect belongs to a different vehicle")
    if mechanic_id:
        get_scoped_or_404(db, User, mechanic_id, tenant, "User")


def _check_schedule(start: Optional[datetime], end: Optional[datetime]) -> None:
    if start and end and end < start:
        raise InvalidInputError("scheduled_end must be after scheduled_start")


@router.get("", response_model=WorkOrderListResponse)
async def list_work_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    work_order_status: Optional[WorkOrderStatus] = Query(None, alias="status"),
    priority: Optional[WorkOrderPriority] = Query(None),
    vehicle_id: Optional[str] = Query(None),
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(WorkOrder), WorkOrder, tenant)
    if work_order_status:
        query = query.filter(WorkOrder.status == work_order_status.value)
    if priority:
        query = query.filter(WorkOrder.priority == priority.value)
    if vehicle_id:
        query = query.filter(WorkOrder.vehicle_id == vehicle_id)

    work_orders, total = paginate(query, page, page_size, WorkOrder.created_at.desc())

    return WorkOrderListResponse(
        work_orders=work_orders, total=total, page=page, page_size=page_size
    )


@router.get("/{work_order_id}", response_model=WorkOrderResponse)
async def get_work_order(
    work_order_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    return get_scoped_or_404(db, WorkOrder, work_order_id, tenant, "Work order")


@router.post("", response_model=WorkOrderResponse, status_code=status.HTTP_201_CREATED)
async def create_work_order(
    work_order_data: WorkOrderCreate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    _check_references(
        db, tenant,
        work_order_data.vehicle_id,
        work_order_data.defect_id,
        work_order_data.assigned_mechanic_id,
    )
    _check_schedule(work_order_data.scheduled_start, work_order_data.scheduled_end)

    data = work_order_data.model_dump()
    data["priority"] = WorkOrderPriority(data["priority"]).value

    work_order = WorkOrder(tenant_id=tenant.id, status=WorkOrderStatus.OPEN.value, **data)

    db.add(work_order)
    db.commit()
    db.refresh(work_order)

    logger.info(f"Work order created: {work_order.id} ({work_order.priority}) by {current_user.id}")

    return work_order


@router.patch("/{work_order_id}", response_model=WorkOrderResponse)
async def update_work_order(
    work_order_id: str,
    work_order_data: WorkOrderUpdate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    work_order = get_scoped_or_404(db, WorkOrder, work_order_id, tenant, "Work order")

    update_data = {
        k: v for k, v in work_order_data.model_dump(exclude_unset=True).items()
        if not (v is None and k in _REQUIRED_COLUMNS)
    }
    _check_references(db, tenant, mechanic_id=update_data.get("assigned_mechanic_id"))
    _check_schedule(
        update_data.get("scheduled_start", work_order.scheduled_start),
        update_data.get("scheduled_end", work_order.scheduled_end),
    )

    for enum_field, enum_type in (("priority", WorkOrderPriority), ("status", WorkOrderStatus)):
        if enum_field in update_data:
            update_data[enum_field] = enum_type(update_data[enum_field]).value

    for field, value in update_data.items():
        setattr(work_order, field, value)

    now = datetime.utcnow()
    if work_order.status == WorkOrderStatus.IN_PROGRESS.value and work_order.actual_start is None:
        work_order.actual_start = now
    if work_order.status == WorkOrderStatus.COMPLETED.value:
        if work_order.actual_start is None:
            work_order.actual_start = now
        if work_order.actual_end is None:
            work_order.actual_end = now

    db.commit()
    db.refresh(work_order)

    logger.info(f"Work order updated: {work_order.id} status={work_order.status} by {current_user.id}")

    return work_order


@router.delete("/{work_order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_work_order(
    work_order_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    work_order = get_scoped_or_404(db, WorkOrder, work_order_id, tenant, "Work order")

    db.delete(work_order)
    db.commit()

    logger.info(f"Work order deleted: {work_order_id} by {current_user.id}")

    return None
