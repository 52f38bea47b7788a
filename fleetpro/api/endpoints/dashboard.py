"""
Admin Dashboard Endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle
from fleetpro.models.driver import Driver
from fleetpro.models.maintenance_provider import MaintenanceProvider
from fleetpro.models.work_order import WorkOrder, WorkOrderStatus
from fleetpro.models.inspection import InspectionSchedule
from fleetpro.models.defect import VehicleDefect, UNRESOLVED_DEFECT_STATUSES
from fleetpro.schemas.dashboard import DashboardStats
from fleetpro.api.deps import get_current_tenant, require_admin
from fleetpro.core.scoping import tenant_scope
from fleetpro.services.inspections import apply_view

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

OPEN_WORK_ORDER_STATUSES = (WorkOrderStatus.OPEN.value, WorkOrderStatus.IN_PROGRESS.value)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Headline counts for the current organisation."""

    def count(model):
        return tenant_scope(db.query(model), model, tenant)

    return DashboardStats(
        vehicle_count=count(Vehicle).count(),
        driver_count=count(Driver).count(),
        maintenance_provider_count=count(MaintenanceProvider).count(),
        open_work_orders=count(WorkOrder).filter(
            WorkOrder.status.in_(OPEN_WORK_ORDER_STATUSES)
        ).count(),
        overdue_inspections=apply_view(count(InspectionSchedule), "overdue").count(),
        open_defects=count(VehicleDefect).filter(
            VehicleDefect.status.in_(UNRESOLVED_DEFECT_STATUSES)
        ).count(),
    )
