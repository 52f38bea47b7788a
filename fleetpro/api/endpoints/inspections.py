"""
Inspection Schedule Endpoints

Planned inspections for admins and maintenance providers: CRUD, the
overdue / this-week / completed views, recurring scheduling, and
recording the outcome.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session, selectinload
from typing import Optional
from datetime import datetime

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle
from fleetpro.models.maintenance_provider import MaintenanceProvider
from fleetpro.models.inspection import InspectionSchedule, InspectionCompletion, InspectionType
from fleetpro.models.defect import VehicleDefect, DefectStatus
from fleetpro.schemas.inspection import (
    InspectionScheduleCreate,
    InspectionScheduleUpdate,
    InspectionScheduleResponse,
    InspectionScheduleListResponse,
    RecurringInspectionCreate,
    CompleteInspectionRequest,
    CompleteInspectionResponse,
)
from fleetpro.api.deps import get_current_tenant, require_fleet_staff
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.services.inspections import (
    VIEWS,
    apply_view,
    next_inspection_date,
    count_unresolved_defects,
    validate_completion,
)
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/inspections", tags=["inspections"])

_VIEW_PATTERN = "^(" + "|".join(VIEWS) + ")$"


def _load_options():
    return (
        selectinload(InspectionSchedule.vehicle),
        selectinload(InspectionSchedule.maintenance_provider),
        selectinload(InspectionSchedule.completion),
    )


def _check_references(db: Session, tenant: Tenant, vehicle_id: Optional[str], provider_id: Optional[str]) -> None:
    if vehicle_id:
        get_scoped_or_404(db, Vehicle, vehicle_id, tenant, "Vehicle")
    if provider_id:
        get_scoped_or_404(db, MaintenanceProvider, provider_id, tenant, "Maintenance provider")


@router.get("", response_model=InspectionScheduleListResponse)
async def list_inspections(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    view: str = Query("all", pattern=_VIEW_PATTERN),
    vehicle_id: Optional[str] = Query(None),
    inspection_type: Optional[InspectionType] = Query(None),
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    List inspection schedules, soonest first.

    view: all | overdue | this_week | scheduled | completed | failed
    """
    query = tenant_scope(
        db.query(InspectionSchedule).options(*_load_options()), InspectionSchedule, tenant
    )
    query = apply_view(query, view)
    if vehicle_id:
        query = query.filter(InspectionSchedule.vehicle_id == vehicle_id)
    if inspection_type:
        query = query.filter(InspectionSchedule.inspection_type == inspection_type.value)

    inspections, total = paginate(
        query, page, page_size,
        InspectionSchedule.scheduled_date.asc(), InspectionSchedule.created_at.asc()
    )

    logger.debug(f"Listed {len(inspections)} inspections ({view}) for tenant {tenant.id}")

    return InspectionScheduleListResponse(
        inspections=inspections, total=total, page=page, page_size=page_size
    )


@router.get("/{inspection_id}", response_model=InspectionScheduleResponse)
async def get_inspection(
    inspection_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    return get_scoped_or_404(db, InspectionSchedule, inspection_id, tenant, "Inspection")


@router.post("", response_model=InspectionScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_inspection(
    inspection_data: InspectionScheduleCreate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    _check_references(db, tenant, inspection_data.vehicle_id, inspection_data.maintenance_provider_id)

    data = inspection_data.model_dump()
    data["inspection_type"] = InspectionType(data["inspection_type"]).value
    inspection = InspectionSchedule(tenant_id=tenant.id, **data)

    db.add(inspection)
    db.commit()
    db.refresh(inspection)

    logger.info(
        f"Inspection scheduled: {inspection.id} ({inspection.inspection_type} on "
        f"{inspection.scheduled_date}) by {current_user.id}"
    )

    return inspection


@router.post("/recurring", response_model=InspectionScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_recurring_inspection(
    recurring_data: RecurringInspectionCreate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    Schedule the next occurrence of a recurring inspection.

    The date is frequency_weeks after the vehicle's latest active
    inspection of that type, or after today if there is none.
    """
    _check_references(db, tenant, recurring_data.vehicle_id, recurring_data.maintenance_provider_id)

    inspection_type = InspectionType(recurring_data.inspection_type).value
    scheduled_date = next_inspection_date(
        db,
        tenant.id,
        recurring_data.vehicle_id,
        inspection_type,
        recurring_data.frequency_weeks,
    )

    inspection = InspectionSchedule(
        tenant_id=tenant.id,
        vehicle_id=recurring_data.vehicle_id,
        maintenance_provider_id=recurring_data.maintenance_provider_id,
        inspection_type=inspection_type,
        scheduled_date=scheduled_date,
        frequency_weeks=recurring_data.frequency_weeks,
        notes=recurring_data.notes,
        is_active=True,
    )

    db.add(inspection)
    db.commit()
    db.refresh(inspection)

    logger.info(f"Recurring inspection scheduled: {inspection.id} for {scheduled_date}")

    return inspection


@router.patch("/{inspection_id}", response_model=InspectionScheduleResponse)
async def update_inspection(
    inspection_id: str,
    inspection_data: InspectionScheduleUpdate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    inspection = get_scoped_or_404(db, InspectionSchedule, inspection_id, tenant, "Inspection")

    update_data = inspection_data.model_dump(exclude_unset=True)
    _check_references(db, tenant, None, update_data.get("maintenance_provider_id"))

    for field, value in update_data.items():
        if value is None and field in ("inspection_type", "scheduled_date", "frequency_weeks", "is_active"):
            continue
        if field == "inspection_type":
            value = InspectionType(value).value
        setattr(inspection, field, value)

    db.commit()
    db.refresh(inspection)

    logger.info(f"Inspection updated: {inspection.id} by {current_user.id}")

    return inspection


@router.post("/{inspection_id}/complete", response_model=CompleteInspectionResponse)
async def complete_inspection(
    inspection_id: str,
    completion_data: CompleteInspectionRequest,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    Record the outcome of an inspection.

    New defects found during the inspection are logged as open defects
    against the vehicle.
    """
    inspection = get_scoped_or_404(db, InspectionSchedule, inspection_id, tenant, "Inspection")

    validate_completion(
        inspection,
        completion_data.inspection_passed,
        [d.defect_type for d in completion_data.defects],
        count_unresolved_defects(db, tenant.id, inspection.vehicle_id),
    )

    completion = InspectionCompletion(
        tenant_id=tenant.id,
        inspection_schedule_id=inspection.id,
        completed_by=current_user.id,
        inspection_passed=completion_data.inspection_passed,
        notes=completion_data.notes,
        completed_at=datetime.utcnow(),
    )
    db.add(completion)

    defects = []
    for defect_data in completion_data.defects:
        defect = VehicleDefect(
            tenant_id=tenant.id,
            vehicle_id=inspection.vehicle_id,
            inspection_schedule_id=inspection.id,
            defect_type=defect_data.defect_type.value,
            description=defect_data.description,
            status=DefectStatus.OPEN.value,
            reported_by=current_user.id,
        )
        db.add(defect)
        defects.append(defect)

    db.commit()
    db.refresh(completion)
    for defect in defects:
        db.refresh(defect)

    logger.info(
        f"Inspection completed: {inspection.id} passed={completion.inspection_passed} "
        f"defects={len(defects)} by {current_user.id}"
    )

    return CompleteInspectionResponse(completion=completion, defects=defects)


@router.delete("/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_inspection(
    inspection_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    inspection = get_scoped_or_404(db, InspectionSchedule, inspection_id, tenant, "Inspection")

    db.delete(inspection)
    db.commit()

    logger.info(f"Inspection deleted: {inspection_id} by {current_user.id}")

    return None
