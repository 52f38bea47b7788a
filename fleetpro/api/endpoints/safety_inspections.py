"""
Safety Inspection Endpoints

Logged safety checks (annual, interim, ad hoc) recorded by the
inspector who carried them out.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle
from fleetpro.models.inspection import SafetyInspection, SafetyInspectionType
from fleetpro.schemas.inspection import (
    SafetyInspectionCreate,
    SafetyInspectionResponse,
    SafetyInspectionListResponse,
)
from fleetpro.api.deps import get_current_tenant, require_fleet_staff
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/safety-inspections", tags=["inspections"])


@router.get("", response_model=SafetyInspectionListResponse)
async def list_safety_inspections(
    limit: int = Query(10, ge=1, le=100),
    vehicle_id: Optional[str] = Query(None),
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Most recent safety inspections first."""
    query = tenant_scope(db.query(SafetyInspection), SafetyInspection, tenant)
    if vehicle_id:
        query = query.filter(SafetyInspection.vehicle_id == vehicle_id)

    total = query.count()
    inspections = query.order_by(SafetyInspection.inspection_date.desc()).limit(limit).all()

    return SafetyInspectionListResponse(safety_inspections=inspections, total=total)


@router.post("", response_model=SafetyInspectionResponse, status_code=status.HTTP_201_CREATED)
async def create_safety_inspection(
    inspection_data: SafetyInspectionCreate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    get_scoped_or_404(db, Vehicle, inspection_data.vehicle_id, tenant, "Vehicle")

    inspection = SafetyInspection(
        tenant_id=tenant.id,
        vehicle_id=inspection_data.vehicle_id,
        inspector_id=current_user.id,
        inspection_data={
            "inspection_type": SafetyInspectionType(inspection_data.inspection_type).value,
            "mileage": inspection_data.mileage,
            "inspection_passed": inspection_data.inspection_passed,
            "notes": inspection_data.notes,
        },
        inspection_passed=inspection_data.inspection_passed,
        inspection_date=datetime.utcnow(),
        next_inspection_due=inspection_data.next_inspection_due,
    )

    db.add(inspection)
    db.commit()
    db.refresh(inspection)

    logger.info(
        f"Safety inspection logged: {inspection.id} vehicle={inspection.vehicle_id} "
        f"passed={inspection.inspection_passed} by {current_user.id}"
    )

    return inspection


@router.delete("/{inspection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_safety_inspection(
    inspection_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    inspection = get_scoped_or_404(db, SafetyInspection, inspection_id, tenant, "Safety inspection")

    db.delete(inspection)
    db.commit()

    logger.info(f"Safety inspection deleted: {inspection_id} by {current_user.id}")

    return None
