"""
Vehicle Defect Endpoints

Drivers, admins and maintenance providers report defects; admins and
providers move them through open -> in_progress -> completed / closed.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from fleetpro.database import get_db
from fleetpro.models.user import User, UserRole
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle
from fleetpro.models.defect import VehicleDefect, DefectStatus, DefectType
from fleetpro.schemas.defect import (
    DefectCreate,
    DefectStatusUpdate,
    DefectResponse,
    DefectListResponse,
)
from fleetpro.api.deps import get_current_tenant, require_roles, require_fleet_staff
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/defects", tags=["defects"])

require_reporter = require_roles(UserRole.ADMIN, UserRole.MAINTENANCE_PROVIDER, UserRole.DRIVER)


@router.get("", response_model=DefectListResponse)
async def list_defects(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    vehicle_id: Optional[str] = Query(None),
    defect_status: Optional[DefectStatus] = Query(None, alias="status"),
    defect_type: Optional[DefectType] = Query(None),
    current_user: User = Depends(require_reporter),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(VehicleDefect), VehicleDefect, tenant)
    if vehicle_id:
        query = query.filter(VehicleDefect.vehicle_id == vehicle_id)
    if defect_status:
        query = query.filter(VehicleDefect.status == defect_status.value)
    if defect_type:
        query = query.filter(VehicleDefect.defect_type == defect_type.value)

    defects, total = paginate(query, page, page_size, VehicleDefect.created_at.desc())

    return DefectListResponse(defects=defects, total=total, page=page, page_size=page_size)


@router.post("", response_model=DefectResponse, status_code=status.HTTP_201_CREATED)
async def report_defect(
    defect_data: DefectCreate,
    current_user: User = Depends(require_reporter),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    get_scoped_or_404(db, Vehicle, defect_data.vehicle_id, tenant, "Vehicle")

    defect = VehicleDefect(
        tenant_id=tenant.id,
        vehicle_id=defect_data.vehicle_id,
        defect_type=defect_data.defect_type.value,
        description=defect_data.description,
        status=DefectStatus.OPEN.value,
        reported_by=current_user.id,
    )

    db.add(defect)
    db.commit()
    db.refresh(defect)

    logger.info(
        f"Defect reported: {defect.id} ({defect.defect_type}) vehicle={defect.vehicle_id} "
        f"by {current_user.id}"
    )

    return defect


@router.patch("/{defect_id}/status", response_model=DefectResponse)
async def update_defect_status(
    defect_id: str,
    status_data: DefectStatusUpdate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    defect = get_scoped_or_404(db, VehicleDefect, defect_id, tenant, "Defect")

    previous = defect.status
    defect.status = status_data.status.value

    db.commit()
    db.refresh(defect)

    logger.info(f"Defect {defect.id} status {previous} -> {defect.status} by {current_user.id}")

    return defect
