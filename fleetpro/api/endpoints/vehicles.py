"""
Vehicle Endpoints

Fleet vehicles for admins and maintenance providers, plus the global
vehicle type list.

Requests may carry dimensions nested or flat (see schemas.vehicle) and
a {lat, lng} location, stored as WKT.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle, VehicleType, VehicleStatus, DIMENSION_KEYS
from fleetpro.models.depot import DepotVehicle
from fleetpro.schemas.vehicle import (
    VehicleCreate,
    VehicleUpdate,
    VehicleResponse,
    VehicleListResponse,
    VehicleTypeResponse,
    merge_dimensions,
)
from fleetpro.api.deps import get_current_tenant, get_current_user, require_fleet_staff
from fleetpro.core.exceptions import InvalidInputError, EntityNotFoundError
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.services.assignments import assign_depot, check_depot, current_depot_id
from fleetpro.services.compliance import to_wkt_point
from fleetpro.services.dvla import normalize_registration
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/vehicles", tags=["vehicles"])
types_router = APIRouter(prefix="/vehicle-types", tags=["vehicles"])

_NON_COLUMN_FIELDS = {"dimensions", "current_location", "depot_id", *DIMENSION_KEYS}
# Explicit nulls for these are ignored on update
_REQUIRED_COLUMNS = {"registration", "make", "model", "fuel_type", "status", "adr_classifications"}


def _to_response(db: Session, vehicle: Vehicle) -> VehicleResponse:
    return VehicleResponse.from_vehicle(vehicle, current_depot_id(db, "vehicle", vehicle.id))


def _check_vehicle_type(db: Session, vehicle_type_id: Optional[str]) -> None:
    if vehicle_type_id and not db.query(VehicleType).filter(VehicleType.id == vehicle_type_id).first():
        raise EntityNotFoundError("Vehicle type", vehicle_type_id)


def _check_registration_unique(db: Session, registration: str, vehicle_id: Optional[str] = None) -> None:
    query = db.query(Vehicle).filter(Vehicle.registration == registration)
    if vehicle_id:
        query = query.filter(Vehicle.id != vehicle_id)
    if query.first():
        raise InvalidInputError(f"Registration already exists: {registration}")


@types_router.get("", response_model=list[VehicleTypeResponse])
async def list_vehicle_types(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return db.query(VehicleType).order_by(VehicleType.name.asc()).all()


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    vehicle_status: Optional[VehicleStatus] = Query(None, alias="status"),
    depot_id: Optional[str] = Query(None),
    search: Optional[str] = Query(None, description="Registration, make or model contains"),
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(Vehicle), Vehicle, tenant)

    if vehicle_status:
        query = query.filter(Vehicle.status == vehicle_status.value)
    if depot_id:
        query = query.join(DepotVehicle, DepotVehicle.vehicle_id == Vehicle.id).filter(
            DepotVehicle.depot_id == depot_id
        )
    if search:
        pattern = f"%{search}%"
        query = query.filter(
            Vehicle.registration.ilike(pattern)
            | Vehicle.make.ilike(pattern)
            | Vehicle.model.ilike(pattern)
        )

    vehicles, total = paginate(query, page, page_size, Vehicle.created_at.desc())

    logger.debug(f"Listed {len(vehicles)} vehicles for tenant {tenant.id}")

    return VehicleListResponse(
        vehicles=[_to_response(db, v) for v in vehicles],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    vehicle = get_scoped_or_404(db, Vehicle, vehicle_id, tenant, "Vehicle")
    return _to_response(db, vehicle)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    data = vehicle_data.model_dump()
    registration = normalize_registration(data["registration"])

    _check_registration_unique(db, registration)
    _check_vehicle_type(db, data["vehicle_type_id"])
    check_depot(db, tenant, data["depot_id"])

    columns = {k: v for k, v in data.items() if k not in _NON_COLUMN_FIELDS}
    columns["registration"] = registration
    columns["dimensions"] = merge_dimensions(data)
    location = data["current_location"]
    columns["current_location"] = to_wkt_point(location["lat"], location["lng"]) if location else None

    vehicle = Vehicle(tenant_id=tenant.id, **columns)
    db.add(vehicle)
    db.flush()

    assign_depot(db, "vehicle", vehicle.id, data["depot_id"], current_user.id)

    db.commit()
    db.refresh(vehicle)

    logger.info(f"Vehicle created: {vehicle.id} ({vehicle.registration}) by {current_user.id}")

    return _to_response(db, vehicle)


@router.patch("/{vehicle_id}", response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: str,
    vehicle_data: VehicleUpdate,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    Update a vehicle.

    Dimension fields are merged over the stored object, so sending just
    max_height keeps the other three.
    """
    vehicle = get_scoped_or_404(db, Vehicle, vehicle_id, tenant, "Vehicle")

    data = vehicle_data.model_dump(exclude_unset=True)

    if data.get("registration"):
        data["registration"] = normalize_registration(data["registration"])
        _check_registration_unique(db, data["registration"], vehicle.id)
    if "vehicle_type_id" in data:
        _check_vehicle_type(db, data["vehicle_type_id"])
    if "depot_id" in data:
        check_depot(db, tenant, data["depot_id"])

    columns = {
        k: v for k, v in data.items()
        if k not in _NON_COLUMN_FIELDS and not (v is None and k in _REQUIRED_COLUMNS)
    }

    if "dimensions" in data or any(k in data for k in DIMENSION_KEYS):
        incoming = merge_dimensions(data) or {}
        if "dimensions" in data and data["dimensions"] is None and not incoming:
            columns["dimensions"] = None
        else:
            stored = vehicle.dimensions or {}
            merged = {k: stored.get(k) for k in DIMENSION_KEYS}
            merged.update({k: v for k, v in incoming.items() if v is not None})
            columns["dimensions"] = merged

    if "current_location" in data:
        location = data["current_location"]
        columns["current_location"] = to_wkt_point(location["lat"], location["lng"]) if location else None

    for field, value in columns.items():
        setattr(vehicle, field, value)

    if "depot_id" in data:
        assign_depot(db, "vehicle", vehicle.id, data["depot_id"], current_user.id)

    db.commit()
    db.refresh(vehicle)

    logger.info(f"Vehicle updated: {vehicle.id} by {current_user.id}")

    return _to_response(db, vehicle)


@router.delete("/{vehicle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vehicle(
    vehicle_id: str,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Delete a vehicle with its inspections, defects, work orders and checks."""
    vehicle = get_scoped_or_404(db, Vehicle, vehicle_id, tenant, "Vehicle")

    db.delete(vehicle)
    db.commit()

    logger.info(f"Vehicle deleted: {vehicle_id} by {current_user.id}")

    return None
