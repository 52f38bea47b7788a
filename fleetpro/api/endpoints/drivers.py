"""
Driver Endpoints

Admin management of driver records and their depot assignment.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session, selectinload
from typing import Optional

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.driver import Driver, DriverStatus
from fleetpro.models.depot import DepotDriver
from fleetpro.schemas.driver import DriverCreate, DriverUpdate, DriverResponse, DriverListResponse
from fleetpro.api.deps import get_current_tenant, require_admin
from fleetpro.core.exceptions import InvalidInputError
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.services.assignments import assign_depot, check_depot, current_depot_id
from fleetpro.services.role_records import check_licence_unique
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/drivers", tags=["drivers"])

_REQUIRED_COLUMNS = {"status", "max_driving_hours", "current_driving_hours"}


def _to_response(db: Session, driver: Driver) -> DriverResponse:
    response = DriverResponse.model_validate(driver)
    response.depot_id = current_depot_id(db, "driver", driver.id)
    return response


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    driver_status: Optional[DriverStatus] = Query(None, alias="status"),
    depot_id: Optional[str] = Query(None),
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(Driver).options(selectinload(Driver.user)), Driver, tenant)
    if driver_status:
        query = query.filter(Driver.status == driver_status.value)
    if depot_id:
        query = query.join(DepotDriver, DepotDriver.driver_id == Driver.id).filter(
            DepotDriver.depot_id == depot_id
        )

    drivers, total = paginate(query, page, page_size, Driver.created_at.desc())

    return DriverListResponse(
        drivers=[_to_response(db, d) for d in drivers],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    driver = get_scoped_or_404(db, Driver, driver_id, tenant, "Driver")
    return _to_response(db, driver)


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Create a driver record for a user of this organisation."""
    get_scoped_or_404(db, User, driver_data.user_id, tenant, "User")
    if db.query(Driver).filter(Driver.user_id == driver_data.user_id).first():
        raise InvalidInputError("User already has a driver record")
    check_licence_unique(db, driver_data.licence_number)
    check_depot(db, tenant, driver_data.depot_id)

    driver = Driver(
        tenant_id=tenant.id,
        **driver_data.model_dump(exclude={"depot_id"})
    )
    db.add(driver)
    db.flush()

    assign_depot(db, "driver", driver.id, driver_data.depot_id, current_user.id)

    db.commit()
    db.refresh(driver)

    logger.info(f"Driver created: {driver.id} by {current_user.id}")

    return _to_response(db, driver)


@router.patch("/{driver_id}", response_model=DriverResponse)
async def update_driver(
    driver_id: str,
    driver_data: DriverUpdate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    driver = get_scoped_or_404(db, Driver, driver_id, tenant, "Driver")

    update_data = driver_data.model_dump(exclude_unset=True)
    depot_changed = "depot_id" in update_data
    depot_id = update_data.pop("depot_id", None)

    if update_data.get("licence_number"):
        check_licence_unique(db, update_data["licence_number"], driver.id)
    if depot_changed:
        check_depot(db, tenant, depot_id)

    for field, value in update_data.items():
        if value is None and field in _REQUIRED_COLUMNS:
            continue
        if field == "status":
            value = DriverStatus(value).value
        setattr(driver, field, value)

    if depot_changed:
        assign_depot(db, "driver", driver.id, depot_id, current_user.id)

    db.commit()
    db.refresh(driver)

    logger.info(f"Driver updated: {driver.id} by {current_user.id}")

    return _to_response(db, driver)


@router.delete("/{driver_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_driver(
    driver_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    driver = get_scoped_or_404(db, Driver, driver_id, tenant, "Driver")

    db.delete(driver)
    db.commit()

    logger.info(f"Driver deleted: {driver_id} by {current_user.id}")

    return None
