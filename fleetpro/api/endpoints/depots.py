"""
Depot Endpoints

Admins manage the depots of their organisation. Super users list
depots across organisations and create them in a chosen one.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.depot import Depot, default_operating_hours
from fleetpro.schemas.depot import DepotCreate, DepotUpdate, DepotResponse, DepotListResponse
from fleetpro.api.deps import get_current_tenant, require_admin
from fleetpro.core.exceptions import InvalidInputError, TenantNotFoundError
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/depots", tags=["depots"])


@router.get("", response_model=DepotListResponse)
async def list_depots(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    is_active: Optional[bool] = Query(None),
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(Depot), Depot, tenant, current_user, allow_super_user=True)
    if is_active is not None:
        query = query.filter(Depot.is_active == is_active)

    depots, total = paginate(query, page, page_size, Depot.created_at.desc())

    logger.debug(f"Listed {len(depots)} depots for tenant {tenant.id}")

    return DepotListResponse(depots=depots, total=total, page=page, page_size=page_size)


@router.get("/{depot_id}", response_model=DepotResponse)
async def get_depot(
    depot_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    return get_scoped_or_404(db, Depot, depot_id, tenant, "Depot", current_user, allow_super_user=True)


@router.post("", response_model=DepotResponse, status_code=status.HTTP_201_CREATED)
async def create_depot(
    depot_data: DepotCreate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    Create a depot.

    Admins always create in their own organisation. Super users must
    name the organisation with tenant_id.
    """
    data = depot_data.model_dump(exclude={"tenant_id"})

    if current_user.is_super_user:
        if not depot_data.tenant_id:
            raise InvalidInputError("tenant_id is required when creating a depot as super user")
        if not db.query(Tenant).filter(Tenant.id == depot_data.tenant_id).first():
            raise TenantNotFoundError(depot_data.tenant_id)
        tenant_id = depot_data.tenant_id
    else:
        tenant_id = tenant.id

    if data["operating_hours"] is None:
        data["operating_hours"] = default_operating_hours()

    depot = Depot(tenant_id=tenant_id, **data)

    db.add(depot)
    db.commit()
    db.refresh(depot)

    logger.info(f"Depot created: {depot.id} by {current_user.id}", extra={"tenant_id": tenant_id})

    return depot


@router.patch("/{depot_id}", response_model=DepotResponse)
async def update_depot(
    depot_id: str,
    depot_data: DepotUpdate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    depot = get_scoped_or_404(db, Depot, depot_id, tenant, "Depot", current_user, allow_super_user=True)

    update_data = depot_data.model_dump(exclude_unset=True)
    if "operating_hours" in update_data and update_data["operating_hours"] is None:
        update_data["operating_hours"] = default_operating_hours()
    if "facilities" in update_data and update_data["facilities"] is None:
        update_data["facilities"] = []
    for field in ("name", "is_active"):
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for field, value in update_data.items():
        setattr(depot, field, value)

    db.commit()
    db.refresh(depot)

    logger.info(f"Depot updated: {depot.id} by {current_user.id}")

    return depot


@router.delete("/{depot_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_depot(
    depot_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Delete a depot; its vehicle and driver assignments are removed with it."""
    depot = get_scoped_or_404(db, Depot, depot_id, tenant, "Depot", current_user, allow_super_user=True)

    db.delete(depot)
    db.commit()

    logger.info(f"Depot deleted: {depot_id} by {current_user.id}")

    return None
