"""
Maintenance Provider Endpoints

Admin management of the garages and mechanics that service the fleet.
Input accepts both field-name generations (see
schemas.maintenance_provider); responses carry both.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import Optional

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.maintenance_provider import MaintenanceProvider
from fleetpro.schemas.maintenance_provider import (
    MaintenanceProviderCreate,
    MaintenanceProviderUpdate,
    MaintenanceProviderResponse,
    MaintenanceProviderListResponse,
    normalize_provider_fields,
)
from fleetpro.api.deps import get_current_tenant, require_admin
from fleetpro.core.exceptions import InvalidInputError
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/maintenance-providers", tags=["maintenance providers"])


def _check_user(db: Session, tenant: Tenant, user_id: Optional[str]) -> None:
    if user_id:
        get_scoped_or_404(db, User, user_id, tenant, "User")


@router.get("", response_model=MaintenanceProviderListResponse)
async def list_maintenance_providers(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    is_active: Optional[bool] = Query(None),
    specialization: Optional[str] = Query(None),
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(MaintenanceProvider), MaintenanceProvider, tenant)
    if is_active is not None:
        query = query.filter(MaintenanceProvider.is_active == is_active)

    if specialization:
        # JSON list column; filtered in Python to stay portable across backends
        providers = [
            p for p in query.order_by(MaintenanceProvider.created_at.desc()).all()
            if specialization in (p.specializations or [])
        ]
        total = len(providers)
        start = (page - 1) * page_size
        providers = providers[start:start + page_size]
    else:
        providers, total = paginate(query, page, page_size, MaintenanceProvider.created_at.desc())

    return MaintenanceProviderListResponse(
        maintenance_providers=providers, total=total, page=page, page_size=page_size
    )


@router.get("/{provider_id}", response_model=MaintenanceProviderResponse)
async def get_maintenance_provider(
    provider_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    return get_scoped_or_404(db, MaintenanceProvider, provider_id, tenant, "Maintenance provider")


@router.post("", response_model=MaintenanceProviderResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance_provider(
    provider_data: MaintenanceProviderCreate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    columns = normalize_provider_fields(provider_data.model_dump())
    _check_user(db, tenant, columns.get("user_id"))

    provider = MaintenanceProvider(tenant_id=tenant.id, **columns)

    db.add(provider)
    db.commit()
    db.refresh(provider)

    logger.info(f"Maintenance provider created: {provider.id} by {current_user.id}")

    return provider


@router.patch("/{provider_id}", response_model=MaintenanceProviderResponse)
async def update_maintenance_provider(
    provider_id: str,
    provider_data: MaintenanceProviderUpdate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    provider = get_scoped_or_404(db, MaintenanceProvider, provider_id, tenant, "Maintenance provider")

    columns = normalize_provider_fields(provider_data.model_dump(exclude_unset=True))
    if "name" in columns and not columns["name"]:
        raise InvalidInputError("Company name cannot be empty")
    if "specializations" in columns and columns["specializations"] is None:
        columns["specializations"] = []
    if "is_active" in columns and columns["is_active"] is None:
        del columns["is_active"]
    _check_user(db, tenant, columns.get("user_id"))

    for field, value in columns.items():
        setattr(provider, field, value)

    db.commit()
    db.refresh(provider)

    logger.info(f"Maintenance provider updated: {provider.id} by {current_user.id}")

    return provider


@router.post("/{provider_id}/toggle-active", response_model=MaintenanceProviderResponse)
async def toggle_maintenance_provider(
    provider_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    provider = get_scoped_or_404(db, MaintenanceProvider, provider_id, tenant, "Maintenance provider")

    provider.is_active = not provider.is_active
    db.commit()
    db.refresh(provider)

    logger.info(
        f"Maintenance provider {'activated' if provider.is_active else 'deactivated'}: "
        f"{provider.id} by {current_user.id}"
    )

    return provider


@router.delete("/{provider_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_maintenance_provider(
    provider_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Delete a provider; inspections assigned to it become unassigned."""
    provider = get_scoped_or_404(db, MaintenanceProvider, provider_id, tenant, "Maintenance provider")

    db.delete(provider)
    db.commit()

    logger.info(f"Maintenance provider deleted: {provider_id} by {current_user.id}")

    return None
