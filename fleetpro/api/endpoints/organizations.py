"""
Organization Endpoints

Super-user management of tenants. Deleting an organisation removes all
of its fleet data through ON DELETE CASCADE.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.schemas.organization import (
    OrganizationCreate,
    OrganizationUpdate,
    OrganizationResponse,
    OrganizationListResponse,
)
from fleetpro.api.deps import require_super_user
from fleetpro.core.exceptions import TenantNotFoundError, InvalidInputError
from fleetpro.core.scoping import paginate
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/organizations", tags=["organizations"])


def _get_organization(db: Session, organization_id: str) -> Tenant:
    organization = db.query(Tenant).filter(Tenant.id == organization_id).first()
    if not organization:
        raise TenantNotFoundError(organization_id)
    return organization


@router.get("", response_model=OrganizationListResponse)
async def list_organizations(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    current_user: User = Depends(require_super_user),
    db: Session = Depends(get_db)
):
    organizations, total = paginate(db.query(Tenant), page, page_size, Tenant.name.asc())
    return OrganizationListResponse(
        organizations=organizations, total=total, page=page, page_size=page_size
    )


@router.get("/{organization_id}", response_model=OrganizationResponse)
async def get_organization(
    organization_id: str,
    current_user: User = Depends(require_super_user),
    db: Session = Depends(get_db)
):
    return _get_organization(db, organization_id)


@router.post("", response_model=OrganizationResponse, status_code=status.HTTP_201_CREATED)
async def create_organization(
    organization_data: OrganizationCreate,
    current_user: User = Depends(require_super_user),
    db: Session = Depends(get_db)
):
    if db.query(Tenant).filter(Tenant.slug == organization_data.slug).first():
        raise InvalidInputError(f"Organization slug already in use: {organization_data.slug}")

    organization = Tenant(**organization_data.model_dump())

    db.add(organization)
    db.commit()
    db.refresh(organization)

    logger.info(f"Organization created: {organization.id} ({organization.slug}) by {current_user.id}")

    return organization


@router.patch("/{organization_id}", response_model=OrganizationResponse)
async def update_organization(
    organization_id: str,
    organization_data: OrganizationUpdate,
    current_user: User = Depends(require_super_user),
    db: Session = Depends(get_db)
):
    organization = _get_organization(db, organization_id)

    for field, value in organization_data.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "is_active"):
            continue
        if field == "settings" and value is None:
            value = {}
        setattr(organization, field, value)

    db.commit()
    db.refresh(organization)

    logger.info(f"Organization updated: {organization.id} by {current_user.id}")

    return organization


@router.delete("/{organization_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_organization(
    organization_id: str,
    current_user: User = Depends(require_super_user),
    db: Session = Depends(get_db)
):
    organization = _get_organization(db, organization_id)

    if organization.id == current_user.tenant_id:
        raise InvalidInputError("Cannot delete your own organization")

    db.delete(organization)
    db.commit()

    logger.warning(f"Organization deleted: {organization_id} by {current_user.id}")

    return None
