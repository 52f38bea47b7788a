"""
Invitation Endpoints (admin side)

Admins invite staff by email and get back a sign-up link. The invitee's
side (look up, accept) lives under /auth/invitations.
"""
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from datetime import datetime, timedelta

from fleetpro.database import get_db
from fleetpro.models.user import User, UserRole
from fleetpro.models.tenant import Tenant
from fleetpro.models.invitation import UserInvitation
from fleetpro.schemas.auth import (
    InvitationCreate,
    InvitationCreatedResponse,
    InvitationListResponse,
    InvitationResponse,
)
from fleetpro.api.deps import get_current_tenant, require_admin
from fleetpro.core.security import generate_invitation_token
from fleetpro.core.permissions import can_assign_role, home_path_for
from fleetpro.core.exceptions import InvalidInputError, PermissionDenied
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.config import get_settings
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/invitations", tags=["invitations"])


def invitation_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/auth/invited-signup?token={token}"


@router.get("", response_model=InvitationListResponse)
async def list_invitations(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    pending_only: bool = Query(False),
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    query = tenant_scope(db.query(UserInvitation), UserInvitation, tenant)
    if pending_only:
        query = query.filter(
            UserInvitation.used_at.is_(None),
            UserInvitation.expires_at > datetime.utcnow()
        )

    invitations, total = paginate(query, page, page_size, UserInvitation.created_at.desc())

    return InvitationListResponse(
        invitations=invitations, total=total, page=page, page_size=page_size
    )


@router.post("", response_model=InvitationCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_invitation(
    invitation_data: InvitationCreate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Invite someone into the current organisation."""
    if not can_assign_role(current_user, invitation_data.role):
        raise PermissionDenied(
            detail="Not authorized to invite users with this role",
            redirect_to=home_path_for(current_user.role)
        )

    existing_user = db.query(User).filter(
        User.tenant_id == tenant.id,
        User.email == invitation_data.email
    ).first()
    if existing_user:
        raise InvalidInputError("User with this email already exists")

    token = generate_invitation_token()
    invitation = UserInvitation(
        tenant_id=tenant.id,
        email=invitation_data.email,
        first_name=invitation_data.first_name,
        last_name=invitation_data.last_name,
        role=UserRole(invitation_data.role).value,
        invited_by=current_user.id,
        invitation_token=token,
        expires_at=datetime.utcnow() + timedelta(days=settings.INVITATION_EXPIRE_DAYS),
    )

    db.add(invitation)
    db.commit()
    db.refresh(invitation)

    logger.info(
        f"Invitation created: {invitation.id} for {invitation.role} by {current_user.id}",
        extra={"tenant_id": tenant.id}
    )

    return InvitationCreatedResponse(
        invitation=InvitationResponse.model_validate(invitation),
        invitation_token=token,
        invitation_link=invitation_link(token),
    )


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def revoke_invitation(
    invitation_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    invitation = get_scoped_or_404(db, UserInvitation, invitation_id, tenant, "Invitation")

    db.delete(invitation)
    db.commit()

    logger.info(f"Invitation revoked: {invitation_id} by {current_user.id}")

    return None
