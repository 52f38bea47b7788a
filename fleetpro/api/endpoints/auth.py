"""
Authentication Endpoints

Login, self-registration, the current-user profile, and the public half
of the invitation flow (look up a token, accept it).
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from datetime import datetime, timedelta

from fleetpro.database import get_db
from fleetpro.models.user import User, UserRole, department_for
from fleetpro.models.tenant import Tenant
from fleetpro.models.invitation import UserInvitation
from fleetpro.schemas.auth import (
    LoginRequest,
    Token,
    RegisterRequest,
    InvitationDetails,
    AcceptInvitationRequest,
)
from fleetpro.schemas.user import UserResponse
from fleetpro.core.security import (
    verify_password,
    get_password_hash,
    create_access_token
)
from fleetpro.core.exceptions import AuthenticationError, InvalidInputError, EntityNotFoundError
from fleetpro.core.permissions import home_path_for
from fleetpro.api.deps import get_current_user
from fleetpro.services.role_records import ensure_role_record
from fleetpro.config import get_settings
from fleetpro.utils.logging import log_security_event, get_logger

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["authentication"])

MIN_PASSWORD_LENGTH = 6


@router.post("/login", response_model=Token)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token.

    Login is scoped to a tenant slug. Every failure returns the same
    generic message so tenants and emails can't be enumerated.
    """
    tenant = db.query(Tenant).filter(
        Tenant.slug == credentials.tenant_slug
    ).first()

    if not tenant:
        log_security_event(
            "failed_login",
            {"reason": "tenant_not_found", "tenant_slug": credentials.tenant_slug},
            logger
        )
        raise AuthenticationError("Invalid credentials")

    if not tenant.is_active:
        log_security_event(
            "failed_login",
            {"reason": "tenant_inactive", "tenant_id": tenant.id},
            logger
        )
        raise AuthenticationError("Tenant account is inactive")

    user = db.query(User).filter(
        User.tenant_id == tenant.id,
        User.email == credentials.email
    ).first()

    if not user or not verify_password(credentials.password, user.hashed_password):
        log_security_event(
            "failed_login",
            {"reason": "bad_credentials", "email": credentials.email, "tenant_id": tenant.id},
            logger
        )
        raise AuthenticationError("Invalid credentials")

    if not user.is_active:
        log_security_event(
            "failed_login",
            {"reason": "user_inactive", "user_id": user.id},
            logger
        )
        raise AuthenticationError("User account is inactive")

    access_token = create_access_token(
        {
            "sub": user.id,
            "tenant_id": tenant.id,
            "email": user.email,
            "role": user.role,
        },
        expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    user.last_login_at = datetime.utcnow()
    db.commit()

    logger.info(f"Successful login: user={user.id}, tenant={tenant.id}")

    return Token(
        access_token=access_token,
        role=user.role,
        redirect_to=home_path_for(user.role)
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    registration: RegisterRequest,
    db: Session = Depends(get_db)
):
    """Register a new driver in a tenant."""
    tenant = db.query(Tenant).filter(
        Tenant.slug == registration.tenant_slug
    ).first()

    if not tenant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tenant not found"
        )

    if not tenant.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Tenant is not accepting new registrations"
        )

    existing_user = db.query(User).filter(
        User.tenant_id == tenant.id,
        User.email == registration.email
    ).first()

    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists in this tenant"
        )

    new_user = User(
        tenant_id=tenant.id,
        email=registration.email,
        hashed_password=get_password_hash(registration.password),
        first_name=registration.first_name,
        last_name=registration.last_name,
        role=UserRole.DRIVER.value,
        profile={
            "first_name": registration.first_name,
            "last_name": registration.last_name,
            "department": department_for(UserRole.DRIVER),
        },
        is_active=True,
    )

    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"New user registered: {new_user.id} in tenant {tenant.id}")

    return new_user


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Current user's profile, with their driver or provider record."""
    return current_user


def _load_invitation(db: Session, token: str) -> UserInvitation:
    invitation = db.query(UserInvitation).filter(
        UserInvitation.invitation_token == token
    ).first()
    if not invitation or not invitation.is_usable():
        raise EntityNotFoundError("Invitation")
    return invitation


@router.get("/invitations/{token}", response_model=InvitationDetails)
async def get_invitation(token: str, db: Session = Depends(get_db)):
    """
    Look up an invitation by token.

    Used or expired invitations are reported as not found.
    """
    invitation = _load_invitation(db, token)
    tenant = db.query(Tenant).filter(Tenant.id == invitation.tenant_id).first()

    return InvitationDetails(
        email=invitation.email,
        first_name=invitation.first_name,
        last_name=invitation.last_name,
        role=invitation.role,
        organization_name=tenant.name if tenant else "",
        expires_at=invitation.expires_at,
    )


@router.post(
    "/invitations/{token}/accept",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED
)
async def accept_invitation(
    token: str,
    payload: AcceptInvitationRequest,
    db: Session = Depends(get_db)
):
    """
    Accept an invitation and create the account.

    Creates the user with the invited role in the inviting tenant, plus the
    driver or maintenance-provider record that role needs, and marks the
    invitation used. All in one transaction.
    """
    invitation = _load_invitation(db, token)

    if payload.password != payload.confirm_password:
        raise InvalidInputError("Passwords do not match")
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    existing_user = db.query(User).filter(
        User.tenant_id == invitation.tenant_id,
        User.email == invitation.email
    ).first()
    if existing_user:
        raise InvalidInputError("An account with this email already exists")

    role = UserRole(invitation.role)
    user = User(
        tenant_id=invitation.tenant_id,
        email=invitation.email,
        hashed_password=get_password_hash(payload.password),
        first_name=invitation.first_name,
        last_name=invitation.last_name,
        role=role.value,
        profile={
            "first_name": invitation.first_name,
            "last_name": invitation.last_name,
            "department": department_for(role),
        },
    )
    db.add(user)
    db.flush()

    ensure_role_record(db, user)

    invitation.used_at = datetime.utcnow()

    db.commit()
    db.refresh(user)

    logger.info(
        f"Invitation accepted: {invitation.id} -> user {user.id} ({role.value})",
        extra={"tenant_id": invitation.tenant_id}
    )

    return user
