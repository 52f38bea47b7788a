"""
API Dependencies

Reusable FastAPI dependencies for authentication and authorization.
Every protected route depends on get_current_user (directly or through
require_roles), which ties the bearer token to the request tenant.
"""
from typing import Optional, Callable, Union
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from fleetpro.database import get_db
from fleetpro.models.user import User, UserRole
from fleetpro.models.tenant import Tenant
from fleetpro.core.security import decode_access_token
from fleetpro.core.exceptions import AuthenticationError, TenantIsolationError, PermissionDenied
from fleetpro.core.permissions import check_roles
from fleetpro.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

# auto_error=False so a missing header is a 401 like any other bad token
security = HTTPBearer(auto_error=False)


def get_current_tenant(request: Request) -> Tenant:
    """
    Get current tenant from request state.

    This is set by TenantMiddleware and is always present on tenant routes.
    """
    tenant = getattr(request.state, "tenant", None)
    if not tenant:
        logger.error("No tenant in request state - middleware may have failed")
        raise TenantIsolationError("Tenant context not available")
    return tenant


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
    tenant: Tenant = Depends(get_current_tenant)
) -> User:
    """
    Get current authenticated user.

    1. Validates the JWT
    2. Loads the user from its home tenant
    3. Requires the token tenant to match the request tenant, unless the
       user is a super user (super users act inside any organisation)
    4. Checks the user is active
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    user_id = payload.get("sub")
    token_tenant_id = payload.get("tenant_id")

    if not user_id or not token_tenant_id:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(
        User.id == user_id,
        User.tenant_id == token_tenant_id
    ).first()

    if not user:
        logger.warning(f"User not found: {user_id} in tenant {token_tenant_id}")
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    if token_tenant_id != tenant.id and not user.is_super_user:
        log_security_event(
            "tenant_isolation_violation",
            {"user_id": user_id, "token_tenant": token_tenant_id, "request_tenant": tenant.id},
            logger
        )
        raise TenantIsolationError("Token tenant mismatch")

    request.state.user_id = user.id
    return user


def require_roles(*allowed: Union[str, UserRole]) -> Callable[..., User]:
    """
    Dependency factory for role-gated routes.

        current_user: User = Depends(require_roles(UserRole.ADMIN))

    Super users always pass.
    """

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        try:
            check_roles(current_user, allowed)
        except PermissionDenied:
            log_security_event(
                "privilege_escalation",
                {"user_id": current_user.id, "role": current_user.role,
                 "required": [UserRole(r).value for r in allowed]},
                logger
            )
            raise
        return current_user

    return dependency


require_admin = require_roles(UserRole.ADMIN)
require_super_user = require_roles(UserRole.SUPER_USER)
require_fleet_staff = require_roles(UserRole.ADMIN, UserRole.MAINTENANCE_PROVIDER)
