"""
Custom Exceptions

Centralized exception definitions. Handlers in main.py turn them into
{"detail", "type"} JSON responses.
"""
from typing import Optional
from fastapi import HTTPException, status


class TenantNotFoundError(HTTPException):
    """Raised when tenant cannot be found."""

    def __init__(self, tenant_identifier: str = ""):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant not found: {tenant_identifier}" if tenant_identifier else "Tenant not found"
        )


class EntityNotFoundError(HTTPException):
    """
    Raised when a tenant-scoped row can't be found.

    Rows that exist in another tenant are reported the same way, so callers
    can't probe for ids outside their organisation.
    """

    def __init__(self, entity: str, entity_id: Optional[str] = None):
        self.entity = entity
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found: {entity_id}" if entity_id else f"{entity} not found"
        )


class AuthenticationError(HTTPException):
    """Raised when authentication fails."""

    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class TenantIsolationError(HTTPException):
    """
    Raised when a tenant isolation violation is detected.

    This is a security error and is logged as such by its handler.
    """

    def __init__(self, detail: str = "Tenant isolation violation"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class PermissionDenied(HTTPException):
    """
    Raised when the user's role is not allowed on a route.

    redirect_to is the landing page for the user's role, so the client
    can send them somewhere they are allowed to be.
    """

    def __init__(self, detail: str = "Permission denied", redirect_to: Optional[str] = None):
        self.redirect_to = redirect_to
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail
        )


class RateLimitExceeded(HTTPException):
    """Raised when rate limit is exceeded."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Please try again later.",
            headers={"Retry-After": str(retry_after)}
        )


class InvalidInputError(HTTPException):
    """Raised for business-rule violations the schemas can't express."""

    def __init__(self, detail: str = "Invalid input"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class ExternalServiceError(HTTPException):
    """Raised when a third-party service call fails."""

    def __init__(self, detail: str = "External service error", details: Optional[str] = None):
        self.details = details
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail
        )
