"""
Tenant Middleware

Resolves the organisation a request is for and puts it on request.state.

Resolution order:
1. X-Tenant-Slug header (API clients, tests)
2. Subdomain of the Host header (acme.fleetpro.app -> "acme")
3. X-Tenant-ID header
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from sqlalchemy.orm import Session
from typing import Optional
import logging

from fleetpro.database import SessionLocal
from fleetpro.models.tenant import Tenant

logger = logging.getLogger(__name__)

NON_TENANT_SUBDOMAINS = ("www", "api", "app")

# Invitation links carry their own tenant in the token
EXCLUDED_PREFIXES = (
    "/docs",
    "/redoc",
    "/openapi.json",
    "/health",
    "/api/v1/auth/invitations",
)


class TenantMiddleware(BaseHTTPMiddleware):
    """
    Middleware to extract and validate tenant from request.

    This runs on every request and adds tenant context to request.state.
    """

    def __init__(self, app, excluded_paths=EXCLUDED_PREFIXES):
        super().__init__(app)
        self.excluded_paths = list(excluded_paths)

    def _is_excluded(self, path: str) -> bool:
        return path == "/" or any(path.startswith(p) for p in self.excluded_paths)

    async def dispatch(self, request: Request, call_next):
        if self._is_excluded(request.url.path):
            return await call_next(request)

        tenant_identifier = self._extract_tenant_identifier(request)

        if not tenant_identifier:
            logger.warning(f"No tenant identifier in request: {request.url}")
            return JSONResponse(
                status_code=400,
                content={
                    "detail": "Tenant identifier required (subdomain or X-Tenant-Slug header)",
                    "type": "tenant_required",
                }
            )

        db = SessionLocal()
        try:
            tenant = self._load_tenant(db, tenant_identifier)
        finally:
            db.close()

        if not tenant:
            logger.warning(f"Tenant not found: {tenant_identifier}")
            return JSONResponse(
                status_code=404,
                content={"detail": f"Tenant not found: {tenant_identifier}", "type": "tenant_not_found"}
            )

        if not tenant.is_active:
            logger.warning(f"Inactive tenant attempted access: {tenant_identifier}")
            return JSONResponse(
                status_code=403,
                content={"detail": "Tenant account is inactive", "type": "tenant_inactive"}
            )

        request.state.tenant = tenant
        request.state.tenant_id = tenant.id

        logger.debug(f"Request for tenant: {tenant.slug} ({tenant.id})")

        return await call_next(request)

    def _extract_tenant_identifier(self, request: Request) -> Optional[str]:
        tenant_slug = request.headers.get("X-Tenant-Slug")
        if tenant_slug:
            return tenant_slug

        host = request.headers.get("Host", "").split(":")[0]
        if host:
            parts = host.split(".")
            if len(parts) >= 3:  # subdomain.domain.tld
                subdomain = parts[0]
                if subdomain not in NON_TENANT_SUBDOMAINS:
                    return subdomain

        tenant_id = request.headers.get("X-Tenant-ID")
        if tenant_id:
            logger.debug("Using X-Tenant-ID header")
            return tenant_id

        return None

    def _load_tenant(self, db: Session, identifier: str) -> Optional[Tenant]:
        """Slug first, id as last resort."""
        tenant = db.query(Tenant).filter(Tenant.slug == identifier).first()
        if tenant:
            return tenant
        return db.query(Tenant).filter(Tenant.id == identifier).first()
