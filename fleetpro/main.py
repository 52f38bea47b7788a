"""
Main FastAPI Application

Entry point for the FleetPro fleet-management API.
Configures middleware, routes, error handlers, and startup/shutdown events.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import time
from contextlib import asynccontextmanager

from fleetpro.config import get_settings
from fleetpro.database import engine, init_db
from fleetpro.middleware.tenant import TenantMiddleware
from fleetpro.middleware.rate_limit import RateLimitMiddleware
from fleetpro.utils.logging import setup_logging, get_logger
from fleetpro.core.exceptions import (
    TenantNotFoundError,
    EntityNotFoundError,
    AuthenticationError,
    TenantIsolationError,
    PermissionDenied,
    InvalidInputError,
    ExternalServiceError,
)

from fleetpro.api.endpoints import (
    auth,
    users,
    invitations,
    organizations,
    depots,
    drivers,
    vehicles,
    maintenance_providers,
    inspections,
    safety_inspections,
    defects,
    work_orders,
    dashboard,
    dvla,
)

settings = get_settings()

setup_logging(
    log_level=settings.LOG_LEVEL,
    json_format=(settings.ENVIRONMENT == "production")
)
logger = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info(f"Starting FleetPro in {settings.ENVIRONMENT} mode")

    # Production schemas are managed outside the app
    if settings.ENVIRONMENT == "development":
        logger.warning("Initializing database tables (dev mode)")
        init_db()

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down application")
    engine.dispose()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="FleetPro API",
    description="Multi-tenant fleet management: vehicles, drivers, depots, inspections and maintenance",
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# ============================================================================
# MIDDLEWARE CONFIGURATION
# ============================================================================

allowed_origins = [settings.FRONTEND_URL, "http://localhost:8000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins if settings.ENVIRONMENT != "development" else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    """Add X-Process-Time header to track request duration."""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Last added runs first: the tenant must be on request.state before the
# rate limiter looks for its bucket.
app.add_middleware(RateLimitMiddleware)
app.add_middleware(TenantMiddleware)


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================

@app.exception_handler(TenantIsolationError)
async def tenant_isolation_error_handler(request: Request, exc: TenantIsolationError):
    """
    Handle tenant isolation violations.

    These are security events: logged at ERROR with the request context.
    """
    logger.error(
        f"TENANT ISOLATION VIOLATION: {exc.detail}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "tenant_id": getattr(request.state, "tenant_id", None)
        }
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": "tenant_isolation_error"}
    )


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": "authentication_error"},
        headers=exc.headers or {}
    )


@app.exception_handler(PermissionDenied)
async def permission_denied_handler(request: Request, exc: PermissionDenied):
    """Role gate failures carry the caller's landing page."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.detail,
            "type": "permission_denied",
            "redirect_to": exc.redirect_to,
        }
    )


@app.exception_handler(TenantNotFoundError)
@app.exception_handler(EntityNotFoundError)
async def not_found_handler(request: Request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": "not_found"}
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "type": "invalid_input"}
    )


@app.exception_handler(ExternalServiceError)
async def external_service_error_handler(request: Request, exc: ExternalServiceError):
    """Upstream failures keep the {error, details} body the lookup screen reads."""
    logger.error(
        f"External service error: {exc.detail}",
        extra={"path": request.url.path, "tenant_id": getattr(request.state, "tenant_id", None)}
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "details": exc.details,
            "detail": exc.detail,
            "type": "external_service_error",
        }
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all exception handler.

    Full details go to the log; clients only see them in DEBUG.
    """
    logger.error(
        f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
        exc_info=True,
        extra={
            "path": request.url.path,
            "method": request.method,
            "tenant_id": getattr(request.state, "tenant_id", None)
        }
    )

    if settings.DEBUG:
        return JSONResponse(
            status_code=500,
            content={
                "detail": str(exc),
                "type": type(exc).__name__,
                "traceback": "See logs for traceback"
            }
        )
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": "internal_error"
        }
    )


# ============================================================================
# ROUTES
# ============================================================================

@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint for load balancers."""
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": API_VERSION
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "message": "FleetPro API",
        "version": API_VERSION,
        "docs": "/docs",
        "health": "/health"
    }


for router in (
    auth.router,
    users.router,
    invitations.router,
    organizations.router,
    depots.router,
    drivers.router,
    vehicles.router,
    vehicles.types_router,
    maintenance_providers.router,
    inspections.router,
    safety_inspections.router,
    defects.router,
    work_orders.router,
    dashboard.router,
    dvla.router,
):
    app.include_router(router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug: {settings.DEBUG}")
    logger.info(f"Database: {settings.DATABASE_URL.split('@')[1] if '@' in settings.DATABASE_URL else 'configured'}")

    uvicorn.run(
        "fleetpro.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
