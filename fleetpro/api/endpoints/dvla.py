"""
DVLA Vehicle Enquiry Endpoints

Looks a registration up against the DVLA and, when the caller names a
fleet vehicle, keeps a snapshot of the MOT and tax position.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime

from fleetpro.database import get_db
from fleetpro.models.user import User
from fleetpro.models.tenant import Tenant
from fleetpro.models.vehicle import Vehicle
from fleetpro.models.vehicle_status_check import VehicleStatusCheck
from fleetpro.schemas.dvla import DVLATestRequest, DVLATestResponse
from fleetpro.api.deps import get_current_tenant, require_fleet_staff
from fleetpro.core.exceptions import InvalidInputError, ExternalServiceError
from fleetpro.core.scoping import get_scoped_or_404
from fleetpro.services.dvla import (
    DVLAClient,
    DVLAError,
    get_dvla_client,
    normalize_registration,
    summarize_status,
)
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/dvla", tags=["dvla"])


@router.get("/test")
async def dvla_usage(current_user: User = Depends(require_fleet_staff)):
    return {
        "message": "DVLA Vehicle Enquiry test endpoint",
        "usage": "POST with {\"registration\": \"AB12CDE\", \"vehicle_id\": \"<optional fleet vehicle id>\"}",
    }


@router.post("/test", response_model=DVLATestResponse)
def dvla_lookup(
    lookup_data: DVLATestRequest,
    current_user: User = Depends(require_fleet_staff),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db),
    client: DVLAClient = Depends(get_dvla_client),
):
    """
    Look up a registration.

    Plain def so the blocking HTTP call runs in the threadpool.
    """
    if not lookup_data.registration or not lookup_data.registration.strip():
        raise InvalidInputError("Registration number is required")
    if not client.configured:
        logger.error("DVLA lookup requested but no API key is configured")
        raise ExternalServiceError("DVLA API key not configured")

    registration = normalize_registration(lookup_data.registration)

    vehicle = None
    if lookup_data.vehicle_id:
        vehicle = get_scoped_or_404(db, Vehicle, lookup_data.vehicle_id, tenant, "Vehicle")

    try:
        vehicle_data = client.lookup(registration)
    except DVLAError as exc:
        raise ExternalServiceError(exc.message, details=exc.details) from exc

    stored = None
    if vehicle is not None:
        stored = VehicleStatusCheck(
            tenant_id=tenant.id,
            vehicle_id=vehicle.id,
            registration=registration,
            check_date=datetime.utcnow(),
            **summarize_status(vehicle_data),
        )
        db.add(stored)
        db.commit()
        db.refresh(stored)
        logger.info(
            f"DVLA status stored for vehicle {vehicle.id}: mot_valid={stored.mot_valid} "
            f"tax_valid={stored.tax_valid}"
        )

    return DVLATestResponse(
        success=True,
        registration=registration,
        vehicleData=vehicle_data,
        storedResults=stored,
        timestamp=datetime.utcnow(),
    )
