"""
DVLA Vehicle Enquiry client.

Thin wrapper over POST /vehicle-enquiry/v1/vehicles. The HTTP session is
injectable so tests can run without the network.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
from urllib.parse import urljoin

import requests

from fleetpro.config import get_settings

ENQUIRY_PATH = "/vehicle-enquiry/v1/vehicles"

ERROR_DETAILS = {
    404: "Vehicle registration not found",
    401: "Invalid API key",
    403: "API key access denied",
    400: "Invalid request format",
}
UNKNOWN_ERROR_DETAIL = "Unknown error occurred"

# Tax statuses that count as road-legal for the fleet
VALID_TAX_STATUSES = ("Taxed", "SORN")

MOT_WARNING_DAYS = 30


class DVLAError(Exception):
    """Upstream failure. status_code is None for transport errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def details(self) -> str:
        return ERROR_DETAILS.get(self.status_code, UNKNOWN_ERROR_DETAIL)


class DVLAClient:
    """Look up vehicles by registration number."""

    def __init__(
        self,
        api_key: Optional[str],
        *,
        base_url: str = "https://driver-vehicle-licensing.api.gov.uk",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)
        self._endpoint_url = urljoin(base_url.rstrip("/") + "/", ENQUIRY_PATH.lstrip("/"))

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def lookup(self, registration: str) -> Dict[str, Any]:
        """Return the DVLA vehicle record for ``registration``."""
        registration = normalize_registration(registration)
        self.logger.info(f"DVLA lookup for {registration}")
        try:
            response = self.session.post(
                self._endpoint_url,
                headers={"x-api-key": self.api_key, "Content-Type": "application/json"},
                json={"registrationNumber": registration},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            self.logger.error(f"DVLA request failed: {exc}")
            raise DVLAError(f"DVLA request failed: {exc}") from exc

        if not response.ok:
            message = f"DVLA API Error: {response.status_code} - {response.text}"
            self.logger.error(message)
            raise DVLAError(message, status_code=response.status_code)

        return response.json()


def normalize_registration(registration: str) -> str:
    """DVLA expects upper case with no spaces."""
    return registration.replace(" ", "").upper()


def _parse_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.strptime(value[:10], "%Y-%m-%d")
    except ValueError:
        return None


def summarize_status(vehicle_data: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Derive the stored MOT/tax flags from a DVLA record.

    mot_valid: expiry is after now. mot_expires_soon: expiry within 30 days.
    tax_valid: taxStatus is Taxed or SORN.
    """
    now = now or datetime.utcnow()
    mot_expiry_raw = vehicle_data.get("motExpiryDate") or vehicle_data.get("motTestExpiryDate")
    mot_expiry = _parse_date(mot_expiry_raw)
    tax_status = vehicle_data.get("taxStatus")

    mot_valid = bool(mot_expiry and mot_expiry > now)
    mot_expires_soon = bool(mot_expiry and now < mot_expiry <= now + timedelta(days=MOT_WARNING_DAYS))

    return {
        "mot_data": {
            "motStatus": vehicle_data.get("motStatus"),
            "motExpiryDate": mot_expiry_raw,
        },
        "tax_data": {
            "taxStatus": tax_status,
            "taxDueDate": vehicle_data.get("taxDueDate"),
        },
        "mot_valid": mot_valid,
        "mot_expires_soon": mot_expires_soon,
        "tax_valid": tax_status in VALID_TAX_STATUSES,
    }


def get_dvla_client() -> DVLAClient:
    """FastAPI dependency; override in tests with a client holding a fake session."""
    settings = get_settings()
    return DVLAClient(
        settings.dvla_api_key,
        base_url=settings.DVLA_API_BASE_URL,
        timeout=settings.DVLA_TIMEOUT_SECONDS,
    )
