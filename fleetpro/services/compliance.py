"""
Vehicle compliance helpers: due-date flags and location encoding.
"""
from datetime import date, timedelta
from typing import Optional, Dict
import re

from fleetpro.config import get_settings

settings = get_settings()

EXPIRED = "expired"
DUE_SOON = "due_soon"
OK = "ok"

_NUMBER = r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?"
_POINT_RE = re.compile(rf"^\s*POINT\s*\(\s*({_NUMBER})\s+({_NUMBER})\s*\)\s*$", re.IGNORECASE)


def compliance_status(
    due: Optional[date],
    today: Optional[date] = None,
    warning_days: Optional[int] = None,
) -> Optional[str]:
    """
    Classify a due date.

    expired on or before today, due_soon inside the warning window,
    ok otherwise. None when there is no date.
    """
    if due is None:
        return None
    today = today or date.today()
    if warning_days is None:
        warning_days = settings.EXPIRY_WARNING_DAYS
    if due <= today:
        return EXPIRED
    if due <= today + timedelta(days=warning_days):
        return DUE_SOON
    return OK


def vehicle_compliance(vehicle, today: Optional[date] = None) -> Dict[str, Optional[str]]:
    return {
        "tax": compliance_status(vehicle.tax_due_date, today),
        "mot": compliance_status(vehicle.mot_due_date, today),
        "tacho": compliance_status(vehicle.tacho_expiry_date, today),
    }


def to_wkt_point(lat: float, lng: float) -> str:
    # WKT is x y, i.e. longitude first
    return f"POINT({_coordinate(lng)} {_coordinate(lat)})"


def _coordinate(value: float) -> str:
    # Fixed notation, 7 places (about 1cm); never exponent form
    text = f"{value:.7f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def from_wkt_point(value: Optional[str]) -> Optional[Dict[str, float]]:
    if not value:
        return None
    match = _POINT_RE.match(value)
    if not match:
        return None
    lng, lat = float(match.group(1)), float(match.group(2))
    return {"lat": lat, "lng": lng}
