"""
DVLA Test Endpoint Schemas

Field names follow the DVLA payload (camelCase) since the response
passes the vendor record straight through.
"""
from pydantic import BaseModel
from typing import Optional, Any
from datetime import datetime


class DVLATestRequest(BaseModel):
    # Optional here so a missing registration is a 400 from the endpoint
    registration: Optional[str] = None
    vehicle_id: Optional[str] = None


class StoredStatusCheck(BaseModel):
    id: str
    vehicle_id: str
    registration: str
    check_date: datetime
    mot_data: Optional[dict[str, Any]]
    tax_data: Optional[dict[str, Any]]
    mot_valid: bool
    mot_expires_soon: bool
    tax_valid: bool

    class Config:
        from_attributes = True


class DVLATestResponse(BaseModel):
    success: bool
    registration: str
    vehicleData: dict[str, Any]
    storedResults: Optional[StoredStatusCheck] = None
    timestamp: datetime
