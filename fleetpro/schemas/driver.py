"""
Driver Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date
from fleetpro.models.driver import DriverStatus


class DriverUser(BaseModel):
    id: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]

    class Config:
        from_attributes = True


class DriverCreate(BaseModel):
    user_id: str
    licence_number: str = Field(..., min_length=1, max_length=50)
    licence_expiry: date
    cpc_expiry: Optional[date] = None
    tacho_card_expiry: Optional[date] = None
    status: DriverStatus = DriverStatus.AVAILABLE
    depot_id: Optional[str] = None


class DriverUpdate(BaseModel):
    """
    All fields optional. depot_id: a value reassigns the driver, an
    explicit null removes them from their depot, absent leaves it alone.
    """
    licence_number: Optional[str] = Field(None, min_length=1, max_length=50)
    licence_expiry: Optional[date] = None
    cpc_expiry: Optional[date] = None
    tacho_card_expiry: Optional[date] = None
    status: Optional[DriverStatus] = None
    max_driving_hours: Optional[float] = Field(None, gt=0, le=24)
    current_driving_hours: Optional[float] = Field(None, ge=0, le=24)
    depot_id: Optional[str] = None


class DriverResponse(BaseModel):
    id: str
    tenant_id: str
    user_id: str
    licence_number: Optional[str]
    licence_expiry: Optional[date]
    cpc_expiry: Optional[date]
    tacho_card_expiry: Optional[date]
    status: DriverStatus
    max_driving_hours: float
    current_driving_hours: float
    created_at: datetime
    updated_at: datetime
    user: Optional[DriverUser] = None
    depot_id: Optional[str] = None

    class Config:
        from_attributes = True


class DriverListResponse(BaseModel):
    drivers: list[DriverResponse]
    total: int
    page: int
    page_size: int
