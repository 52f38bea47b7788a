"""
Depot Schemas
"""
from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional, Any
from datetime import datetime
from fleetpro.models.depot import FACILITY_OPTIONS


class DepotAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = "UK"


def _check_facilities(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is None:
        return value
    unknown = [f for f in value if f not in FACILITY_OPTIONS]
    if unknown:
        raise ValueError(f"Unknown facilities: {', '.join(unknown)}")
    return value


class DepotCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[DepotAddress] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    # None = standard opening hours
    operating_hours: Optional[dict[str, Any]] = None
    facilities: list[str] = Field(default_factory=list)
    capacity: Optional[int] = Field(None, ge=0)
    is_active: bool = True

    # Super users only: the organisation to create the depot in
    tenant_id: Optional[str] = None

    check_facilities = field_validator("facilities")(_check_facilities)


class DepotUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    address: Optional[DepotAddress] = None
    contact_person: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    operating_hours: Optional[dict[str, Any]] = None
    facilities: Optional[list[str]] = None
    capacity: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None

    check_facilities = field_validator("facilities")(_check_facilities)


class DepotResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    description: Optional[str]
    address: Optional[dict[str, Any]]
    contact_person: Optional[str]
    contact_phone: Optional[str]
    contact_email: Optional[str]
    operating_hours: dict[str, Any]
    facilities: list[str]
    capacity: Optional[int]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DepotListResponse(BaseModel):
    depots: list[DepotResponse]
    total: int
    page: int
    page_size: int
