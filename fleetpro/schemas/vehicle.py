"""
Vehicle Schemas

Dimensions arrive either nested:

    {"dimensions": {"max_weight": 26000, "max_height": 4.0}}

or flat on the vehicle:

    {"max_weight": 26000, "max_height": 4.0}

merge_dimensions() folds both into the stored dimensions object.
"""
from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime, date
from fleetpro.models.vehicle import VehicleStatus, DIMENSION_KEYS
from fleetpro.services.compliance import vehicle_compliance, from_wkt_point


class Dimensions(BaseModel):
    max_weight: Optional[float] = Field(None, ge=0)
    max_height: Optional[float] = Field(None, ge=0)
    max_length: Optional[float] = Field(None, ge=0)
    max_width: Optional[float] = Field(None, ge=0)


class Location(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


def merge_dimensions(data: dict[str, Any]) -> Optional[dict[str, Optional[float]]]:
    """
    Build the stored dimensions object from a dumped request.

    Flat max_* values win over the nested object. Returns None when the
    request carries no dimension data at all.
    """
    nested = data.get("dimensions") or {}
    flat = {k: data[k] for k in DIMENSION_KEYS if data.get(k) is not None}
    if not nested and not flat:
        return None
    merged = {k: nested.get(k) for k in DIMENSION_KEYS}
    merged.update(flat)
    return merged


class VehicleCreate(BaseModel):
    registration: str = Field(..., min_length=1, max_length=20)
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    vehicle_type_id: Optional[str] = None
    fuel_type: str = "diesel"
    status: VehicleStatus = VehicleStatus.AVAILABLE
    adr_classifications: list[str] = Field(default_factory=list)

    dimensions: Optional[Dimensions] = None
    max_weight: Optional[float] = Field(None, ge=0)
    max_height: Optional[float] = Field(None, ge=0)
    max_length: Optional[float] = Field(None, ge=0)
    max_width: Optional[float] = Field(None, ge=0)

    current_location: Optional[Location] = None
    tax_due_date: Optional[date] = None
    mot_due_date: Optional[date] = None
    tacho_expiry_date: Optional[date] = None

    depot_id: Optional[str] = None


class VehicleUpdate(BaseModel):
    registration: Optional[str] = Field(None, min_length=1, max_length=20)
    make: Optional[str] = Field(None, min_length=1, max_length=100)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    year: Optional[int] = Field(None, ge=1900, le=2100)
    vehicle_type_id: Optional[str] = None
    fuel_type: Optional[str] = None
    status: Optional[VehicleStatus] = None
    adr_classifications: Optional[list[str]] = None

    dimensions: Optional[Dimensions] = None
    max_weight: Optional[float] = Field(None, ge=0)
    max_height: Optional[float] = Field(None, ge=0)
    max_length: Optional[float] = Field(None, ge=0)
    max_width: Optional[float] = Field(None, ge=0)

    current_location: Optional[Location] = None
    tax_due_date: Optional[date] = None
    mot_due_date: Optional[date] = None
    tacho_expiry_date: Optional[date] = None

    depot_id: Optional[str] = None


class Compliance(BaseModel):
    tax: Optional[str]
    mot: Optional[str]
    tacho: Optional[str]


class VehicleResponse(BaseModel):
    id: str
    tenant_id: str
    registration: str
    make: str
    model: str
    year: Optional[int]
    vehicle_type_id: Optional[str]
    fuel_type: str
    status: VehicleStatus
    adr_classifications: list[str]
    dimensions: Optional[dict[str, Optional[float]]]
    max_weight: Optional[float] = None
    max_height: Optional[float] = None
    max_length: Optional[float] = None
    max_width: Optional[float] = None
    current_location: Optional[Location]
    tax_due_date: Optional[date]
    mot_due_date: Optional[date]
    tacho_expiry_date: Optional[date]
    compliance: Compliance
    depot_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_vehicle(cls, vehicle, depot_id: Optional[str] = None, today: Optional[date] = None):
        dimensions = vehicle.dimensions or {}
        return cls(
            id=vehicle.id,
            tenant_id=vehicle.tenant_id,
            registration=vehicle.registration,
            make=vehicle.make,
            model=vehicle.model,
            year=vehicle.year,
            vehicle_type_id=vehicle.vehicle_type_id,
            fuel_type=vehicle.fuel_type,
            status=vehicle.status,
            adr_classifications=vehicle.adr_classifications or [],
            dimensions=vehicle.dimensions,
            current_location=from_wkt_point(vehicle.current_location),
            tax_due_date=vehicle.tax_due_date,
            mot_due_date=vehicle.mot_due_date,
            tacho_expiry_date=vehicle.tacho_expiry_date,
            compliance=vehicle_compliance(vehicle, today),
            depot_id=depot_id,
            created_at=vehicle.created_at,
            updated_at=vehicle.updated_at,
            **{k: dimensions.get(k) for k in DIMENSION_KEYS},
        )


class VehicleListResponse(BaseModel):
    vehicles: list[VehicleResponse]
    total: int
    page: int
    page_size: int


class VehicleTypeResponse(BaseModel):
    id: str
    name: str
    description: Optional[str]
    max_weight: Optional[float]
    max_height: Optional[float]
    max_length: Optional[float]
    max_width: Optional[float]

    class Config:
        from_attributes = True
