"""
Inspection Schemas

Scheduled inspections, their completion, and logged safety inspections.
"""
from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime, date
from fleetpro.models.inspection import InspectionType, SafetyInspectionType
from fleetpro.schemas.defect import DefectInput, DefectResponse


class InspectionVehicle(BaseModel):
    id: str
    registration: str
    make: str
    model: str

    class Config:
        from_attributes = True


class InspectionProvider(BaseModel):
    id: str
    name: str

    class Config:
        from_attributes = True


class InspectionScheduleCreate(BaseModel):
    vehicle_id: str
    maintenance_provider_id: Optional[str] = None
    inspection_type: InspectionType
    scheduled_date: date
    frequency_weeks: int = Field(26, ge=1, le=104)
    notes: Optional[str] = None
    is_active: bool = True


class InspectionScheduleUpdate(BaseModel):
    maintenance_provider_id: Optional[str] = None
    inspection_type: Optional[InspectionType] = None
    scheduled_date: Optional[date] = None
    frequency_weeks: Optional[int] = Field(None, ge=1, le=104)
    notes: Optional[str] = None
    is_active: Optional[bool] = None


class RecurringInspectionCreate(BaseModel):
    """Schedule the next occurrence; the date is computed server-side."""
    vehicle_id: str
    inspection_type: InspectionType
    frequency_weeks: int = Field(26, ge=1, le=104)
    maintenance_provider_id: Optional[str] = None
    notes: Optional[str] = None


class InspectionCompletionResponse(BaseModel):
    id: str
    inspection_schedule_id: str
    completed_by: Optional[str]
    inspection_passed: bool
    notes: Optional[str]
    completed_at: datetime

    class Config:
        from_attributes = True


class InspectionScheduleResponse(BaseModel):
    id: str
    tenant_id: str
    vehicle_id: str
    maintenance_provider_id: Optional[str]
    inspection_type: InspectionType
    scheduled_date: date
    frequency_weeks: int
    notes: Optional[str]
    is_active: bool
    created_at: datetime
    updated_at: datetime
    vehicle: Optional[InspectionVehicle] = None
    maintenance_provider: Optional[InspectionProvider] = None
    completion: Optional[InspectionCompletionResponse] = None

    class Config:
        from_attributes = True


class InspectionScheduleListResponse(BaseModel):
    inspections: list[InspectionScheduleResponse]
    total: int
    page: int
    page_size: int


class CompleteInspectionRequest(BaseModel):
    inspection_passed: bool
    notes: Optional[str] = None
    defects: list[DefectInput] = Field(default_factory=list)


class CompleteInspectionResponse(BaseModel):
    completion: InspectionCompletionResponse
    defects: list[DefectResponse]


class SafetyInspectionCreate(BaseModel):
    vehicle_id: str
    inspection_type: SafetyInspectionType
    mileage: int = Field(..., gt=0)
    inspection_passed: bool
    next_inspection_due: Optional[date] = None
    notes: Optional[str] = None


class SafetyInspectionResponse(BaseModel):
    id: str
    tenant_id: str
    vehicle_id: str
    inspector_id: Optional[str]
    inspection_data: dict[str, Any]
    inspection_passed: bool
    inspection_date: datetime
    next_inspection_due: Optional[date]
    created_at: datetime

    class Config:
        from_attributes = True


class SafetyInspectionListResponse(BaseModel):
    safety_inspections: list[SafetyInspectionResponse]
    total: int
