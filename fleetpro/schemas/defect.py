"""
Defect Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from fleetpro.models.defect import DefectType, DefectStatus


class DefectInput(BaseModel):
    defect_type: DefectType
    description: str = Field(..., min_length=1)


class DefectCreate(DefectInput):
    vehicle_id: str


class DefectStatusUpdate(BaseModel):
    status: DefectStatus


class DefectResponse(BaseModel):
    id: str
    tenant_id: str
    vehicle_id: str
    inspection_schedule_id: Optional[str]
    defect_type: DefectType
    description: str
    status: DefectStatus
    reported_by: Optional[str]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class DefectListResponse(BaseModel):
    defects: list[DefectResponse]
    total: int
    page: int
    page_size: int
