"""
Organization (tenant) Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, Any
from datetime import datetime


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    slug: str = Field(..., min_length=1, max_length=100, pattern="^[a-z0-9][a-z0-9-]*$")
    settings: dict[str, Any] = Field(default_factory=dict)
    rate_limit_per_minute: Optional[int] = Field(None, ge=1)
    rate_limit_burst: Optional[int] = Field(None, ge=1)


class OrganizationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    settings: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None
    rate_limit_per_minute: Optional[int] = Field(None, ge=1)
    rate_limit_burst: Optional[int] = Field(None, ge=1)


class OrganizationResponse(BaseModel):
    id: str
    name: str
    slug: str
    settings: dict[str, Any]
    is_active: bool
    rate_limit_per_minute: Optional[int]
    rate_limit_burst: Optional[int]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrganizationListResponse(BaseModel):
    organizations: list[OrganizationResponse]
    total: int
    page: int
    page_size: int
