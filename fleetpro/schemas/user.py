"""
User Schemas

Request/response models for user management. A created user may bring
driver or maintenance-provider details, which become the matching
role record.
"""
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, Any
from datetime import datetime, date
from fleetpro.models.user import UserRole
from fleetpro.models.maintenance_provider import SPECIALIZATION_OPTIONS
from fleetpro.schemas.maintenance_provider import ProviderAddress


class DriverSummary(BaseModel):
    id: str
    licence_number: Optional[str]
    licence_expiry: Optional[date]
    cpc_expiry: Optional[date]
    tacho_card_expiry: Optional[date]
    status: str

    class Config:
        from_attributes = True


class ProviderSummary(BaseModel):
    id: str
    name: str
    certification_number: Optional[str]
    certification_expiry: Optional[date]
    is_active: bool

    class Config:
        from_attributes = True


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.DRIVER
    phone: Optional[str] = None

    # Super users pick the organisation; everyone else creates in their own
    organization_id: Optional[str] = None

    # role=driver
    licence_number: Optional[str] = None
    licence_expiry: Optional[date] = None
    cpc_expiry: Optional[date] = None
    tacho_card_expiry: Optional[date] = None

    # role=maintenance_provider
    company_name: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    address: Optional[ProviderAddress] = None
    specializations: list[str] = Field(default_factory=list)
    certification_number: Optional[str] = None
    certification_expiry: Optional[date] = None

    @field_validator("specializations")
    @classmethod
    def check_specializations(cls, value: list[str]) -> list[str]:
        unknown = [s for s in value if s not in SPECIALIZATION_OPTIONS]
        if unknown:
            raise ValueError(f"Unknown specializations: {', '.join(unknown)}")
        return value


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None
    profile: Optional[dict[str, Any]] = None


class UserResponse(BaseModel):
    """User response schema (excludes sensitive data)."""
    id: str
    tenant_id: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    role: UserRole
    profile: dict[str, Any]
    is_active: bool
    created_at: datetime
    last_login_at: Optional[datetime]
    driver: Optional[DriverSummary] = None
    maintenance_provider: Optional[ProviderSummary] = None

    class Config:
        from_attributes = True


class UserListResponse(BaseModel):
    users: list[UserResponse]
    total: int
    page: int
    page_size: int
