"""
Maintenance Provider Schemas

Two generations of field names are in use by clients:

    new           legacy (stored)
    company_name  name
    contact_email email
    contact_phone phone

Both are accepted on input. normalize_provider_fields() folds them onto
the stored columns, and responses carry both spellings.
"""
from pydantic import BaseModel, Field, field_validator, model_validator, computed_field
from typing import Optional, Any
from datetime import datetime, date
from fleetpro.models.maintenance_provider import SPECIALIZATION_OPTIONS


class ProviderAddress(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None


def _check_specializations(value: Optional[list[str]]) -> Optional[list[str]]:
    if value is None:
        return value
    unknown = [s for s in value if s not in SPECIALIZATION_OPTIONS]
    if unknown:
        raise ValueError(f"Unknown specializations: {', '.join(unknown)}")
    return value


_ALIASES = (
    ("name", "company_name", "name"),
    ("email", "contact_email", "email"),
    ("phone", "contact_phone", "phone"),
)

_PLAIN_FIELDS = (
    "contact_person",
    "specializations",
    "certification_number",
    "certification_expiry",
    "is_active",
    "user_id",
)


def normalize_provider_fields(data: dict[str, Any]) -> dict[str, Any]:
    """
    Map submitted fields onto stored columns.

    Only keys present in ``data`` are written, so this works for both
    create (full dump) and partial update (exclude_unset dump). The new
    spelling wins when both are supplied. An address without a street is
    stored as NULL.
    """
    columns: dict[str, Any] = {}

    for column, new_key, legacy_key in _ALIASES:
        if new_key in data or legacy_key in data:
            columns[column] = data.get(new_key) or data.get(legacy_key)

    for field in _PLAIN_FIELDS:
        if field in data:
            columns[field] = data[field]

    if "address" in data:
        address = data["address"]
        street = (address or {}).get("street") or ""
        columns["address"] = address if street.strip() else None

    return columns


class MaintenanceProviderBase(BaseModel):
    company_name: Optional[str] = Field(None, max_length=255)
    name: Optional[str] = Field(None, max_length=255)
    contact_person: Optional[str] = None
    contact_email: Optional[str] = None
    email: Optional[str] = None
    contact_phone: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[ProviderAddress] = None
    certification_number: Optional[str] = None
    certification_expiry: Optional[date] = None
    user_id: Optional[str] = None


class MaintenanceProviderCreate(MaintenanceProviderBase):
    specializations: list[str] = Field(default_factory=list)
    is_active: bool = True

    check_specializations = field_validator("specializations")(_check_specializations)

    @model_validator(mode="after")
    def require_name(self):
        if not (self.company_name or self.name):
            raise ValueError("company_name (or name) is required")
        return self


class MaintenanceProviderUpdate(MaintenanceProviderBase):
    specializations: Optional[list[str]] = None
    is_active: Optional[bool] = None

    check_specializations = field_validator("specializations")(_check_specializations)


class MaintenanceProviderResponse(BaseModel):
    id: str
    tenant_id: str
    user_id: Optional[str]
    name: str
    contact_person: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    address: Optional[dict[str, Any]]
    specializations: list[str]
    certification_number: Optional[str]
    certification_expiry: Optional[date]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @computed_field
    @property
    def company_name(self) -> str:
        return self.name

    @computed_field
    @property
    def contact_email(self) -> Optional[str]:
        return self.email

    @computed_field
    @property
    def contact_phone(self) -> Optional[str]:
        return self.phone


class MaintenanceProviderListResponse(BaseModel):
    maintenance_providers: list[MaintenanceProviderResponse]
    total: int
    page: int
    page_size: int
