"""
Authentication Schemas

Request/response models for login, registration and invitations.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from fleetpro.models.user import UserRole


class Token(BaseModel):
    """JWT token response, with the landing page for the user's role."""
    access_token: str
    token_type: str = "bearer"
    role: UserRole
    redirect_to: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    tenant_slug: str = Field(..., min_length=1)


class RegisterRequest(BaseModel):
    """Self-service sign-up. Always creates a driver."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    tenant_slug: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "driver@example.com",
                "password": "secret123",
                "first_name": "Sam",
                "last_name": "Taylor",
                "tenant_slug": "acme-haulage"
            }
        }


class InvitationCreate(BaseModel):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    role: UserRole = UserRole.DRIVER


class InvitationResponse(BaseModel):
    id: str
    tenant_id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    invited_by: Optional[str]
    expires_at: datetime
    used_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class InvitationCreatedResponse(BaseModel):
    invitation: InvitationResponse
    invitation_token: str
    invitation_link: str


class InvitationListResponse(BaseModel):
    invitations: list[InvitationResponse]
    total: int
    page: int
    page_size: int


class InvitationDetails(BaseModel):
    """What the sign-up page shows before the invitee sets a password."""
    email: str
    first_name: str
    last_name: str
    role: UserRole
    organization_name: str
    expires_at: datetime


class AcceptInvitationRequest(BaseModel):
    # Length and match are checked in the endpoint so they come back as 400s
    password: str
    confirm_password: str
