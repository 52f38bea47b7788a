"""
User Model

Users belong to a tenant and carry one of the fleet roles.

IMPORTANT: tenant_id is the critical field for data isolation.
Every query MUST filter by tenant_id to prevent cross-tenant data leaks.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from fleetpro.database import Base
import uuid
import enum


class UserRole(str, enum.Enum):
    """
    Fleet roles.

    ADMIN: manages the organisation's fleet, staff and invitations
    DRIVER: drives vehicles, reports defects
    MAINTENANCE_PROVIDER: inspects and repairs vehicles
    SUPER_USER: platform operator, crosses tenants and passes every role gate
    """
    ADMIN = "admin"
    DRIVER = "driver"
    MAINTENANCE_PROVIDER = "maintenance_provider"
    SUPER_USER = "super_user"


# Department written into new profiles, keyed by role
ROLE_DEPARTMENTS = {
    UserRole.ADMIN: "Administration",
    UserRole.DRIVER: "Driving",
    UserRole.SUPER_USER: "System Administration",
}


def department_for(role) -> str:
    return ROLE_DEPARTMENTS.get(UserRole(role), "Maintenance")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    email = Column(String(255), nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    # Stored as a plain string so new roles don't need a schema migration
    role = Column(String(50), default=UserRole.DRIVER.value, nullable=False, index=True)

    # first_name/last_name/department/phone as captured at sign-up
    profile = Column(JSON, nullable=False, default=dict)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    tenant = relationship("Tenant", back_populates="users")
    driver = relationship(
        "Driver", back_populates="user", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True
    )
    maintenance_provider = relationship(
        "MaintenanceProvider", back_populates="user", uselist=False
    )

    __table_args__ = (
        # Same email may exist in different tenants
        Index('idx_user_tenant_email', 'tenant_id', 'email', unique=True),
        Index('idx_user_tenant_role', 'tenant_id', 'role'),
    )

    def __repr__(self):
        return f"<User {self.email} (tenant={self.tenant_id})>"

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    @property
    def is_super_user(self) -> bool:
        return self.role == UserRole.SUPER_USER.value

    def has_role(self, *roles) -> bool:
        """True if the user holds one of ``roles``. Super users hold every role."""
        if self.is_super_user:
            return True
        return self.role in {UserRole(r).value for r in roles}
