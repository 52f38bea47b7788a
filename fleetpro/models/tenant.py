"""
Tenant Model

The tenant (organisation) is the isolation boundary. Every fleet record
carries a tenant_id pointing here, and deleting a tenant cascades to all
of them at the database level.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from fleetpro.database import Base
import uuid


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    slug = Column(String(100), unique=True, nullable=False, index=True)

    # Free-form organisation settings (branding, contact details, ...)
    settings = Column(JSON, nullable=False, default=dict)

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    # NULL = use the global defaults
    rate_limit_per_minute = Column(Integer, nullable=True)
    rate_limit_burst = Column(Integer, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # passive_deletes: children are removed by ON DELETE CASCADE
    users = relationship(
        "User", back_populates="tenant", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Tenant {self.slug}>"
