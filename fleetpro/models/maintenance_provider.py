"""
Maintenance Provider Model

Stored columns use the legacy names (name, email, phone). The newer
company_name / contact_email / contact_phone spellings are accepted at
the API edge and mapped onto these, see schemas.maintenance_provider.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Date, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from fleetpro.database import Base
import uuid


SPECIALIZATION_OPTIONS = (
    "Engine Repair",
    "Brake Systems",
    "Transmission",
    "Electrical Systems",
    "HVAC",
    "Bodywork",
    "Tire Services",
    "Hydraulic Systems",
    "ADR Compliance",
    "Annual Testing",
    "MOT Testing",
    "General Maintenance",
)


class MaintenanceProvider(Base):
    __tablename__ = "maintenance_providers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    # Set when the provider logs in as a maintenance_provider user
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(JSON, nullable=True)
    specializations = Column(JSON, nullable=False, default=list)

    certification_number = Column(String(100), nullable=True)
    certification_expiry = Column(Date, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="maintenance_provider")

    def __repr__(self):
        return f"<MaintenanceProvider {self.name} (tenant={self.tenant_id})>"
