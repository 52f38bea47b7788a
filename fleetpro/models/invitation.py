"""
User Invitation Model

Admins invite staff by email. The invitee follows a link carrying the
token, sets a password, and the user (plus its driver or provider record)
is created in the inviting tenant.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from datetime import datetime
from fleetpro.database import Base
import uuid


class UserInvitation(Base):
    __tablename__ = "user_invitations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(
        String(36),
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    email = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    role = Column(String(50), nullable=False)

    invited_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    invitation_token = Column(String(255), unique=True, nullable=False, index=True)
    expires_at = Column(DateTime, nullable=False)
    used_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UserInvitation {self.email} (tenant={self.tenant_id})>"

    def is_usable(self, now: datetime = None) -> bool:
        now = now or datetime.utcnow()
        return self.used_at is None and self.expires_at > now
