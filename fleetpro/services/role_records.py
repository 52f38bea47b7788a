"""
Role records: the Driver or MaintenanceProvider row that goes with a
user's role.
"""
from typing import Optional
from sqlalchemy.orm import Session

from fleetpro.models.user import User, UserRole
from fleetpro.models.driver import Driver
from fleetpro.models.maintenance_provider import MaintenanceProvider
from fleetpro.core.exceptions import InvalidInputError


def check_licence_unique(db: Session, licence_number: Optional[str], driver_id: Optional[str] = None) -> None:
    """400 if another driver already holds ``licence_number``."""
    if not licence_number:
        return
    query = db.query(Driver).filter(Driver.licence_number == licence_number)
    if driver_id:
        query = query.filter(Driver.id != driver_id)
    if query.first():
        raise InvalidInputError(f"Licence number already registered: {licence_number}")


def ensure_role_record(db: Session, user: User) -> None:
    """
    Add an empty role record if the user's role needs one and has none.

    Drivers get a licence placeholder, providers a provider named after
    the user. Does not commit.
    """
    if user.role == UserRole.DRIVER.value and user.driver is None:
        db.add(Driver(tenant_id=user.tenant_id, user_id=user.id))
    elif user.role == UserRole.MAINTENANCE_PROVIDER.value and user.maintenance_provider is None:
        db.add(MaintenanceProvider(
            tenant_id=user.tenant_id,
            user_id=user.id,
            name=user.full_name or user.email,
            email=user.email,
        ))
