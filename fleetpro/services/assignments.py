"""
Depot assignment helpers shared by the vehicle and driver endpoints.

A vehicle or driver belongs to at most one depot. Assigning replaces any
existing link, assigning None removes it.
"""
from typing import Optional
from sqlalchemy.orm import Session

from fleetpro.models.depot import Depot, DepotVehicle, DepotDriver
from fleetpro.models.tenant import Tenant
from fleetpro.core.scoping import get_scoped_or_404

_LINKS = {
    "vehicle": (DepotVehicle, "vehicle_id"),
    "driver": (DepotDriver, "driver_id"),
}


def _link(kind: str):
    return _LINKS[kind]


def current_depot_id(db: Session, kind: str, entity_id: str) -> Optional[str]:
    model, column = _link(kind)
    link = db.query(model).filter(getattr(model, column) == entity_id).first()
    return link.depot_id if link else None


def check_depot(db: Session, tenant: Tenant, depot_id: Optional[str]) -> None:
    """404 unless depot_id is empty or a depot of the tenant."""
    if depot_id:
        get_scoped_or_404(db, Depot, depot_id, tenant, "Depot")


def assign_depot(
    db: Session,
    kind: str,
    entity_id: str,
    depot_id: Optional[str],
    assigned_by: Optional[str],
) -> None:
    """Replace the entity's depot link. Does not commit."""
    model, column = _link(kind)
    db.query(model).filter(getattr(model, column) == entity_id).delete(synchronize_session=False)
    if depot_id:
        db.add(model(depot_id=depot_id, assigned_by=assigned_by, **{column: entity_id}))
