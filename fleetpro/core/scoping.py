"""
Tenant Scoping Helpers

Every query against a tenant-owned table goes through tenant_scope().
Lookups by id go through get_scoped_or_404(), which reports rows of
other tenants as missing.
"""
from typing import Optional, Tuple, List, Any
from sqlalchemy.orm import Query, Session

from fleetpro.models.tenant import Tenant
from fleetpro.models.user import User
from fleetpro.core.exceptions import EntityNotFoundError


def tenant_scope(
    query: Query,
    model,
    tenant: Tenant,
    user: Optional[User] = None,
    allow_super_user: bool = False,
) -> Query:
    """
    Restrict ``query`` to rows of ``tenant``.

    With allow_super_user=True a super user sees rows from every tenant,
    used by the screens that list across organisations (depots, users).
    """
    if allow_super_user and user is not None and user.is_super_user:
        return query
    return query.filter(model.tenant_id == tenant.id)


def get_scoped_or_404(
    db: Session,
    model,
    entity_id: str,
    tenant: Tenant,
    entity_name: str,
    user: Optional[User] = None,
    allow_super_user: bool = False,
):
    """Load one row by id inside the tenant scope or raise EntityNotFoundError."""
    query = db.query(model).filter(model.id == entity_id)
    row = tenant_scope(query, model, tenant, user, allow_super_user).first()
    if row is None:
        raise EntityNotFoundError(entity_name, entity_id)
    return row


def paginate(query: Query, page: int, page_size: int, *order_by) -> Tuple[List[Any], int]:
    """Count, order and slice a query. Returns (rows, total)."""
    total = query.count()
    if order_by:
        query = query.order_by(*order_by)
    rows = query.offset((page - 1) * page_size).limit(page_size).all()
    return rows, total
