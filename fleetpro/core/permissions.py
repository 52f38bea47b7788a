"""
Permission System

Role gates for the fleet roles. A route lists the roles it admits;
super users are admitted everywhere. A denied user is told where their
own role lands so the client can redirect them.
"""
from typing import Iterable, Union
from fleetpro.models.user import User, UserRole
from fleetpro.core.exceptions import PermissionDenied


ROLE_HOME_PATHS = {
    UserRole.ADMIN.value: "/dashboard",
    UserRole.DRIVER.value: "/driver",
    UserRole.MAINTENANCE_PROVIDER.value: "/maintenance",
}

LOGIN_PATH = "/auth/login"


def home_path_for(role: Union[str, UserRole, None]) -> str:
    """Landing page for a role; unknown roles go back to login."""
    if isinstance(role, UserRole):
        role = role.value
    return ROLE_HOME_PATHS.get(role, LOGIN_PATH)


def check_roles(user: User, allowed: Iterable[Union[str, UserRole]]) -> None:
    """Raise PermissionDenied unless ``user`` holds one of ``allowed``."""
    allowed = tuple(allowed)
    if user.has_role(*allowed):
        return
    names = ", ".join(UserRole(r).value for r in allowed)
    raise PermissionDenied(
        detail=f"This action requires one of the roles: {names}",
        redirect_to=home_path_for(user.role),
    )


def can_modify_user(current_user: User, target_user: User) -> bool:
    """
    Admins (and super users) can modify anyone in their tenant,
    everyone else only themselves.
    """
    if current_user.has_role(UserRole.ADMIN):
        return True
    return current_user.id == target_user.id


def can_assign_role(current_user: User, role: Union[str, UserRole]) -> bool:
    """Only super users may hand out the super_user role."""
    if UserRole(role) == UserRole.SUPER_USER:
        return current_user.is_super_user
    return current_user.has_role(UserRole.ADMIN)
