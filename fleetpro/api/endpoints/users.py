"""
User Management Endpoints

CRUD operations for staff accounts.

RBAC:
- List / get / create / delete: admin (super users across organisations)
- Update: admin, or the user themself; only admins change roles
"""
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session, selectinload
from typing import Optional

from fleetpro.database import get_db
from fleetpro.models.user import User, UserRole, department_for
from fleetpro.models.tenant import Tenant
from fleetpro.models.driver import Driver
from fleetpro.models.maintenance_provider import MaintenanceProvider
from fleetpro.schemas.user import (
    UserResponse,
    UserCreate,
    UserUpdate,
    UserListResponse
)
from fleetpro.api.deps import get_current_user, get_current_tenant, require_admin
from fleetpro.core.security import get_password_hash
from fleetpro.core.permissions import can_modify_user, can_assign_role, home_path_for
from fleetpro.core.exceptions import InvalidInputError, PermissionDenied, TenantNotFoundError
from fleetpro.core.scoping import tenant_scope, get_scoped_or_404, paginate
from fleetpro.services.role_records import check_licence_unique, ensure_role_record
from fleetpro.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    List users with their driver / provider records.

    Super users see every organisation.
    """
    query = db.query(User).options(
        selectinload(User.driver),
        selectinload(User.maintenance_provider)
    )
    query = tenant_scope(query, User, tenant, current_user, allow_super_user=True)

    if role:
        query = query.filter(User.role == role.value)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)

    users, total = paginate(query, page, page_size, User.created_at.desc())

    logger.debug(f"Listed {len(users)} users for tenant {tenant.id}")

    return UserListResponse(users=users, total=total, page=page, page_size=page_size)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    return get_scoped_or_404(db, User, user_id, tenant, "User", current_user, allow_super_user=True)


def _target_tenant_id(db: Session, current_user: User, tenant: Tenant, organization_id: Optional[str]) -> str:
    """Admins create in their own organisation; super users must pick one."""
    if not current_user.is_super_user:
        return tenant.id
    if not organization_id:
        raise InvalidInputError("Please select an organization for the user")
    if not db.query(Tenant).filter(Tenant.id == organization_id).first():
        raise TenantNotFoundError(organization_id)
    return organization_id


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    Create a user, plus the role record their role needs.

    role=driver creates a Driver from the licence fields,
    role=maintenance_provider creates a MaintenanceProvider from the
    company fields. Everything commits together.
    """
    if not can_assign_role(current_user, user_data.role):
        raise PermissionDenied(
            detail="Only super users can create super users",
            redirect_to=home_path_for(current_user.role)
        )

    tenant_id = _target_tenant_id(db, current_user, tenant, user_data.organization_id)

    existing_user = db.query(User).filter(
        User.tenant_id == tenant_id,
        User.email == user_data.email
    ).first()

    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )

    if user_data.role == UserRole.DRIVER:
        check_licence_unique(db, user_data.licence_number)

    profile = {
        "first_name": user_data.first_name,
        "last_name": user_data.last_name,
        "department": department_for(user_data.role),
    }
    if user_data.phone:
        profile["phone"] = user_data.phone

    new_user = User(
        tenant_id=tenant_id,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        role=user_data.role.value,
        profile=profile,
        is_active=True
    )
    db.add(new_user)
    db.flush()

    if user_data.role == UserRole.DRIVER:
        db.add(Driver(
            tenant_id=tenant_id,
            user_id=new_user.id,
            licence_number=user_data.licence_number or None,
            licence_expiry=user_data.licence_expiry,
            cpc_expiry=user_data.cpc_expiry,
            tacho_card_expiry=user_data.tacho_card_expiry,
        ))
    elif user_data.role == UserRole.MAINTENANCE_PROVIDER:
        address = user_data.address.model_dump() if user_data.address else None
        if address and not (address.get("street") or "").strip():
            address = None
        db.add(MaintenanceProvider(
            tenant_id=tenant_id,
            user_id=new_user.id,
            name=user_data.company_name or new_user.full_name,
            contact_person=new_user.full_name,
            email=user_data.contact_email or user_data.email,
            phone=user_data.contact_phone or user_data.phone,
            address=address,
            specializations=user_data.specializations,
            certification_number=user_data.certification_number,
            certification_expiry=user_data.certification_expiry,
        ))

    db.commit()
    db.refresh(new_user)

    logger.info(
        f"User created: {new_user.id} ({new_user.role}) by {current_user.id}",
        extra={"tenant_id": tenant_id}
    )

    return new_user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    current_user: User = Depends(get_current_user),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """
    Update user information.

    Admins update anyone in scope, other users only themselves.
    Role changes require admin, and super_user only super users.
    """
    user = get_scoped_or_404(db, User, user_id, tenant, "User", current_user, allow_super_user=True)

    if not can_modify_user(current_user, user):
        raise PermissionDenied(
            detail="Not authorized to modify this user",
            redirect_to=home_path_for(current_user.role)
        )
    if user.is_super_user and not current_user.is_super_user:
        raise PermissionDenied(
            detail="Only super users can modify super users",
            redirect_to=home_path_for(current_user.role)
        )

    if user_data.role and user_data.role.value != user.role:
        if not can_assign_role(current_user, user_data.role):
            raise PermissionDenied(
                detail="Not authorized to assign this role",
                redirect_to=home_path_for(current_user.role)
            )

    # Deactivating is an admin action too
    if user_data.is_active is not None and not current_user.has_role(UserRole.ADMIN):
        raise PermissionDenied(
            detail="Only admins can change account status",
            redirect_to=home_path_for(current_user.role)
        )

    update_data = {
        k: v for k, v in user_data.model_dump(exclude_unset=True).items()
        if v is not None or k == "profile"
    }
    if "role" in update_data:
        update_data["role"] = UserRole(update_data["role"]).value

    profile = dict(user.profile or {})
    profile.update(update_data.pop("profile", None) or {})
    for field, value in update_data.items():
        setattr(user, field, value)
        if field in ("first_name", "last_name"):
            profile[field] = value
    if "role" in update_data:
        profile["department"] = department_for(user.role)
    user.profile = profile

    if "role" in update_data:
        ensure_role_record(db, user)

    db.commit()
    db.refresh(user)

    logger.info(f"User updated: {user.id} by {current_user.id}")

    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    current_user: User = Depends(require_admin),
    tenant: Tenant = Depends(get_current_tenant),
    db: Session = Depends(get_db)
):
    """Delete a user; their driver record goes with them."""
    user = get_scoped_or_404(db, User, user_id, tenant, "User", current_user, allow_super_user=True)

    if user.id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account"
        )

    db.delete(user)
    db.commit()

    logger.info(f"User deleted: {user_id} by {current_user.id}")

    return None
