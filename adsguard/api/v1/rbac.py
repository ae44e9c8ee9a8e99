# adsguard/api/v1/rbac.py
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from adsguard.api.deps import get_db, require_permission
from adsguard.exceptions import InvalidPermissionError, PermissionDenied, ResourceNotFound
from adsguard.models import User
from adsguard.rbac.permissions import Action
from adsguard.schemas.rbac import (
    AuditLogEntrySchema,
    AuditLogPageSchema,
    GrantCreateSchema,
    GrantSchema,
    ModuleSchema,
    PermissionCheckResultSchema,
    PermissionCheckSchema,
    PermissionSchema,
    PermissionUpdateSchema,
    RoleCreateSchema,
    RolePermissionsUpdateSchema,
    RoleSchema,
    RoleUpdateSchema,
    RoleWithPermissionsSchema,
    UserRoleSchema,
    UserRoleUpdateSchema,
)
from adsguard.services import rbac_service
from adsguard.services.authorization_service import (
    AuthorizationContext,
    assert_can_manage_role,
)

router = APIRouter()


def _acting_user(db: Session, auth: AuthorizationContext) -> User | None:
    return db.get(User, auth.principal.user_id)


@router.get("/permissions", response_model=list[PermissionSchema], summary="List all permissions")
def list_permissions(
    include_inactive: bool = True,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("permissions", Action.READ)),
):
    """Retrieve every permission, optionally only the active ones."""
    return rbac_service.list_permissions(db, include_inactive=include_inactive)


@router.patch("/permissions/{permission_id}", response_model=PermissionSchema, summary="Enable or disable a permission")
def update_permission(
    permission_id: uuid.UUID,
    data: PermissionUpdateSchema,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("permissions", Action.UPDATE)),
):
    """Toggle a permission. Disabled permissions are ignored for every role."""
    return rbac_service.set_permission_active(db, permission_id, data.is_active)


@router.get("/modules", response_model=list[ModuleSchema], summary="List modules with permissions")
def list_modules(
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("modules", Action.READ)),
):
    """Modules that have at least one active permission."""
    return rbac_service.list_modules_with_permissions(db)


@router.get("/roles", response_model=list[RoleSchema], summary="List all roles")
def list_roles(
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.READ)),
):
    """Retrieve every role, highest level first."""
    return rbac_service.list_roles(db)


@router.get("/roles/{role_id}", response_model=RoleWithPermissionsSchema, summary="Get a role by ID with its permissions")
def get_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.READ)),
):
    """Retrieve a role including every permission granted to it."""
    role = rbac_service.require_role(db, role_id)
    permissions = rbac_service.get_role_permissions(db, role_id)
    return RoleWithPermissionsSchema(
        **RoleSchema.model_validate(role).model_dump(),
        permissions=[PermissionSchema.model_validate(p) for p in permissions],
    )


@router.post("/roles", response_model=RoleSchema, status_code=status.HTTP_201_CREATED, summary="Create a role")
def create_role(
    role_in: RoleCreateSchema,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.CREATE)),
):
    """Create a role below the caller's own level."""
    assert_can_manage_role(auth.principal, role_in.level, "create", role_in.name)
    return rbac_service.create_role(db, role_in.name, role_in.level, role_in.description)


def _require_editable_role(db: Session, auth: AuthorizationContext, role_id: uuid.UUID, action: str):
    role = rbac_service.require_role(db, role_id)
    if role.is_system:
        raise PermissionDenied("roles", action, auth.principal.role_name, reason="system_role")
    assert_can_manage_role(auth.principal, role.level, action, role.name)
    return role


@router.patch("/roles/{role_id}", response_model=RoleSchema, summary="Update a role")
def update_role(
    role_id: uuid.UUID,
    role_in: RoleUpdateSchema,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.UPDATE)),
):
    """Update name, level, description or active flag of a role.

    System roles cannot be modified. The role as it would look after the
    update must also stay below the caller.
    """
    role = _require_editable_role(db, auth, role_id, "update")
    assert_can_manage_role(
        auth.principal,
        role_in.level if role_in.level is not None else role.level,
        "update",
        role_in.name or role.name,
    )
    return rbac_service.update_role(
        db,
        role_id,
        name=role_in.name,
        level=role_in.level,
        description=role_in.description,
        is_active=role_in.is_active,
    )


@router.delete("/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a role")
def delete_role(
    role_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.DELETE)),
):
    """Delete a role and its grants. Refused while any user holds the role."""
    _require_editable_role(db, auth, role_id, "delete")
    rbac_service.delete_role(db, role_id, deleted_by=_acting_user(db, auth))


@router.put("/roles/{role_id}/permissions", response_model=list[PermissionSchema], summary="Replace the permissions of a role")
def set_role_permissions(
    role_id: uuid.UUID,
    data: RolePermissionsUpdateSchema,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.UPDATE)),
):
    _require_editable_role(db, auth, role_id, "update")
    return rbac_service.set_role_permissions(
        db, role_id, data.permission_ids, granted_by=_acting_user(db, auth)
    )


@router.post("/roles/{role_id}/grants", response_model=GrantSchema, summary="Grant a permission to a role")
def grant_permission(
    role_id: uuid.UUID,
    data: GrantCreateSchema,
    response: Response,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.UPDATE)),
):
    """Grant one permission. Granting an existing pair returns it unchanged."""
    _require_editable_role(db, auth, role_id, "update")
    granted_by = _acting_user(db, auth)
    if data.permission_id is not None:
        grant, created = rbac_service.grant_permission(db, role_id, data.permission_id, granted_by)
    elif data.module and data.action:
        grant, created = rbac_service.grant_by_key(db, role_id, data.module, data.action, granted_by)
    else:
        raise InvalidPermissionError("Provide permission_id or module and action")
    response.status_code = status.HTTP_201_CREATED if created else status.HTTP_200_OK
    result = GrantSchema.model_validate(grant)
    result.created = created
    return result


@router.delete("/roles/{role_id}/grants/{permission_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Revoke a permission from a role")
def revoke_permission(
    role_id: uuid.UUID,
    permission_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("roles", Action.UPDATE)),
):
    _require_editable_role(db, auth, role_id, "update")
    if not rbac_service.revoke_permission(db, role_id, permission_id, _acting_user(db, auth)):
        raise ResourceNotFound("grant", permission_id)


@router.put("/users/{user_id}/role", response_model=UserRoleSchema, summary="Assign a role to a user")
def assign_user_role(
    user_id: uuid.UUID,
    data: UserRoleUpdateSchema,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("users", Action.UPDATE)),
):
    """Move a user to another role.

    Both the user's current role and the new one must be below the caller.
    """
    user = rbac_service.require_user(db, user_id)
    current = user.role
    assert_can_manage_role(auth.principal, current.level, "assign", current.name)
    role = rbac_service.require_role(db, data.role_id)
    assert_can_manage_role(auth.principal, role.level, "assign", role.name)
    user = rbac_service.assign_role_to_user(
        db, user_id, data.role_id, assigned_by=_acting_user(db, auth)
    )
    return UserRoleSchema(user_id=user.id, role_id=role.id, role_name=role.name)


@router.post("/check", response_model=PermissionCheckResultSchema, summary="Check one permission of a user")
def check_permission(
    data: PermissionCheckSchema,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("permissions", Action.READ)),
):
    """Answer whether a user may perform an action on a module right now."""
    allowed = rbac_service.check_user_permission(db, data.user_id, data.module, data.action)
    return PermissionCheckResultSchema(**data.model_dump(), allowed=allowed)


@router.get("/audit", response_model=AuditLogPageSchema, summary="List the permission audit log")
def list_audit_log(
    page: int = 1,
    limit: int = 50,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("permissions", Action.READ)),
):
    """Grant, revoke, role assignment and role deletion events, newest first.

    The page size is capped at 100.
    """
    page = max(page, 1)
    limit = max(1, min(limit, rbac_service.MAX_AUDIT_PAGE_SIZE))
    entries, total = rbac_service.list_audit_log(db, page=page, limit=limit)
    return AuditLogPageSchema(
        items=[AuditLogEntrySchema.model_validate(e) for e in entries],
        total=total,
        page=page,
        limit=limit,
    )
