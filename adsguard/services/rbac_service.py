# adsguard/services/rbac_service.py
import datetime
import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from adsguard.exceptions import (
    ConflictError,
    PermissionNotFound,
    ResourceNotFound,
    RoleNotFound,
    StorageUnavailable,
)
from adsguard.models import (
    WILDCARD_ACTION,
    AuditAction,
    Permission,
    PermissionAuditLog,
    Role,
    RolePermission,
    User,
)
from adsguard.rbac.modules import registry
from adsguard.rbac.permissions import make_key
from adsguard.services.permission_resolver import get_resolver

logger = logging.getLogger(__name__)

MAX_AUDIT_PAGE_SIZE = 100


def get_role(db: Session, role_id: uuid.UUID) -> Role | None:
    """Get a role by its ID."""
    return db.get(Role, role_id)


def get_role_by_name(db: Session, name: str) -> Role | None:
    """Get a role by its name."""
    return db.query(Role).filter(Role.name == name).first()


def require_role(db: Session, role_id: uuid.UUID) -> Role:
    role = get_role(db, role_id)
    if role is None:
        raise RoleNotFound(role_id)
    return role


def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.level.desc(), Role.name).all()


def create_role(
    db: Session,
    name: str,
    level: int,
    description: str | None = None,
    is_system: bool = False,
) -> Role:
    """Create a new role; names are unique."""
    if get_role_by_name(db, name):
        raise ConflictError(f"Role '{name}' already exists")
    role = Role(name=name, level=level, description=description, is_system=is_system)
    db.add(role)
    db.commit()
    db.refresh(role)
    logger.info("Created role %s (level %s)", name, level)
    return role


def update_role(
    db: Session,
    role_id: uuid.UUID,
    name: str | None = None,
    level: int | None = None,
    description: str | None = None,
    is_active: bool | None = None,
) -> Role:
    """Update a role's attributes.

    Level and active flag feed straight into permission resolution, so the
    cached snapshot of the role is dropped before returning.
    """
    role = _lock_role(db, role_id)
    if name is not None and name != role.name:
        existing = get_role_by_name(db, name)
        if existing and existing.id != role.id:
            # Release the row lock taken above
            db.rollback()
            raise ConflictError(f"Role '{name}' already exists")
        role.name = name
    if level is not None:
        role.level = level
    if description is not None:
        role.description = description
    if is_active is not None:
        role.is_active = is_active
    db.commit()
    get_resolver().invalidate_role(role.id)
    db.refresh(role)
    return role


def set_role_active(db: Session, role_id: uuid.UUID, is_active: bool) -> Role:
    """Soft-enable or soft-disable a role. Grants are left untouched."""
    role = update_role(db, role_id, is_active=is_active)
    logger.info("Role %s is now %s", role.name, "active" if is_active else "inactive")
    return role


def count_role_users(db: Session, role_id: uuid.UUID) -> int:
    return db.query(User).filter(User.role_id == role_id).count()


def delete_role(
    db: Session, role_id: uuid.UUID, deleted_by: User | None = None
) -> None:
    """Delete a role together with its grants.

    Raises:
        RoleNotFound: If the role does not exist.
        ConflictError: While any user still holds the role.
    """
    role = _lock_role(db, role_id)
    users = count_role_users(db, role_id)
    if users:
        db.rollback()
        raise ConflictError(
            f"Cannot delete role '{role.name}': it is assigned to {users} user(s)"
        )
    name = role.name
    _audit(db, AuditAction.ROLE_DELETED, role_name=name, performed_by=deleted_by)
    db.delete(role)
    db.commit()
    get_resolver().invalidate_role(role_id)
    logger.info("Deleted role %s", name)


def get_permission(db: Session, permission_id: uuid.UUID) -> Permission | None:
    return db.get(Permission, permission_id)


def get_permission_by_name(db: Session, name: str) -> Permission | None:
    return db.query(Permission).filter(Permission.name == name).first()


def find_permission(db: Session, module: str, action: str) -> Permission | None:
    """Find the active permission for a (module, action) pair."""
    key = make_key(module, action)
    return (
        db.query(Permission)
        .filter(
            Permission.module == key.module,
            Permission.action == key.action,
            Permission.is_active.is_(True),
        )
        .first()
    )


def list_permissions(db: Session, include_inactive: bool = True) -> list[Permission]:
    query = db.query(Permission)
    if not include_inactive:
        query = query.filter(Permission.is_active.is_(True))
    return query.order_by(Permission.module, Permission.action).all()


def register_permission(
    db: Session,
    module: str,
    action: str,
    description: str | None = None,
    name: str | None = None,
) -> Permission:
    """Register a new permission if it does not already exist."""
    key = make_key(module, action)
    name = name or key.name
    permission = get_permission_by_name(db, name)
    if not permission:
        permission = Permission(
            name=name,
            module=key.module,
            action=key.action,
            description=description,
        )
        db.add(permission)
        db.commit()
        get_resolver().invalidate_all()
    return permission


def register_wildcard_permission(
    db: Session, module: str, description: str | None = None
) -> Permission:
    """Register the ``{module}_*`` permission granting every action of a module."""
    return register_permission(db, module, WILDCARD_ACTION, description)


def set_permission_active(
    db: Session, permission_id: uuid.UUID, is_active: bool
) -> Permission:
    """Enable or disable a permission everywhere it is granted."""
    permission = get_permission(db, permission_id)
    if permission is None:
        raise PermissionNotFound(permission_id)
    permission.is_active = is_active
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise ConflictError(
            f"Another active permission already covers "
            f"{permission.module}.{permission.action}"
        ) from e
    # A permission can be granted to any number of roles
    get_resolver().invalidate_all()
    logger.info(
        "Permission %s is now %s", permission.name, "active" if is_active else "inactive"
    )
    return permission


def get_role_permissions(db: Session, role_id: uuid.UUID) -> list[Permission]:
    """Get every permission granted to a role, active or not."""
    return (
        db.query(Permission)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .filter(RolePermission.role_id == role_id)
        .order_by(Permission.module, Permission.action)
        .all()
    )


def grant_permission(
    db: Session,
    role_id: uuid.UUID,
    permission_id: uuid.UUID,
    granted_by: User | None = None,
) -> tuple[RolePermission, bool]:
    """Grant a permission to a role.

    Granting an existing pair is a no-op. Returns the grant row and whether
    it was newly created.
    """
    role = _lock_role(db, role_id)
    permission = get_permission(db, permission_id)
    if permission is None:
        db.rollback()
        raise PermissionNotFound(permission_id)

    existing = db.get(RolePermission, (role_id, permission_id))
    if existing is not None:
        db.rollback()
        return existing, False

    grant = RolePermission(
        role_id=role_id,
        permission_id=permission_id,
        granted_by_id=granted_by.id if granted_by else None,
        granted_at=datetime.datetime.utcnow(),
    )
    db.add(grant)
    _audit(
        db,
        AuditAction.GRANTED,
        role_id=role_id,
        role_name=role.name,
        permission=permission,
        performed_by=granted_by,
    )
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent grant of the same pair
        db.rollback()
        existing = db.get(RolePermission, (role_id, permission_id))
        if existing is None:
            raise
        return existing, False
    get_resolver().invalidate_role(role_id)
    logger.info("Granted permission %s to role %s", permission_id, role.name)
    return grant, True


def grant_by_key(
    db: Session,
    role_id: uuid.UUID,
    module: str,
    action: str,
    granted_by: User | None = None,
) -> tuple[RolePermission, bool]:
    """Grant the active permission for (module, action) to a role."""
    permission = find_permission(db, module, action)
    if permission is None:
        raise PermissionNotFound(make_key(module, action).name)
    return grant_permission(db, role_id, permission.id, granted_by)


def revoke_permission(
    db: Session,
    role_id: uuid.UUID,
    permission_id: uuid.UUID,
    revoked_by: User | None = None,
) -> bool:
    """Remove a grant. Returns True if removed, False if not found.

    The role's cache entry is dropped after the commit and before returning,
    so no check after this call can be answered from the old grants.
    """
    role = _lock_role(db, role_id)
    grant = db.get(RolePermission, (role_id, permission_id))
    if grant is None:
        db.rollback()
        return False
    _audit(
        db,
        AuditAction.REVOKED,
        role_id=role_id,
        role_name=role.name,
        permission=grant.permission,
        performed_by=revoked_by,
    )
    db.delete(grant)
    db.commit()
    get_resolver().invalidate_role(role_id)
    logger.info("Revoked permission %s from role %s", permission_id, role.name)
    return True


def revoke_by_key(
    db: Session,
    role_id: uuid.UUID,
    module: str,
    action: str,
    revoked_by: User | None = None,
) -> bool:
    permission = find_permission(db, module, action)
    if permission is None:
        return False
    return revoke_permission(db, role_id, permission.id, revoked_by)


def set_role_permissions(
    db: Session,
    role_id: uuid.UUID,
    permission_ids: list[uuid.UUID],
    granted_by: User | None = None,
) -> list[Permission]:
    """Replace the full grant set of a role in one transaction."""
    role = _lock_role(db, role_id)
    wanted = set(permission_ids)
    found = db.query(Permission).filter(Permission.id.in_(wanted)).all() if wanted else []
    missing = wanted - {p.id for p in found}
    if missing:
        db.rollback()
        raise PermissionNotFound(sorted(str(m) for m in missing)[0])

    current = {
        rp.permission_id: rp
        for rp in db.query(RolePermission).filter(RolePermission.role_id == role_id)
    }
    for permission_id, grant in current.items():
        if permission_id not in wanted:
            _audit(
                db,
                AuditAction.REVOKED,
                role_id=role_id,
                role_name=role.name,
                permission=grant.permission,
                performed_by=granted_by,
            )
            db.delete(grant)
    by_id = {p.id: p for p in found}
    now = datetime.datetime.utcnow()
    for permission_id in wanted - current.keys():
        _audit(
            db,
            AuditAction.GRANTED,
            role_id=role_id,
            role_name=role.name,
            permission=by_id[permission_id],
            performed_by=granted_by,
        )
        db.add(
            RolePermission(
                role_id=role_id,
                permission_id=permission_id,
                granted_by_id=granted_by.id if granted_by else None,
                granted_at=now,
            )
        )
    db.commit()
    get_resolver().invalidate_role(role_id)
    return get_role_permissions(db, role_id)


def list_modules_with_permissions(db: Session) -> list[dict]:
    """List registered modules that have at least one active permission.

    Modules without any permission have no enforceable surface and are left
    out of the admin UI.
    """
    rows = (
        db.query(Permission.module, Permission.action)
        .filter(Permission.is_active.is_(True))
        .all()
    )
    actions_by_module: dict[str, set[str]] = {}
    for module, action in rows:
        actions_by_module.setdefault(module, set()).add(action)

    modules = []
    for spec in registry.all():
        actions = actions_by_module.get(spec.name)
        if not actions:
            continue
        modules.append(
            {
                "name": spec.name,
                "display_name": spec.display_name,
                "route": spec.route,
                "actions": sorted(actions),
            }
        )
    return modules


def get_user(db: Session, user_id: uuid.UUID) -> User | None:
    return db.get(User, user_id)


def require_user(db: Session, user_id: uuid.UUID) -> User:
    user = get_user(db, user_id)
    if user is None:
        raise ResourceNotFound("user", user_id)
    return user


def assign_role_to_user(
    db: Session,
    user_id: uuid.UUID,
    role_id: uuid.UUID,
    assigned_by: User | None = None,
) -> User:
    """Move a user to a different role.

    The new role applies from the user's next request; principals are built
    from the user row, not from the session.
    """
    user = require_user(db, user_id)
    role = require_role(db, role_id)
    if user.role_id == role_id:
        return user
    user.role_id = role_id
    _audit(
        db,
        AuditAction.ROLE_ASSIGNED,
        role_id=role_id,
        role_name=role.name,
        user_id=user_id,
        performed_by=assigned_by,
    )
    db.commit()
    db.refresh(user)
    logger.info("Assigned role %s to user %s", role.name, user.username)
    return user


def check_user_permission(
    db: Session, user_id: uuid.UUID, module: str, action: str
) -> bool:
    """Point query: may this user perform action on module right now.

    Inactive users hold no permissions.
    """
    key = make_key(module, action)
    user = require_user(db, user_id)
    if not user.is_active:
        return False
    return get_resolver().has_permission(db, user.role_id, key.module, key.action)


def list_audit_log(
    db: Session, page: int = 1, limit: int = 50
) -> tuple[list[PermissionAuditLog], int]:
    """Get one page of the audit log, newest first, and the total count."""
    page = max(page, 1)
    limit = max(1, min(limit, MAX_AUDIT_PAGE_SIZE))
    query = db.query(PermissionAuditLog)
    total = query.count()
    entries = (
        query.order_by(PermissionAuditLog.created_at.desc(), PermissionAuditLog.id)
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return entries, total


def _audit(
    db: Session,
    action: AuditAction,
    role_id: uuid.UUID | None = None,
    role_name: str | None = None,
    permission: Permission | None = None,
    user_id: uuid.UUID | None = None,
    performed_by: User | None = None,
) -> None:
    """Stage an audit entry in the transaction of the change it records."""
    db.add(
        PermissionAuditLog(
            action=action.value,
            role_id=role_id,
            role_name=role_name,
            permission_id=permission.id if permission else None,
            permission_name=permission.name if permission else None,
            user_id=user_id,
            performed_by_id=performed_by.id if performed_by else None,
        )
    )


def _lock_role(db: Session, role_id: uuid.UUID) -> Role:
    """Load a role with a row lock so grant changes for it are serialized.

    Backends without row locking (SQLite) ignore FOR UPDATE.
    """
    try:
        role = db.execute(
            select(Role).where(Role.id == role_id).with_for_update()
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageUnavailable() from e
    if role is None:
        raise RoleNotFound(role_id)
    return role
