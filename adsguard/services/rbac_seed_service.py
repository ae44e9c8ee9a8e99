# adsguard/services/rbac_seed_service.py
import logging

from sqlalchemy.orm import Session

from adsguard.exceptions import ConfigurationError
from adsguard.models import Permission, Role, RolePermission
from adsguard.rbac.modules import registry
from adsguard.rbac.roles import DEFAULT_ROLES

from . import rbac_service
from .permission_resolver import get_resolver

logger = logging.getLogger(__name__)


def seed_permissions(db: Session) -> int:
    """Register a permission for every (module, action) in the registry.

    Returns the number of permissions created.
    """
    created = 0
    for spec in registry.all():
        for key in spec.keys():
            if rbac_service.get_permission_by_name(db, key.name) is None:
                db.add(
                    Permission(
                        name=key.name,
                        module=key.module,
                        action=key.action,
                        description=f"{key.action.capitalize()} {spec.display_name}",
                    )
                )
                created += 1
    db.commit()
    return created


def seed_rbac_data(db: Session) -> None:
    """Seeds the database with module permissions and default roles.

    This function is idempotent.
    @param db: SQLAlchemy Session object
    """
    created = seed_permissions(db)

    for role_data in DEFAULT_ROLES:
        role = rbac_service.get_role_by_name(db, role_data["name"])
        if role:
            continue
        role = Role(
            name=role_data["name"],
            level=role_data["level"],
            is_system=role_data["is_system"],
            description=role_data["description"],
        )
        db.add(role)
        db.flush()  # Flush to get the role ID

        for perm_name in role_data["permissions"]:
            permission = rbac_service.get_permission_by_name(db, perm_name)
            if permission is None:
                # Default roles may only reference registry permissions
                db.rollback()
                raise ConfigurationError(
                    f"Default role {role_data['name']!r} references unknown "
                    f"permission {perm_name!r}"
                )
            db.add(RolePermission(role_id=role.id, permission_id=permission.id))
    db.commit()
    get_resolver().invalidate_all()
    logger.info("RBAC seed complete, %s new permissions", created)
