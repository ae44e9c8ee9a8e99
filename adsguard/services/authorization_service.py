# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Request-scoped authorization gate.

Every protected operation passes through authorize(): it either returns an
AuthorizationContext for downstream use (the privacy filter reads the
principal from it) or raises. It never writes to the data layer.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from sqlalchemy.orm import Session

from adsguard.config import settings
from adsguard.exceptions import ConfigurationError, PermissionDenied, Unauthenticated
from adsguard.rbac.permissions import Action, make_key
from adsguard.rbac.principal import Principal
from adsguard.rbac.privilege import is_privileged, is_superadmin, is_superadmin_level
from adsguard.services.permission_resolver import get_resolver

logger = logging.getLogger(__name__)


class AuthorizationState(str, Enum):
    """Per-request gate state; ALLOWED and DENIED are terminal."""

    UNCHECKED = "unchecked"
    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass(frozen=True)
class AuthorizationContext:
    """Outcome of a successful check, attached to the request scope."""

    principal: Principal
    module: str
    action: str
    state: AuthorizationState = AuthorizationState.ALLOWED
    is_superadmin: bool = False
    is_privileged: bool = False
    bypass_reason: str | None = None

    @property
    def permission_name(self) -> str:
        return f"{self.module}_{self.action}"


def authorize(
    db: Session,
    principal: Principal | None,
    module: str,
    action: str | Action,
) -> AuthorizationContext:
    """Check that principal may perform action on module.

    Raises:
        Unauthenticated: If there is no principal.
        PermissionDenied: If the role is inactive or lacks the grant.
        ConfigurationError: If the module is guarded but has no active
            permissions at all.
        StorageUnavailable: If the permission store cannot be reached.
    """
    if principal is None:
        raise Unauthenticated()

    key = make_key(module, action)

    if not principal.role_is_active:
        logger.info(
            "Denied %s for user %s: role %s is inactive",
            key,
            principal.user_id,
            principal.role_name,
        )
        raise PermissionDenied(
            key.module, key.action, principal.role_name, reason="role_inactive"
        )

    resolver = get_resolver()
    allowed = resolver.has_permission(db, principal.role_id, key.module, key.action)

    if allowed and is_superadmin(principal):
        logger.info(
            "SuperAdmin bypass: role %s (level %s) may %s %s",
            principal.role_name,
            principal.role_level,
            key.action,
            key.module,
        )
        return AuthorizationContext(
            principal=principal,
            module=key.module,
            action=key.action,
            is_superadmin=True,
            is_privileged=True,
            bypass_reason="SuperAdmin has unrestricted access",
        )

    if allowed:
        return AuthorizationContext(
            principal=principal,
            module=key.module,
            action=key.action,
            is_privileged=is_privileged(principal),
        )

    if key.module not in settings.default_allow_modules and not resolver.module_has_permissions(
        db, key.module
    ):
        logger.error(
            "Module %s is guarded but has no active permissions; denying %s for user %s",
            key.module,
            key,
            principal.user_id,
        )
        raise ConfigurationError(f"Module {key.module!r} has no active permissions")

    available = resolver.available_actions(db, principal.role_id, key.module)
    logger.info(
        "Denied %s for user %s with role %s",
        key,
        principal.user_id,
        principal.role_name,
    )
    raise PermissionDenied(
        key.module,
        key.action,
        principal.role_name,
        available_actions=available,
    )


def assert_can_manage_role(
    principal: Principal,
    target_level: int,
    action: str = "update",
    target_name: str | None = None,
) -> None:
    """Stop principals from creating or editing roles at or above their own level.

    A role whose name is configured as superadmin counts as above every
    level, so only superadmins may create, rename to or edit such a role.

    Raises:
        PermissionDenied: With reason ``privilege_escalation``.
    """
    if is_superadmin(principal):
        return
    if target_level < principal.role_level and not is_superadmin_level(
        target_level, target_name
    ):
        return
    logger.warning(
        "Blocked privilege escalation: role %s (level %s) tried to %s role %s (level %s)",
        principal.role_name,
        principal.role_level,
        action,
        target_name,
        target_level,
    )
    raise PermissionDenied(
        "roles", action, principal.role_name, reason="privilege_escalation"
    )
