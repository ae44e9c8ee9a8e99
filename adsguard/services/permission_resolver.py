# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Permission resolution for roles.

Answers "may role R perform action A on module M" and computes the
effective permission set of a role. Absence of a grant is a plain False;
storage failures are raised as StorageUnavailable and must be treated as a
deny by the caller.
"""

import logging
import uuid
from typing import ClassVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adsguard.config import settings
from adsguard.exceptions import InvalidPermissionError, StorageUnavailable
from adsguard.models import WILDCARD_ACTION, Permission, Role, RolePermission
from adsguard.rbac.cache import PermissionCache, RoleSnapshot
from adsguard.rbac.modules import ModuleSpec, registry
from adsguard.rbac.permissions import Action, PermissionKey, key_from_record, make_key
from adsguard.rbac.privilege import is_superadmin_level

logger = logging.getLogger(__name__)

_ACTIVE_MODULES_KEY = ("active-modules",)


class PermissionResolver:
    """Resolves role grants, backed by a TTL-bounded versioned cache."""

    _instance: ClassVar["PermissionResolver | None"] = None

    def __init__(self, cache: PermissionCache | None = None) -> None:
        self.cache = cache or PermissionCache(
            maxsize=settings.permission_cache_maxsize,
            ttl_seconds=settings.permission_cache_ttl_seconds,
        )

    @classmethod
    def get_instance(cls) -> "PermissionResolver":
        """Get the process-wide resolver."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the process-wide resolver (for testing)."""
        cls._instance = None

    def has_permission(
        self, db: Session, role_id: uuid.UUID, module: str, action: str | Action
    ) -> bool:
        """Check whether a role may perform action on module.

        Raises:
            InvalidPermissionError: If module or action is malformed.
            StorageUnavailable: If the permission store cannot be queried.
        """
        key = make_key(module, action)
        snapshot = self.get_snapshot(db, role_id)
        if snapshot is None or not snapshot.is_active:
            return False
        if is_superadmin_level(snapshot.level, snapshot.name):
            return True
        if snapshot.grants(key):
            return True
        if key.module in settings.default_allow_modules:
            return not self.module_has_permissions(db, key.module)
        return False

    def effective_permissions(
        self, db: Session, role_id: uuid.UUID
    ) -> set[PermissionKey]:
        """Compute every (module, action) a role may perform.

        Returns an empty set for roles without grants, unknown roles and
        inactive roles.
        """
        snapshot = self.get_snapshot(db, role_id)
        if snapshot is None or not snapshot.is_active:
            return set()
        if is_superadmin_level(snapshot.level, snapshot.name):
            return registry.all_keys()

        effective = set(snapshot.keys)
        for spec in registry.all():
            if spec.name in snapshot.wildcard_modules:
                effective.update(spec.keys())
                continue
            for key in spec.keys():
                if (key.module, key.name) in snapshot.names:
                    effective.add(key)
        return effective

    def allowed_modules(self, db: Session, role_id: uuid.UUID) -> list[ModuleSpec]:
        """Registered modules in which the role holds at least one action."""
        snapshot = self.get_snapshot(db, role_id)
        if snapshot is None or not snapshot.is_active:
            return []
        if is_superadmin_level(snapshot.level, snapshot.name):
            surfaced = self._active_modules(db)
            return [spec for spec in registry.all() if spec.name in surfaced]

        granted_modules = {key.module for key in self.effective_permissions(db, role_id)}
        return [spec for spec in registry.all() if spec.name in granted_modules]

    def available_actions(
        self, db: Session, role_id: uuid.UUID, module: str
    ) -> list[str]:
        """Actions the role holds on one module, for denial messages."""
        return sorted(
            key.action
            for key in self.effective_permissions(db, role_id)
            if key.module == module
        )

    def get_snapshot(self, db: Session, role_id: uuid.UUID) -> RoleSnapshot | None:
        """Get the cached snapshot of a role, loading it on a miss."""
        if role_id is None:
            raise InvalidPermissionError("role_id is required")
        cached = self.cache.get(role_id)
        if cached is not None:
            return cached

        version = self.cache.version(role_id)
        snapshot = self._load_snapshot(db, role_id)
        if snapshot is not None:
            self.cache.set(role_id, snapshot, version)
        return snapshot

    def invalidate_role(self, role_id: uuid.UUID) -> None:
        self.cache.invalidate(role_id)
        logger.debug("Invalidated cached permissions for role %s", role_id)

    def invalidate_all(self) -> None:
        self.cache.clear()
        logger.debug("Invalidated all cached permissions")

    def _load_snapshot(self, db: Session, role_id: uuid.UUID) -> RoleSnapshot | None:
        try:
            role = db.execute(
                select(Role.name, Role.level, Role.is_active).where(Role.id == role_id)
            ).first()
            if role is None:
                return None
            rows = db.execute(
                select(Permission.name, Permission.module, Permission.action)
                .join(RolePermission, RolePermission.permission_id == Permission.id)
                .where(
                    RolePermission.role_id == role_id,
                    Permission.is_active.is_(True),
                )
            ).all()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Permission lookup for role %s failed: %s", role_id, e)
            raise StorageUnavailable() from e

        keys: set[PermissionKey] = set()
        names: set[tuple[str, str]] = set()
        wildcard_modules: set[str] = set()
        for name, module, action in rows:
            if action == WILDCARD_ACTION or name == f"{module}_{WILDCARD_ACTION}":
                wildcard_modules.add(module)
                continue
            names.add((module, name))
            try:
                keys.add(key_from_record(name, module, action))
            except InvalidPermissionError:
                logger.warning("Ignoring malformed permission %r on role %s", name, role_id)

        return RoleSnapshot(
            role_id=role_id,
            name=role.name,
            level=role.level,
            is_active=role.is_active,
            keys=frozenset(keys),
            names=frozenset(names),
            wildcard_modules=frozenset(wildcard_modules),
        )

    def _active_modules(self, db: Session) -> frozenset[str]:
        """Modules with at least one active permission."""
        cached = self.cache.get(_ACTIVE_MODULES_KEY)
        if cached is not None:
            return cached
        version = self.cache.version(_ACTIVE_MODULES_KEY)
        try:
            modules = frozenset(
                db.execute(
                    select(Permission.module)
                    .where(Permission.is_active.is_(True))
                    .distinct()
                ).scalars()
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Module lookup failed: %s", e)
            raise StorageUnavailable() from e
        self.cache.set(_ACTIVE_MODULES_KEY, modules, version)
        return modules

    def module_has_permissions(self, db: Session, module: str) -> bool:
        """Check whether module has at least one active permission."""
        return module in self._active_modules(db)


def get_resolver() -> PermissionResolver:
    return PermissionResolver.get_instance()


def has_permission(
    db: Session, role_id: uuid.UUID, module: str, action: str | Action
) -> bool:
    """Check whether a role may perform action on module."""
    return get_resolver().has_permission(db, role_id, module, action)


def effective_permissions(db: Session, role_id: uuid.UUID) -> set[PermissionKey]:
    """Compute the effective (module, action) set of a role."""
    return get_resolver().effective_permissions(db, role_id)


def allowed_modules(db: Session, role_id: uuid.UUID) -> list[ModuleSpec]:
    """Registered modules the role may open, for navigation."""
    return get_resolver().allowed_modules(db, role_id)
