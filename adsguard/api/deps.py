# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""API dependencies for dependency injection."""

import logging
from collections.abc import Callable

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adsguard.database import get_db
from adsguard.exceptions import (
    ConfigurationError,
    StorageUnavailable,
    Unauthenticated,
)
from adsguard.models import User
from adsguard.rbac.modules import registry
from adsguard.rbac.permissions import Action, make_key
from adsguard.rbac.principal import Identity, Principal
from adsguard.services.authorization_service import AuthorizationContext, authorize
from adsguard.services.permission_resolver import get_resolver

logger = logging.getLogger(__name__)


def get_identity(request: Request) -> Identity | None:
    """Get the verified identity placed on the request by authentication."""
    identity = getattr(request.state, "identity", None)
    if identity is None or isinstance(identity, Identity):
        return identity
    logger.warning("Ignoring unexpected identity object %r", type(identity))
    return None


def get_principal(
    identity: Identity | None = Depends(get_identity),
    db: Session = Depends(get_db),
) -> Principal:
    """Build the principal for the current request.

    The role is taken from the user record rather than the identity so role
    changes apply to active sessions on their next request.
    """
    if identity is None:
        raise Unauthenticated()

    try:
        user = db.get(User, identity.user_id)
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageUnavailable("User store unavailable") from e
    if not user or not user.is_active:
        raise Unauthenticated("User not found or inactive")

    snapshot = get_resolver().get_snapshot(db, user.role_id)
    if snapshot is None:
        logger.error("User %s references missing role %s", user.id, user.role_id)
        raise ConfigurationError(f"Role {user.role_id} no longer exists")

    return Principal(
        user_id=user.id,
        role_id=user.role_id,
        role_level=snapshot.level,
        role_name=snapshot.name,
        role_is_active=snapshot.is_active,
    )
    try:
        return get_principal(identity, db)
    except Unauthenticated:
        return None


def _check_declared(module: str, action: str) -> None:
    spec = registry.get(module)
    if spec is not None and not spec.supports(action):
        raise ConfigurationError(
            f"Module {module!r} does not expose action {action!r}"
        )


def require_permission(
    module: str, action: str | Action
) -> Callable[..., AuthorizationContext]:
    """Dependency guarding a route with a (module, action) requirement.

    The checked context is stored on ``request.state.authorization`` for the
    privacy filter and returned to the endpoint.
    """
    key = make_key(module, action)
    _check_declared(key.module, key.action)

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_principal),
    ) -> AuthorizationContext:
        context = authorize(db, principal, key.module, key.action)
        request.state.authorization = context
        return context

    return dependency


def require_route_permission(module: str) -> Callable[..., AuthorizationContext]:
    """Dependency deriving the required action from the HTTP method."""
    registry.require(module)

    def dependency(
        request: Request,
        db: Session = Depends(get_db),
        principal: Principal = Depends(get_principal),
    ) -> AuthorizationContext:
        action = registry.action_for_method(module, request.method)
        context = authorize(db, principal, module, action)
        request.state.authorization = context
        return context

    return dependency
