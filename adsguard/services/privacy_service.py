# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Row-level data privacy for owned resources.

Runs after authorization has allowed an operation. Privileged principals see
and modify every row; everybody else is limited to rows they own.
"""

import logging
import uuid
from collections.abc import Iterable
from typing import TypeVar

from sqlalchemy import Select, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from adsguard.config import settings
from adsguard.exceptions import OwnershipViolation, ResourceNotFound, StorageUnavailable
from adsguard.models import OwnedMixin
from adsguard.rbac.principal import Principal
from adsguard.rbac.privilege import is_privileged

logger = logging.getLogger(__name__)

OwnedT = TypeVar("OwnedT", bound=OwnedMixin)


def _resource_name(resource_or_model) -> str:
    return getattr(resource_or_model, "__tablename__", type(resource_or_model).__name__)


def _can_touch(principal: Principal, owner_id: uuid.UUID | None) -> bool:
    if is_privileged(principal):
        return True
    if owner_id is None:
        return not settings.treat_unassigned_as_privileged_only
    return owner_id == principal.user_id


def scope_query(
    principal: Principal, stmt: Select, model: type[OwnedMixin]
) -> Select:
    """Restrict a select over an owned model to what principal may see.

    Aggregates must be built on top of the scoped statement so counts and
    sums never include rows the principal cannot read.
    """
    if is_privileged(principal):
        return stmt
    owner_column = model.owner_id
    if settings.treat_unassigned_as_privileged_only:
        return stmt.where(owner_column == principal.user_id)
    return stmt.where(or_(owner_column == principal.user_id, owner_column.is_(None)))


def assert_ownership(principal: Principal, resource: OwnedMixin) -> None:
    """Verify principal may modify resource.

    Raises:
        OwnershipViolation: Rendered to the caller as "not found".
    """
    if _can_touch(principal, resource.owner_id):
        return
    resource_id = getattr(resource, "id", None)
    logger.warning(
        "Ownership violation: user %s touched %s %s owned by %s",
        principal.user_id,
        _resource_name(resource),
        resource_id,
        resource.owner_id,
    )
    raise OwnershipViolation(_resource_name(resource), resource_id, principal.user_id)


def stamp_ownership(
    principal: Principal,
    resource: OwnedT,
    requested_owner_id: uuid.UUID | None = None,
) -> OwnedT:
    """Set the owner of a resource about to be created.

    Only privileged principals may assign another owner; for everyone else
    the requested owner is ignored and the principal becomes the owner.
    """
    if requested_owner_id is not None and requested_owner_id != principal.user_id:
        if is_privileged(principal):
            resource.owner_id = requested_owner_id
            return resource
        logger.warning(
            "User %s (role %s) tried to create %s owned by %s; owner reset",
            principal.user_id,
            principal.role_name,
            _resource_name(resource),
            requested_owner_id,
        )
    resource.owner_id = principal.user_id
    return resource


def filter_rows(principal: Principal, rows: Iterable[OwnedT]) -> list[OwnedT]:
    """In-memory counterpart of scope_query for rows already loaded."""
    rows = list(rows)
    visible = [row for row in rows if _can_touch(principal, row.owner_id)]
    logger.debug(
        "Privacy filtering: %s rows -> %s visible to user %s",
        len(rows),
        len(visible),
        principal.user_id,
    )
    return visible


def get_owned_or_404(
    db: Session,
    principal: Principal,
    model: type[OwnedT],
    resource_id: uuid.UUID,
) -> OwnedT:
    """Load a row by id and check principal may touch it.

    Raises:
        ResourceNotFound: If the row does not exist.
        OwnershipViolation: If it exists but belongs to someone else.
    """
    try:
        resource = db.execute(
            select(model).where(model.id == resource_id)
        ).scalar_one_or_none()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("Loading %s %s failed: %s", _resource_name(model), resource_id, e)
        raise StorageUnavailable("Resource store unavailable") from e
    if resource is None:
        raise ResourceNotFound(_resource_name(model), resource_id)
    assert_ownership(principal, resource)
    return resource
