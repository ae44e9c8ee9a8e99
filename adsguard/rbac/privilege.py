# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Single source of truth for privilege decisions over role level/name."""

from typing import Protocol

from adsguard.config import settings


class HasRoleRank(Protocol):
    role_level: int
    role_name: str


def is_superadmin_level(level: int, name: str | None = None) -> bool:
    """Check whether a role level (or configured role name) bypasses all checks."""
    if level >= settings.superadmin_level_threshold:
        return True
    return name is not None and name in settings.superadmin_role_names


def is_superadmin(principal: HasRoleRank) -> bool:
    return is_superadmin_level(principal.role_level, principal.role_name)


def is_privileged(principal: HasRoleRank) -> bool:
    """Check whether a principal may see and modify rows owned by anyone."""
    return is_superadmin(principal) or (
        principal.role_level >= settings.admin_level_threshold
    )
