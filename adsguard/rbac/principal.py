# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Runtime identity types; never persisted."""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Verified identity handed over by the authentication layer."""

    user_id: uuid.UUID
    role_id: uuid.UUID


@dataclass(frozen=True)
class Principal:
    """The authenticated user and role a request acts as."""

    user_id: uuid.UUID
    role_id: uuid.UUID
    role_level: int
    role_name: str
    role_is_active: bool = True
