# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Audit trail of role and grant changes."""

import datetime
import uuid as uuid_lib
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from adsguard.models.base import Base


class AuditAction(str, Enum):
    """Kinds of changes recorded in the permission audit log."""

    GRANTED = "granted"
    REVOKED = "revoked"
    ROLE_ASSIGNED = "role_assigned"
    ROLE_DELETED = "role_deleted"


class PermissionAuditLog(Base):
    """One change to a role's grants or to a user's role.

    Names are copied at write time so entries stay readable after the role
    or permission they refer to is deleted.
    """

    __tablename__ = "permission_audit_log"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    action: Mapped[str] = mapped_column(String(30), nullable=False, index=True)
    role_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("roles.id", ondelete="SET NULL"),
        nullable=True,
    )
    role_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    permission_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("permissions.id", ondelete="SET NULL"),
        nullable=True,
    )
    permission_name: Mapped[str | None] = mapped_column(String(150), nullable=True)
    user_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    performed_by_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime, server_default=func.now(), nullable=False, index=True
    )
