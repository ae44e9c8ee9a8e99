# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Database models package."""

from adsguard.models.audit_log import AuditAction, PermissionAuditLog
from adsguard.models.base import Base, OwnedMixin, TimestampMixin
from adsguard.models.campaign import Campaign, CampaignData
from adsguard.models.card import Card
from adsguard.models.permission import WILDCARD_ACTION, Permission
from adsguard.models.report import Report
from adsguard.models.role import Role
from adsguard.models.role_permission import RolePermission
from adsguard.models.user import User

__all__ = [
    "WILDCARD_ACTION",
    "AuditAction",
    "Base",
    "Campaign",
    "CampaignData",
    "Card",
    "OwnedMixin",
    "Permission",
    "PermissionAuditLog",
    "Report",
    "Role",
    "RolePermission",
    "TimestampMixin",
    "User",
]
