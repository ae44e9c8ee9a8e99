# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for authorization_service."""

import logging
import uuid

import pytest

from adsguard.config import settings
from adsguard.exceptions import ConfigurationError, PermissionDenied, Unauthenticated
from adsguard.rbac.permissions import Action
from adsguard.rbac.principal import Principal
from adsguard.services import rbac_service
from adsguard.services.authorization_service import (
    AuthorizationState,
    assert_can_manage_role,
    authorize,
)
from conftest import principal_for


def test_missing_principal_is_unauthenticated(seeded):
    with pytest.raises(Unauthenticated) as exc_info:
        authorize(seeded, None, "reports", "read")
    assert exc_info.value.status_code == 401
    assert exc_info.value.code == "AUTH_REQUIRED"


def test_allowed_returns_context(seeded, editor):
    context = authorize(seeded, principal_for(editor), "reports", Action.READ)
    assert context.state == AuthorizationState.ALLOWED
    assert context.module == "reports"
    assert context.action == "read"
    assert context.permission_name == "reports_read"
    assert context.is_superadmin is False
    assert context.is_privileged is False
    assert context.principal.user_id == editor.id


def test_admin_context_is_privileged(seeded, admin):
    context = authorize(seeded, principal_for(admin), "cards", "delete")
    assert context.is_privileged is True
    assert context.is_superadmin is False
    assert context.bypass_reason is None


def test_denial_lists_available_actions(seeded, editor):
    with pytest.raises(PermissionDenied) as exc_info:
        authorize(seeded, principal_for(editor), "reports", "delete")
    denied = exc_info.value
    assert denied.status_code == 403
    assert denied.code == "INSUFFICIENT_PERMISSIONS"
    assert denied.available_actions == ["create", "read", "update"]
    assert "You can only: create, read, update" in denied.message
    assert denied.details()["required_permission"] == "reports_delete"
    assert denied.details()["role"] == "Editor"


def test_denial_without_any_action_in_module(seeded, editor):
    with pytest.raises(PermissionDenied) as exc_info:
        authorize(seeded, principal_for(editor), "cards", "read")
    assert exc_info.value.available_actions == []
    assert "any permissions for the cards module" in exc_info.value.message


def test_superadmin_bypass_is_logged(seeded, superadmin, caplog):
    with caplog.at_level(logging.INFO, logger="adsguard.services.authorization_service"):
        context = authorize(seeded, principal_for(superadmin), "cards", "delete")
    assert context.is_superadmin is True
    assert context.bypass_reason
    assert "SuperAdmin bypass" in caplog.text


def test_inactive_role_is_denied(seeded, editor):
    rbac_service.set_role_active(seeded, editor.role_id, False)
    seeded.refresh(editor)
    with pytest.raises(PermissionDenied) as exc_info:
        authorize(seeded, principal_for(editor), "reports", "read")
    assert exc_info.value.reason == "role_inactive"


def test_inactive_superadmin_role_is_denied(seeded, superadmin):
    rbac_service.set_role_active(seeded, superadmin.role_id, False)
    seeded.refresh(superadmin)
    with pytest.raises(PermissionDenied):
        authorize(seeded, principal_for(superadmin), "reports", "read")


def test_revoke_denies_next_check(seeded, editor):
    principal = principal_for(editor)
    authorize(seeded, principal, "reports", "update")
    rbac_service.revoke_by_key(seeded, editor.role_id, "reports", "update")
    with pytest.raises(PermissionDenied):
        authorize(seeded, principal, "reports", "update")


def test_guarded_module_without_active_permissions_is_a_configuration_error(
    seeded, editor, caplog
):
    for permission in rbac_service.list_permissions(seeded):
        if permission.module == "cards":
            rbac_service.set_permission_active(seeded, permission.id, False)

    with caplog.at_level(logging.ERROR, logger="adsguard.services.authorization_service"):
        with pytest.raises(ConfigurationError) as exc_info:
            authorize(seeded, principal_for(editor), "cards", "read")
    assert exc_info.value.status_code == 500
    assert "cards" in caplog.text


def test_unknown_module_is_a_configuration_error(seeded, editor):
    with pytest.raises(ConfigurationError):
        authorize(seeded, principal_for(editor), "billing", "read")


def test_default_allow_module_without_permissions_is_allowed(seeded, editor):
    context = authorize(seeded, principal_for(editor), "navigation", "read")
    assert context.state == AuthorizationState.ALLOWED


class TestAssertCanManageRole:
    def make(self, level: int) -> Principal:
        return Principal(uuid.uuid4(), uuid.uuid4(), level, f"Level{level}")

    def test_lower_target_allowed(self):
        assert_can_manage_role(self.make(8), 5)

    def test_same_level_blocked(self):
        with pytest.raises(PermissionDenied) as exc_info:
            assert_can_manage_role(self.make(8), 8)
        assert exc_info.value.reason == "privilege_escalation"

    def test_higher_level_blocked(self):
        with pytest.raises(PermissionDenied):
            assert_can_manage_role(self.make(5), 10, "create")

    def test_superadmin_may_manage_anything(self):
        assert_can_manage_role(self.make(10), 10)

    def test_configured_superadmin_name_is_above_every_level(self, monkeypatch):
        monkeypatch.setattr(settings, "superadmin_role_names", ["Root"])
        with pytest.raises(PermissionDenied) as exc_info:
            assert_can_manage_role(self.make(8), 3, "update", "Root")
        assert exc_info.value.reason == "privilege_escalation"

    def test_other_names_are_judged_by_level(self, monkeypatch):
        monkeypatch.setattr(settings, "superadmin_role_names", ["Root"])
        assert_can_manage_role(self.make(8), 3, "update", "Analyst")

    def test_superadmin_may_create_configured_superadmin_role(self, monkeypatch):
        monkeypatch.setattr(settings, "superadmin_role_names", ["Root"])
        assert_can_manage_role(self.make(10), 3, "create", "Root")
