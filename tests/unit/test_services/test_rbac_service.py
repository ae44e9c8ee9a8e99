# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for rbac_service."""

import uuid

import pytest

from adsguard.exceptions import (
    ConflictError,
    PermissionNotFound,
    ResourceNotFound,
    RoleNotFound,
)
from adsguard.models import AuditAction, RolePermission
from adsguard.services import rbac_service
from conftest import create_role, create_user


class TestRoles:
    def test_create_and_list(self, db_session):
        rbac_service.create_role(db_session, "Analyst", 2, "Reads things")
        rbac_service.create_role(db_session, "Lead", 6)
        names = [r.name for r in rbac_service.list_roles(db_session)]
        assert names == ["Lead", "Analyst"]

    def test_duplicate_name_conflicts(self, db_session):
        rbac_service.create_role(db_session, "Analyst", 2)
        with pytest.raises(ConflictError):
            rbac_service.create_role(db_session, "Analyst", 3)

    def test_update_role(self, db_session):
        analyst = rbac_service.create_role(db_session, "Analyst", 2)
        updated = rbac_service.update_role(db_session, analyst.id, name="Senior Analyst", level=4)
        assert updated.name == "Senior Analyst"
        assert updated.level == 4

    def test_update_role_name_conflict(self, db_session):
        rbac_service.create_role(db_session, "Analyst", 2)
        lead = rbac_service.create_role(db_session, "Lead", 6)
        with pytest.raises(ConflictError):
            rbac_service.update_role(db_session, lead.id, name="Analyst")

    def test_session_usable_after_rename_conflict(self, db_session):
        rbac_service.create_role(db_session, "Analyst", 2)
        lead = rbac_service.create_role(db_session, "Lead", 6)
        with pytest.raises(ConflictError):
            rbac_service.update_role(db_session, lead.id, name="Analyst")

        updated = rbac_service.update_role(db_session, lead.id, level=5)
        assert updated.name == "Lead"
        assert updated.level == 5

    def test_update_missing_role(self, db_session):
        with pytest.raises(RoleNotFound):
            rbac_service.update_role(db_session, uuid.uuid4(), level=3)

    def test_set_role_active_keeps_grants(self, seeded):
        editor = rbac_service.get_role_by_name(seeded, "Editor")
        before = len(rbac_service.get_role_permissions(seeded, editor.id))
        rbac_service.set_role_active(seeded, editor.id, False)
        assert editor.is_active is False
        assert len(rbac_service.get_role_permissions(seeded, editor.id)) == before


class TestPermissions:
    def test_register_is_idempotent(self, db_session):
        first = rbac_service.register_permission(db_session, "cards", "read")
        second = rbac_service.register_permission(db_session, "cards", "read")
        assert first.id == second.id
        assert first.name == "cards_read"

    def test_find_permission_ignores_inactive(self, db_session):
        permission = rbac_service.register_permission(db_session, "cards", "read")
        assert rbac_service.find_permission(db_session, "cards", "read").id == permission.id
        rbac_service.set_permission_active(db_session, permission.id, False)
        assert rbac_service.find_permission(db_session, "cards", "read") is None

    def test_list_permissions_active_only(self, db_session):
        rbac_service.register_permission(db_session, "cards", "read")
        disabled = rbac_service.register_permission(db_session, "cards", "delete")
        rbac_service.set_permission_active(db_session, disabled.id, False)
        assert len(rbac_service.list_permissions(db_session)) == 2
        names = [p.name for p in rbac_service.list_permissions(db_session, include_inactive=False)]
        assert names == ["cards_read"]

    def test_set_missing_permission_active(self, db_session):
        with pytest.raises(PermissionNotFound):
            rbac_service.set_permission_active(db_session, uuid.uuid4(), False)

    def test_wildcard_permission(self, db_session):
        wildcard = rbac_service.register_wildcard_permission(db_session, "cards")
        assert wildcard.name == "cards_*"
        assert wildcard.is_wildcard is True


class TestGrants:
    def test_grant_is_idempotent(self, db_session):
        analyst = create_role(db_session, "Analyst", 2)
        permission = rbac_service.register_permission(db_session, "cards", "read")

        grant, created = rbac_service.grant_permission(db_session, analyst.id, permission.id)
        assert created is True
        again, created = rbac_service.grant_permission(db_session, analyst.id, permission.id)
        assert created is False
        assert again.granted_at == grant.granted_at
        assert db_session.query(RolePermission).filter_by(role_id=analyst.id).count() == 1

    def test_grant_records_grantor(self, seeded, superadmin):
        analyst = create_role(seeded, "Analyst", 2)
        grant, _ = rbac_service.grant_by_key(seeded, analyst.id, "cards", "read", granted_by=superadmin)
        assert grant.granted_by_id == superadmin.id

    def test_grant_unknown_permission(self, db_session):
        analyst = create_role(db_session, "Analyst", 2)
        with pytest.raises(PermissionNotFound):
            rbac_service.grant_permission(db_session, analyst.id, uuid.uuid4())
        with pytest.raises(PermissionNotFound):
            rbac_service.grant_by_key(db_session, analyst.id, "cards", "read")

    def test_grant_to_unknown_role(self, db_session):
        permission = rbac_service.register_permission(db_session, "cards", "read")
        with pytest.raises(RoleNotFound):
            rbac_service.grant_permission(db_session, uuid.uuid4(), permission.id)

    def test_revoke(self, db_session):
        analyst = create_role(db_session, "Analyst", 2)
        permission = rbac_service.register_permission(db_session, "cards", "read")
        rbac_service.grant_permission(db_session, analyst.id, permission.id)

        assert rbac_service.revoke_permission(db_session, analyst.id, permission.id) is True
        assert rbac_service.revoke_permission(db_session, analyst.id, permission.id) is False
        assert rbac_service.get_role_permissions(db_session, analyst.id) == []

    def test_revoke_by_unknown_key(self, db_session):
        analyst = create_role(db_session, "Analyst", 2)
        assert rbac_service.revoke_by_key(db_session, analyst.id, "cards", "read") is False

    def test_set_role_permissions_replaces_grants(self, seeded):
        editor = rbac_service.get_role_by_name(seeded, "Editor")
        cards_read = rbac_service.get_permission_by_name(seeded, "cards_read")
        reports_read = rbac_service.get_permission_by_name(seeded, "reports_read")

        result = rbac_service.set_role_permissions(
            seeded, editor.id, [cards_read.id, reports_read.id]
        )
        assert sorted(p.name for p in result) == ["cards_read", "reports_read"]

    def test_set_role_permissions_unknown_id_changes_nothing(self, seeded):
        editor = rbac_service.get_role_by_name(seeded, "Editor")
        before = {p.name for p in rbac_service.get_role_permissions(seeded, editor.id)}
        with pytest.raises(PermissionNotFound):
            rbac_service.set_role_permissions(seeded, editor.id, [uuid.uuid4()])
        after = {p.name for p in rbac_service.get_role_permissions(seeded, editor.id)}
        assert after == before


class TestModules:
    def test_modules_without_permissions_are_hidden(self, db_session):
        rbac_service.register_permission(db_session, "cards", "read")
        rbac_service.register_permission(db_session, "cards", "update")
        modules = rbac_service.list_modules_with_permissions(db_session)
        assert modules == [
            {
                "name": "cards",
                "display_name": "Cards",
                "route": "/cards",
                "actions": ["read", "update"],
            }
        ]

    def test_modules_with_only_inactive_permissions_are_hidden(self, db_session):
        permission = rbac_service.register_permission(db_session, "cards", "read")
        rbac_service.set_permission_active(db_session, permission.id, False)
        assert rbac_service.list_modules_with_permissions(db_session) == []

    def test_seeded_modules(self, seeded):
        names = {m["name"] for m in rbac_service.list_modules_with_permissions(seeded)}
        assert "reports" in names
        assert "modules" in names


class TestUsers:
    def test_assign_role(self, seeded):
        user = create_user(seeded, "mover", "Viewer")
        editor = rbac_service.get_role_by_name(seeded, "Editor")
        assert rbac_service.assign_role_to_user(seeded, user.id, editor.id).role_id == editor.id

    def test_assign_role_to_unknown_user(self, seeded):
        editor = rbac_service.get_role_by_name(seeded, "Editor")
        with pytest.raises(ResourceNotFound):
            rbac_service.assign_role_to_user(seeded, uuid.uuid4(), editor.id)

    def test_assign_unknown_role(self, seeded):
        user = create_user(seeded, "mover", "Viewer")
        with pytest.raises(RoleNotFound):
            rbac_service.assign_role_to_user(seeded, user.id, uuid.uuid4())

    def test_assign_role_is_audited(self, seeded, superadmin):
        user = create_user(seeded, "mover", "Viewer")
        editor = rbac_service.get_role_by_name(seeded, "Editor")
        rbac_service.assign_role_to_user(seeded, user.id, editor.id, assigned_by=superadmin)

        entries, total = rbac_service.list_audit_log(seeded)
        assert total == 1
        assert entries[0].action == AuditAction.ROLE_ASSIGNED.value
        assert entries[0].user_id == user.id
        assert entries[0].role_name == "Editor"
        assert entries[0].performed_by_id == superadmin.id

    def test_check_user_permission(self, seeded, editor):
        assert rbac_service.check_user_permission(seeded, editor.id, "reports", "read") is True
        assert rbac_service.check_user_permission(seeded, editor.id, "cards", "read") is False

    def test_check_inactive_user(self, seeded, editor):
        editor.is_active = False
        seeded.commit()
        assert rbac_service.check_user_permission(seeded, editor.id, "reports", "read") is False

    def test_check_unknown_user(self, seeded):
        with pytest.raises(ResourceNotFound):
            rbac_service.check_user_permission(seeded, uuid.uuid4(), "reports", "read")


class TestDeleteRole:
    def test_delete_unused_role_removes_grants(self, seeded):
        analyst = rbac_service.create_role(seeded, "Analyst", 2)
        rbac_service.grant_by_key(seeded, analyst.id, "reports", "read")
        analyst_id = analyst.id

        rbac_service.delete_role(seeded, analyst_id)

        assert rbac_service.get_role(seeded, analyst_id) is None
        remaining = seeded.query(RolePermission).filter(RolePermission.role_id == analyst_id)
        assert remaining.count() == 0

    def test_delete_role_in_use_conflicts(self, seeded, editor):
        with pytest.raises(ConflictError) as exc_info:
            rbac_service.delete_role(seeded, editor.role_id)
        assert "1 user(s)" in exc_info.value.message
        assert rbac_service.get_role(seeded, editor.role_id) is not None

    def test_delete_missing_role(self, db_session):
        with pytest.raises(RoleNotFound):
            rbac_service.delete_role(db_session, uuid.uuid4())

    def test_delete_is_audited(self, seeded, superadmin):
        analyst = rbac_service.create_role(seeded, "Analyst", 2)
        rbac_service.delete_role(seeded, analyst.id, deleted_by=superadmin)

        entries, _ = rbac_service.list_audit_log(seeded)
        assert [(e.action, e.role_name) for e in entries] == [
            (AuditAction.ROLE_DELETED.value, "Analyst")
        ]
        assert entries[0].performed_by_id == superadmin.id


class TestAuditLog:
    def test_grant_and_revoke_are_recorded(self, seeded, superadmin):
        viewer = rbac_service.get_role_by_name(seeded, "Viewer")
        rbac_service.grant_by_key(seeded, viewer.id, "brands", "read", superadmin)
        rbac_service.revoke_by_key(seeded, viewer.id, "brands", "read", superadmin)

        entries, total = rbac_service.list_audit_log(seeded)
        assert total == 2
        assert sorted(e.action for e in entries) == ["granted", "revoked"]
        for entry in entries:
            assert entry.role_id == viewer.id
            assert entry.role_name == "Viewer"
            assert entry.permission_name == "brands_read"
            assert entry.performed_by_id == superadmin.id

    def test_repeated_grant_is_not_recorded_twice(self, seeded):
        viewer = rbac_service.get_role_by_name(seeded, "Viewer")
        rbac_service.grant_by_key(seeded, viewer.id, "brands", "read")
        rbac_service.grant_by_key(seeded, viewer.id, "brands", "read")
        assert rbac_service.list_audit_log(seeded)[1] == 1

    def test_missing_revoke_is_not_recorded(self, seeded):
        viewer = rbac_service.get_role_by_name(seeded, "Viewer")
        assert rbac_service.revoke_by_key(seeded, viewer.id, "cards", "delete") is False
        assert rbac_service.list_audit_log(seeded)[1] == 0

    def test_replace_all_records_each_change(self, seeded):
        viewer = rbac_service.get_role_by_name(seeded, "Viewer")
        brands_read = rbac_service.get_permission_by_name(seeded, "brands_read")
        reports_read = rbac_service.get_permission_by_name(seeded, "reports_read")
        rbac_service.set_role_permissions(seeded, viewer.id, [reports_read.id, brands_read.id])

        entries, _ = rbac_service.list_audit_log(seeded)
        assert sorted((e.action, e.permission_name) for e in entries) == [
            ("granted", "brands_read"),
            ("revoked", "dashboard_read"),
        ]

    def test_page_size_is_capped(self, seeded):
        viewer = rbac_service.get_role_by_name(seeded, "Viewer")
        rbac_service.grant_by_key(seeded, viewer.id, "brands", "read")
        rbac_service.grant_by_key(seeded, viewer.id, "cards", "read")

        entries, total = rbac_service.list_audit_log(seeded, page=1, limit=1)
        assert total == 2
        assert len(entries) == 1
        assert len(rbac_service.list_audit_log(seeded, page=2, limit=1)[0]) == 1
        assert rbac_service.list_audit_log(seeded, page=0, limit=1000)[0] != []
