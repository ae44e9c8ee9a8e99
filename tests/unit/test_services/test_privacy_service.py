# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for privacy_service."""

import datetime
import logging
import uuid
from decimal import Decimal

import pytest
from sqlalchemy import select

from adsguard.config import settings
from adsguard.exceptions import OwnershipViolation, ResourceNotFound
from adsguard.models import Campaign, CampaignData, Card, Report
from adsguard.services import privacy_service
from conftest import principal_for


def add_report(db, owner, name="Spring Sale", brand="Acme", leads=10, spent=Decimal("12.50")):
    report = Report(
        report_date=datetime.date(2025, 3, 1),
        campaign_name=name,
        brand=brand,
        leads=leads,
        spent=spent,
        owner_id=owner.id if owner else None,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def visible(db, principal):
    stmt = privacy_service.scope_query(principal, select(Report), Report)
    return {r.id for r in db.execute(stmt).scalars()}


class TestScopeQuery:
    def test_owner_sees_only_own_rows(self, seeded, editor, other_editor):
        mine = add_report(seeded, editor)
        add_report(seeded, other_editor)
        assert visible(seeded, principal_for(editor)) == {mine.id}

    def test_other_user_does_not_see_row(self, seeded, editor, other_editor):
        add_report(seeded, editor)
        assert visible(seeded, principal_for(other_editor)) == set()

    def test_superadmin_sees_everything(self, seeded, superadmin, editor, other_editor):
        a = add_report(seeded, editor)
        b = add_report(seeded, other_editor)
        assert visible(seeded, principal_for(superadmin)) == {a.id, b.id}

    def test_admin_sees_everything(self, seeded, admin, editor):
        a = add_report(seeded, editor)
        unowned = add_report(seeded, None)
        assert visible(seeded, principal_for(admin)) == {a.id, unowned.id}

    def test_unassigned_rows_hidden_by_default(self, seeded, editor):
        add_report(seeded, None)
        assert visible(seeded, principal_for(editor)) == set()

    def test_unassigned_rows_shared_when_configured(self, seeded, editor, monkeypatch):
        monkeypatch.setattr(settings, "treat_unassigned_as_privileged_only", False)
        unowned = add_report(seeded, None)
        assert visible(seeded, principal_for(editor)) == {unowned.id}


class TestOwnership:
    def test_owner_may_touch(self, seeded, editor):
        report = add_report(seeded, editor)
        privacy_service.assert_ownership(principal_for(editor), report)

    def test_violation_is_logged(self, seeded, editor, other_editor, caplog):
        report = add_report(seeded, editor)
        with caplog.at_level(logging.WARNING, logger="adsguard.services.privacy_service"):
            with pytest.raises(OwnershipViolation) as exc_info:
                privacy_service.assert_ownership(principal_for(other_editor), report)
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Resource not found"
        assert "Ownership violation" in caplog.text

    def test_get_owned_or_404(self, seeded, editor, other_editor):
        report = add_report(seeded, editor)
        loaded = privacy_service.get_owned_or_404(seeded, principal_for(editor), Report, report.id)
        assert loaded.id == report.id
        with pytest.raises(OwnershipViolation):
            privacy_service.get_owned_or_404(seeded, principal_for(other_editor), Report, report.id)

    def test_missing_row_is_not_found(self, seeded, editor):
        with pytest.raises(ResourceNotFound) as exc_info:
            privacy_service.get_owned_or_404(seeded, principal_for(editor), Report, uuid.uuid4())
        assert not isinstance(exc_info.value, OwnershipViolation)

    def test_filter_rows(self, seeded, editor, other_editor, admin):
        mine = add_report(seeded, editor)
        theirs = add_report(seeded, other_editor)
        rows = [mine, theirs]
        assert privacy_service.filter_rows(principal_for(editor), rows) == [mine]
        assert privacy_service.filter_rows(principal_for(admin), rows) == rows


class TestStampOwnership:
    def new_report(self):
        return Report(report_date=datetime.date(2025, 3, 1), campaign_name="New")

    def test_creator_becomes_owner(self, seeded, editor):
        report = privacy_service.stamp_ownership(principal_for(editor), self.new_report())
        assert report.owner_id == editor.id

    def test_non_privileged_cannot_assign_other_owner(self, seeded, editor, other_editor):
        report = privacy_service.stamp_ownership(
            principal_for(editor), self.new_report(), other_editor.id
        )
        assert report.owner_id == editor.id

    def test_privileged_may_assign_owner(self, seeded, admin, editor):
        report = privacy_service.stamp_ownership(principal_for(admin), self.new_report(), editor.id)
        assert report.owner_id == editor.id


def test_every_owned_table_is_scoped(seeded, advertiser, editor):
    """Cards, campaigns and campaign data share the same ownership rule."""
    campaign = Campaign(name="Launch", owner_id=advertiser.id)
    seeded.add(campaign)
    seeded.flush()
    seeded.add_all(
        [
            Card(card_name="Visa", last_four="4242", owner_id=advertiser.id),
            CampaignData(
                campaign_id=campaign.id,
                data_date=datetime.date(2025, 3, 1),
                leads=4,
                spent=Decimal("8.00"),
                owner_id=advertiser.id,
            ),
        ]
    )
    seeded.commit()

    for model in (Campaign, Card, CampaignData):
        stmt = select(model)
        owner_rows = seeded.execute(
            privacy_service.scope_query(principal_for(advertiser), stmt, model)
        ).scalars().all()
        other_rows = seeded.execute(
            privacy_service.scope_query(principal_for(editor), stmt, model)
        ).scalars().all()
        assert len(owner_rows) == 1
        assert other_rows == []
