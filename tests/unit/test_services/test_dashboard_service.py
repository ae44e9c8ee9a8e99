# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for dashboard_service."""

import datetime
from decimal import Decimal

from adsguard.models import Report
from adsguard.services import dashboard_service
from conftest import principal_for


def add_report(db, owner, brand, leads, spent, day=1):
    db.add(
        Report(
            report_date=datetime.date(2025, 3, day),
            campaign_name=f"{brand} campaign",
            brand=brand,
            leads=leads,
            spent=Decimal(spent),
            owner_id=owner.id,
        )
    )
    db.commit()


def test_summary_only_counts_own_reports(seeded, editor, other_editor):
    add_report(seeded, editor, "Acme", 10, "100.00")
    add_report(seeded, editor, "Globex", 5, "20.00")
    add_report(seeded, other_editor, "Acme", 1000, "9999.00")

    summary = dashboard_service.get_report_summary(seeded, principal_for(editor))

    assert summary.total_reports == 2
    assert summary.total_leads == 15
    assert summary.total_spent == Decimal("120")
    assert [(b.brand, b.reports, b.leads) for b in summary.by_brand] == [
        ("Acme", 1, 10),
        ("Globex", 1, 5),
    ]


def test_summary_for_admin_includes_everyone(seeded, admin, editor, other_editor):
    add_report(seeded, editor, "Acme", 10, "100.00")
    add_report(seeded, other_editor, "Acme", 3, "30.00")

    summary = dashboard_service.get_report_summary(seeded, principal_for(admin))

    assert summary.total_reports == 2
    assert summary.total_leads == 13
    assert summary.by_brand[0].reports == 2


def test_summary_date_range(seeded, editor):
    add_report(seeded, editor, "Acme", 10, "100.00", day=1)
    add_report(seeded, editor, "Acme", 7, "70.00", day=15)

    summary = dashboard_service.get_report_summary(
        seeded,
        principal_for(editor),
        start_date=datetime.date(2025, 3, 10),
        end_date=datetime.date(2025, 3, 31),
    )

    assert summary.total_reports == 1
    assert summary.total_leads == 7


def test_empty_summary(seeded, editor):
    summary = dashboard_service.get_report_summary(seeded, principal_for(editor))
    assert summary.total_reports == 0
    assert summary.total_leads == 0
    assert summary.total_spent == Decimal("0")
    assert summary.by_brand == []
