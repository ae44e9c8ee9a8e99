# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Report service."""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from adsguard.models import Report
from adsguard.rbac.principal import Principal
from adsguard.schemas.report import ReportCreate, ReportUpdate
from adsguard.services.privacy_service import (
    assert_ownership,
    get_owned_or_404,
    scope_query,
    stamp_ownership,
)


def get_reports(
    db: Session,
    principal: Principal,
    brand: str | None = None,
) -> list[Report]:
    """Get the reports visible to principal."""
    stmt = select(Report)
    if brand:
        stmt = stmt.where(Report.brand == brand)
    stmt = scope_query(principal, stmt, Report)
    return list(db.execute(stmt.order_by(Report.report_date.desc())).scalars())


def get_report(db: Session, principal: Principal, report_id: uuid.UUID) -> Report:
    """Get a report by ID, hiding reports owned by other users."""
    return get_owned_or_404(db, principal, Report, report_id)


def create_report(db: Session, principal: Principal, data: ReportCreate) -> Report:
    """Create a new report owned by principal (or by the requested owner)."""
    report = Report(
        report_date=data.report_date,
        campaign_id=data.campaign_id,
        campaign_name=data.campaign_name,
        brand=data.brand,
        leads=data.leads,
        spent=data.spent,
    )
    stamp_ownership(principal, report, data.owner_id)
    db.add(report)
    db.commit()
    db.refresh(report)
    return report


def update_report(
    db: Session, principal: Principal, report: Report, data: ReportUpdate
) -> Report:
    """Update an existing report."""
    assert_ownership(principal, report)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(report, field, value)
    db.commit()
    db.refresh(report)
    return report


def delete_report(db: Session, principal: Principal, report: Report) -> None:
    """Delete a report."""
    assert_ownership(principal, report)
    db.delete(report)
    db.commit()
