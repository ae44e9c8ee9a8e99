# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Dashboard service for aggregated summary data.

Every aggregate is computed from an ownership-scoped statement, so totals
never include rows the principal cannot read.
"""

import datetime
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from adsguard.models import Report
from adsguard.rbac.principal import Principal
from adsguard.schemas.report import BrandSummary, ReportSummary
from adsguard.services.privacy_service import scope_query


def get_report_summary(
    db: Session,
    principal: Principal,
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
) -> ReportSummary:
    """Get report totals overall and per brand."""
    base = select(Report.id, Report.brand, Report.leads, Report.spent)
    if start_date:
        base = base.where(Report.report_date >= start_date)
    if end_date:
        base = base.where(Report.report_date <= end_date)
    scoped = scope_query(principal, base, Report).subquery()

    total_reports, total_leads, total_spent = db.execute(
        select(
            func.count(scoped.c.id),
            func.coalesce(func.sum(scoped.c.leads), 0),
            func.coalesce(func.sum(scoped.c.spent), 0),
        )
    ).one()

    by_brand = db.execute(
        select(
            scoped.c.brand,
            func.count(scoped.c.id),
            func.coalesce(func.sum(scoped.c.leads), 0),
            func.coalesce(func.sum(scoped.c.spent), 0),
        )
        .group_by(scoped.c.brand)
        .order_by(scoped.c.brand)
    ).all()

    return ReportSummary(
        total_reports=total_reports,
        total_leads=int(total_leads),
        total_spent=Decimal(str(total_spent)),
        by_brand=[
            BrandSummary(
                brand=brand,
                reports=count,
                leads=int(leads),
                spent=Decimal(str(spent)),
            )
            for brand, count, leads, spent in by_brand
        ],
    )
