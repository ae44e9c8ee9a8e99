# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Report API endpoints."""

import datetime
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from adsguard.api.deps import get_db, require_permission
from adsguard.rbac.permissions import Action
from adsguard.schemas.report import (
    ReportCreate,
    ReportResponse,
    ReportSummary,
    ReportUpdate,
)
from adsguard.services import dashboard_service, report_service
from adsguard.services.authorization_service import AuthorizationContext

router = APIRouter()


@router.get("", response_model=list[ReportResponse])
def list_reports(
    brand: str | None = None,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("reports", Action.READ)),
) -> list[ReportResponse]:
    """List reports visible to the current user."""
    reports = report_service.get_reports(db, auth.principal, brand)
    return [ReportResponse.model_validate(r) for r in reports]


@router.get("/summary", response_model=ReportSummary)
def get_report_summary(
    start_date: datetime.date | None = None,
    end_date: datetime.date | None = None,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("reports", Action.READ)),
) -> ReportSummary:
    """Totals over the reports visible to the current user."""
    return dashboard_service.get_report_summary(db, auth.principal, start_date, end_date)


@router.get("/{report_id}", response_model=ReportResponse)
def get_report(
    report_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("reports", Action.READ)),
) -> ReportResponse:
    """Get a report by ID."""
    report = report_service.get_report(db, auth.principal, report_id)
    return ReportResponse.model_validate(report)


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
def create_report(
    data: ReportCreate,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("reports", Action.CREATE)),
) -> ReportResponse:
    """Create a report owned by the current user."""
    report = report_service.create_report(db, auth.principal, data)
    return ReportResponse.model_validate(report)


@router.put("/{report_id}", response_model=ReportResponse)
def update_report(
    report_id: uuid.UUID,
    data: ReportUpdate,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("reports", Action.UPDATE)),
) -> ReportResponse:
    """Update a report."""
    report = report_service.get_report(db, auth.principal, report_id)
    report = report_service.update_report(db, auth.principal, report, data)
    return ReportResponse.model_validate(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_report(
    report_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(require_permission("reports", Action.DELETE)),
) -> None:
    """Delete a report."""
    report = report_service.get_report(db, auth.principal, report_id)
    report_service.delete_report(db, auth.principal, report)
