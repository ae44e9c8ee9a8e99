# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Report schemas."""

import datetime
import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ReportBase(BaseModel):
    report_date: datetime.date
    campaign_id: uuid.UUID | None = None
    campaign_name: str = Field(min_length=1, max_length=200)
    brand: str | None = None
    leads: int = Field(default=0, ge=0)
    spent: Decimal = Field(default=Decimal("0"), ge=0)


class ReportCreate(ReportBase):
    """Schema for creating a report.

    owner_id is honoured for privileged callers only.
    """

    owner_id: uuid.UUID | None = None


class ReportUpdate(BaseModel):
    report_date: datetime.date | None = None
    campaign_name: str | None = Field(default=None, min_length=1, max_length=200)
    brand: str | None = None
    leads: int | None = Field(default=None, ge=0)
    spent: Decimal | None = Field(default=None, ge=0)


class ReportResponse(ReportBase):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID | None


class BrandSummary(BaseModel):
    brand: str | None
    reports: int
    leads: int
    spent: Decimal


class ReportSummary(BaseModel):
    """Aggregated report figures visible to the caller."""

    total_reports: int = 0
    total_leads: int = 0
    total_spent: Decimal = Decimal("0")
    by_brand: list[BrandSummary] = []
