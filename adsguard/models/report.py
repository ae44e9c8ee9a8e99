# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Report model."""

import datetime
import uuid as uuid_lib
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from adsguard.models.base import Base, OwnedMixin, TimestampMixin


class Report(Base, TimestampMixin, OwnedMixin):
    """A per-campaign report row (leads and spend for one day)."""

    __tablename__ = "reports"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    report_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    campaign_id: Mapped[uuid_lib.UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("campaigns.id", ondelete="SET NULL"),
        nullable=True,
    )
    campaign_name: Mapped[str] = mapped_column(String(200), nullable=False)
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
