# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Campaign and campaign data models."""

import datetime
import uuid as uuid_lib
from decimal import Decimal

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from adsguard.models.base import Base, OwnedMixin, TimestampMixin


class Campaign(Base, TimestampMixin, OwnedMixin):
    """An advertising campaign."""

    __tablename__ = "campaigns"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    brand: Mapped[str | None] = mapped_column(String(200), nullable=True)
    campaign_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class CampaignData(Base, TimestampMixin, OwnedMixin):
    """Daily performance figures for a campaign."""

    __tablename__ = "campaign_data"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    campaign_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
    )
    data_date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    leads: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
