# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Payment card model."""

import uuid as uuid_lib
from decimal import Decimal

from sqlalchemy import Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from adsguard.models.base import Base, OwnedMixin, TimestampMixin


class Card(Base, TimestampMixin, OwnedMixin):
    """A card used to fund ad accounts."""

    __tablename__ = "cards"

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    card_name: Mapped[str] = mapped_column(String(200), nullable=False)
    last_four: Mapped[str | None] = mapped_column(String(4), nullable=True)
    balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=0, nullable=False)
