# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Common response schemas."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every error raised by the access control layer."""

    success: bool = False
    code: str
    message: str
    details: dict[str, Any] | None = None
