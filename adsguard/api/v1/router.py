# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Main API router for v1 endpoints."""

from fastapi import APIRouter

from adsguard.api.v1 import campaigns, navigation, rbac, reports

api_router = APIRouter()

# Navigation / allow-list for the logged in user
api_router.include_router(navigation.router, prefix="/navigation", tags=["navigation"])

# Role and permission administration
api_router.include_router(rbac.router, prefix="/rbac", tags=["rbac"])

# Owned resources
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
