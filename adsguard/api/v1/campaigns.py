# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Campaign API endpoints.

The required action is derived from the HTTP method through the module
registry rather than declared per route.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from adsguard.api.deps import get_db, require_route_permission
from adsguard.schemas.campaign import CampaignCreate, CampaignResponse, CampaignUpdate
from adsguard.services import campaign_service
from adsguard.services.authorization_service import AuthorizationContext

router = APIRouter()

guard = require_route_permission("campaigns")


@router.get("", response_model=list[CampaignResponse])
def list_campaigns(
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(guard),
) -> list[CampaignResponse]:
    campaigns = campaign_service.get_campaigns(db, auth.principal)
    return [CampaignResponse.model_validate(c) for c in campaigns]


@router.get("/{campaign_id}", response_model=CampaignResponse)
def get_campaign(
    campaign_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(guard),
) -> CampaignResponse:
    campaign = campaign_service.get_campaign(db, auth.principal, campaign_id)
    return CampaignResponse.model_validate(campaign)


@router.post("", response_model=CampaignResponse, status_code=status.HTTP_201_CREATED)
def create_campaign(
    data: CampaignCreate,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(guard),
) -> CampaignResponse:
    campaign = campaign_service.create_campaign(db, auth.principal, data)
    return CampaignResponse.model_validate(campaign)


@router.patch("/{campaign_id}", response_model=CampaignResponse)
def update_campaign(
    campaign_id: uuid.UUID,
    data: CampaignUpdate,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(guard),
) -> CampaignResponse:
    campaign = campaign_service.get_campaign(db, auth.principal, campaign_id)
    campaign = campaign_service.update_campaign(db, auth.principal, campaign, data)
    return CampaignResponse.model_validate(campaign)


@router.delete("/{campaign_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_campaign(
    campaign_id: uuid.UUID,
    db: Session = Depends(get_db),
    auth: AuthorizationContext = Depends(guard),
) -> None:
    campaign = campaign_service.get_campaign(db, auth.principal, campaign_id)
    campaign_service.delete_campaign(db, auth.principal, campaign)
