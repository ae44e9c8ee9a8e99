# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Campaign service."""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from adsguard.models import Campaign
from adsguard.rbac.principal import Principal
from adsguard.schemas.campaign import CampaignCreate, CampaignUpdate
from adsguard.services import privacy_service


def get_campaigns(db: Session, principal: Principal) -> list[Campaign]:
    stmt = privacy_service.scope_query(principal, select(Campaign), Campaign)
    return list(db.execute(stmt.order_by(Campaign.name)).scalars())


def get_campaign(db: Session, principal: Principal, campaign_id: uuid.UUID) -> Campaign:
    return privacy_service.get_owned_or_404(db, principal, Campaign, campaign_id)


def create_campaign(db: Session, principal: Principal, data: CampaignCreate) -> Campaign:
    campaign = Campaign(
        name=data.name,
        brand=data.brand,
        campaign_type=data.campaign_type,
        is_enabled=data.is_enabled,
    )
    privacy_service.stamp_ownership(principal, campaign, data.owner_id)
    db.add(campaign)
    db.commit()
    db.refresh(campaign)
    return campaign


def update_campaign(
    db: Session, principal: Principal, campaign: Campaign, data: CampaignUpdate
) -> Campaign:
    privacy_service.assert_ownership(principal, campaign)
    if data.name is not None:
        campaign.name = data.name
    if data.brand is not None:
        campaign.brand = data.brand
    if data.campaign_type is not None:
        campaign.campaign_type = data.campaign_type
    if data.is_enabled is not None:
        campaign.is_enabled = data.is_enabled
    db.commit()
    db.refresh(campaign)
    return campaign


def delete_campaign(db: Session, principal: Principal, campaign: Campaign) -> None:
    privacy_service.assert_ownership(principal, campaign)
    db.delete(campaign)
    db.commit()
