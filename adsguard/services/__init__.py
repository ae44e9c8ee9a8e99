"""Services package."""
from adsguard.services import (
    authorization_service,
    campaign_service,
    dashboard_service,
    permission_resolver,
    privacy_service,
    rbac_service,
    report_service,
)

__all__ = [
    "authorization_service",
    "campaign_service",
    "dashboard_service",
    "permission_resolver",
    "privacy_service",
    "rbac_service",
    "report_service",
]
