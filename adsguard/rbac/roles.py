# adsguard/rbac/roles.py
from adsguard.rbac.modules import registry
from adsguard.rbac.permissions import Action

SUPERADMIN_ROLE = "SuperAdmin"

_OWNED_MODULES = ("campaigns", "campaign_data", "cards", "card_users", "reports")


def _names(modules, actions) -> list[str]:
    return [f"{m}_{a.value}" for m in modules for a in actions]


# Admin gets every registered permission; its level also lifts ownership checks
ADMIN_PERMISSIONS = sorted(key.name for key in registry.all_keys())

# Default roles to seed on first run.
# SuperAdmin holds no grants: its level bypasses every check.
DEFAULT_ROLES = [
    {
        "name": SUPERADMIN_ROLE,
        "level": 10,
        "is_system": True,
        "description": "Unrestricted access to every module and every row.",
        "permissions": [],
    },
    {
        "name": "Admin",
        "level": 8,
        "is_system": False,
        "description": "Administers all modules and sees data of all users.",
        "permissions": ADMIN_PERMISSIONS,
    },
    {
        "name": "Manager",
        "level": 5,
        "is_system": False,
        "description": "Manages own campaigns, cards and reports.",
        "permissions": [
            *_names(_OWNED_MODULES, (Action.READ, Action.CREATE, Action.UPDATE)),
            "reports_export",
            "brands_read",
            "campaign_types_read",
            "dashboard_read",
        ],
    },
    {
        "name": "Editor",
        "level": 3,
        "is_system": False,
        "description": "Creates and edits own reports and campaign data.",
        "permissions": [
            *_names(("reports", "campaign_data"), (Action.READ, Action.CREATE, Action.UPDATE)),
            "campaigns_read",
            "dashboard_read",
        ],
    },
    {
        "name": "Advertiser",
        "level": 2,
        "is_system": False,
        "description": "Runs own campaigns.",
        "permissions": [
            *_names(("campaigns",), (Action.READ, Action.CREATE, Action.UPDATE)),
            "brands_read",
            "dashboard_read",
        ],
    },
    {
        "name": "Viewer",
        "level": 1,
        "is_system": False,
        "description": "Read-only access to own dashboard and reports.",
        "permissions": ["dashboard_read", "reports_read"],
    },
]
