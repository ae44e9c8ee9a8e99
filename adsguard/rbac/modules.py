# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Declarative registry of protected modules.

One registry maps each module to its actions and route prefix. It is used by
the authorization dependencies (HTTP method to action), the seed service
(which permissions exist) and navigation building (what a role may open).
"""

from dataclasses import dataclass, field

from adsguard.exceptions import ConfigurationError
from adsguard.rbac.permissions import (
    CRUD_ACTIONS,
    METHOD_ACTIONS,
    Action,
    PermissionKey,
)


@dataclass(frozen=True)
class ModuleSpec:
    """A functional area of the application and the actions it exposes."""

    name: str
    display_name: str
    route: str
    actions: tuple[Action, ...] = CRUD_ACTIONS
    description: str = ""

    def keys(self) -> list[PermissionKey]:
        """All permission keys this module can grant."""
        return [PermissionKey(self.name, action.value) for action in self.actions]

    def supports(self, action: str) -> bool:
        return any(a.value == action for a in self.actions)


@dataclass
class ModuleRegistry:
    """Lookup table over the registered modules."""

    modules: dict[str, ModuleSpec] = field(default_factory=dict)

    def register(self, spec: ModuleSpec) -> ModuleSpec:
        """Add a module; registering the same name twice is a seed defect."""
        if spec.name in self.modules:
            raise ConfigurationError(f"Module {spec.name!r} registered twice")
        self.modules[spec.name] = spec
        return spec

    def get(self, name: str) -> ModuleSpec | None:
        return self.modules.get(name)

    def require(self, name: str) -> ModuleSpec:
        """Get a module or raise ConfigurationError if it is unknown."""
        spec = self.modules.get(name)
        if spec is None:
            raise ConfigurationError(f"No module registered as {name!r}")
        return spec

    def all(self) -> list[ModuleSpec]:
        return list(self.modules.values())

    def all_keys(self) -> set[PermissionKey]:
        """Every (module, action) pair known to the registry."""
        return {key for spec in self.modules.values() for key in spec.keys()}

    def action_for_method(self, name: str, method: str) -> str:
        """Resolve the action an HTTP method requires on a module.

        Raises:
            ConfigurationError: If the module is unknown or does not expose
                the action the method maps to.
        """
        spec = self.require(name)
        action = METHOD_ACTIONS.get(method.upper())
        if action is None or action not in spec.actions:
            raise ConfigurationError(
                f"No permission mapping for {method.upper()} on module {name!r}"
            )
        return action.value

    def route_for(self, name: str) -> str:
        return self.require(name).route


registry = ModuleRegistry()

for _spec in (
    ModuleSpec("dashboard", "Dashboard", "/dashboard", (Action.READ,)),
    ModuleSpec("campaigns", "Campaigns", "/campaigns"),
    ModuleSpec("campaign_data", "Campaign Data", "/campaign-data"),
    ModuleSpec("campaign_types", "Campaign Types", "/campaign-types"),
    ModuleSpec("cards", "Cards", "/cards"),
    ModuleSpec("card_users", "Card Users", "/card-users"),
    ModuleSpec("accounts", "Accounts", "/accounts"),
    ModuleSpec("brands", "Brands", "/brands"),
    ModuleSpec(
        "reports",
        "Reports",
        "/reports",
        (*CRUD_ACTIONS, Action.EXPORT),
    ),
    ModuleSpec("users", "User Management", "/users"),
    ModuleSpec("roles", "Roles", "/rbac/roles"),
    ModuleSpec("permissions", "Permissions", "/rbac/permissions"),
    ModuleSpec("modules", "Modules", "/rbac/modules", (Action.READ,)),
):
    registry.register(_spec)
