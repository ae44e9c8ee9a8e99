# adsguard/rbac/permissions.py
from enum import Enum
from typing import NamedTuple

from adsguard.exceptions import InvalidPermissionError


class Action(str, Enum):
    """Actions a permission can grant within a module."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    EXPORT = "export"


CRUD_ACTIONS = (Action.READ, Action.CREATE, Action.UPDATE, Action.DELETE)

# HTTP methods mapped onto the action they require
METHOD_ACTIONS = {
    "GET": Action.READ,
    "HEAD": Action.READ,
    "POST": Action.CREATE,
    "PUT": Action.UPDATE,
    "PATCH": Action.UPDATE,
    "DELETE": Action.DELETE,
}


class PermissionKey(NamedTuple):
    """A (module, action) pair, compared structurally."""

    module: str
    action: str

    @property
    def name(self) -> str:
        """Conventional permission name, e.g. ``cards_read``."""
        return f"{self.module}_{self.action}"

    def __str__(self) -> str:
        return f"{self.module}.{self.action}"


def make_key(module: str, action: str | Action) -> PermissionKey:
    """Build a validated PermissionKey.

    Raises:
        InvalidPermissionError: If module or action is empty or not a string.
    """
    if isinstance(action, Action):
        action = action.value
    if not isinstance(module, str) or not module.strip():
        raise InvalidPermissionError(f"Invalid module: {module!r}")
    if not isinstance(action, str) or not action.strip():
        raise InvalidPermissionError(f"Invalid action: {action!r}")
    return PermissionKey(module.strip(), action.strip())


def key_from_record(name: str, module: str, action: str | None) -> PermissionKey:
    """Derive the key of a stored permission.

    Older permission rows were seeded by name only (``campaign_data_read``),
    with the module recorded as category. When no action column is present
    the action is whatever follows the ``{module}_`` prefix of the name.
    """
    if action:
        return PermissionKey(module, action)
    prefix = f"{module}_"
    if name.startswith(prefix) and len(name) > len(prefix):
        return PermissionKey(module, name[len(prefix):])
    raise InvalidPermissionError(
        f"Permission {name!r} does not follow the {module}_<action> convention"
    )
