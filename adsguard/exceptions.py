# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exception hierarchy for authorization and data privacy failures."""

import uuid


class AdsGuardError(Exception):
    """Base exception for the access control layer."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class InvalidPermissionError(AdsGuardError, ValueError):
    """Raised when a module/action pair is missing or malformed."""

    status_code = 400
    code = "INVALID_PERMISSION"


class Unauthenticated(AdsGuardError):
    """Raised when no valid principal is attached to the request."""

    status_code = 401
    code = "AUTH_REQUIRED"

    def __init__(self, message: str = "Please log in"):
        super().__init__(message)


class PermissionDenied(AdsGuardError):
    """Raised when an authenticated principal lacks a module/action grant."""

    status_code = 403
    code = "INSUFFICIENT_PERMISSIONS"

    def __init__(
        self,
        module: str,
        action: str,
        role_name: str,
        reason: str = "missing_grant",
        available_actions: list[str] | None = None,
    ):
        self.module = module
        self.action = action
        self.role_name = role_name
        self.reason = reason
        self.available_actions = sorted(available_actions or [])
        if reason == "role_inactive":
            message = f"Your role '{role_name}' is disabled."
        elif reason == "system_role":
            message = "System roles cannot be modified."
        elif reason == "privilege_escalation":
            message = f"Your role '{role_name}' cannot {action} a role at or above its own level."
        elif self.available_actions:
            message = (
                f"You don't have permission to {action} {module}. "
                f"You can only: {', '.join(self.available_actions)}."
            )
        else:
            message = f"You don't have any permissions for the {module} module."
        super().__init__(f"Access denied. {message}")

    def details(self) -> dict:
        return {
            "role": self.role_name,
            "module": self.module,
            "action": self.action,
            "required_permission": f"{self.module}_{self.action}",
            "reason": self.reason,
            "available_actions": self.available_actions,
        }


class ResourceNotFound(AdsGuardError):
    """Raised when a requested resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: uuid.UUID | str | None = None):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__("Resource not found")


class OwnershipViolation(ResourceNotFound):
    """Raised when a non-privileged principal touches a row it does not own.

    Rendered exactly like ResourceNotFound so callers cannot discover rows
    owned by other users. Only the log line tells the two apart.
    """

    def __init__(
        self,
        resource: str,
        resource_id: uuid.UUID | str | None,
        user_id: uuid.UUID,
    ):
        self.user_id = user_id
        super().__init__(resource, resource_id)


class RoleNotFound(ResourceNotFound):
    def __init__(self, role_id: uuid.UUID | str):
        super().__init__("role", role_id)


class PermissionNotFound(ResourceNotFound):
    def __init__(self, permission_id: uuid.UUID | str):
        super().__init__("permission", permission_id)


class ConflictError(AdsGuardError):
    """Raised when a write would violate a uniqueness rule."""

    status_code = 409
    code = "CONFLICT"


class ConfigurationError(AdsGuardError):
    """Raised for defects in seed data or module configuration."""

    status_code = 500
    code = "CONFIGURATION_ERROR"


class StorageUnavailable(AdsGuardError):
    """Raised when the permission or resource store cannot be reached."""

    status_code = 503
    code = "STORAGE_UNAVAILABLE"

    def __init__(self, message: str = "Permission store unavailable"):
        super().__init__(message)
