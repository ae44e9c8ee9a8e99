# adsguard/schemas/rbac.py
import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field


class PermissionSchema(BaseModel):
    """Schema representing a permission."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    module: str
    action: str
    description: str | None
    is_active: bool


class PermissionUpdateSchema(BaseModel):
    """Schema for enabling or disabling a permission."""

    is_active: bool


class RoleSchema(BaseModel):
    """Schema representing a role."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    level: int
    is_active: bool
    is_system: bool
    description: str | None


class RoleWithPermissionsSchema(RoleSchema):
    """Schema representing a role along with its permissions."""

    permissions: list[PermissionSchema]


class RoleCreateSchema(BaseModel):
    """Schema for creating a new role."""

    name: str = Field(min_length=1, max_length=100)
    level: int = Field(default=1, ge=0)
    description: str | None = None


class RoleUpdateSchema(BaseModel):
    """Schema for updating a role."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    level: int | None = Field(default=None, ge=0)
    description: str | None = None
    is_active: bool | None = None


class RolePermissionsUpdateSchema(BaseModel):
    """Schema for replacing the permissions of a role."""

    permission_ids: list[uuid.UUID]


class GrantCreateSchema(BaseModel):
    """Grant one permission, by id or by (module, action)."""

    permission_id: uuid.UUID | None = None
    module: str | None = None
    action: str | None = None


class GrantSchema(BaseModel):
    """Schema representing a role grant."""

    model_config = ConfigDict(from_attributes=True)

    role_id: uuid.UUID
    permission_id: uuid.UUID
    granted_by_id: uuid.UUID | None
    granted_at: datetime.datetime
    created: bool = True


class ModuleSchema(BaseModel):
    """A module with an enforceable surface."""

    name: str
    display_name: str
    route: str
    actions: list[str]


class PermissionKeySchema(BaseModel):
    module: str
    action: str


class NavigationSchema(BaseModel):
    """Allow-list returned to the frontend after login."""

    role: RoleSchema
    permissions: list[PermissionKeySchema]
    modules: list[ModuleSchema]


class UserRoleUpdateSchema(BaseModel):
    """Schema for moving a user to another role."""

    role_id: uuid.UUID


class UserRoleSchema(BaseModel):
    user_id: uuid.UUID
    role_id: uuid.UUID
    role_name: str


class PermissionCheckSchema(BaseModel):
    """Ask whether a user may perform action on module."""

    user_id: uuid.UUID
    module: str
    action: str


class PermissionCheckResultSchema(PermissionCheckSchema):
    allowed: bool


class AuditLogEntrySchema(BaseModel):
    """Schema representing one audit log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    action: str
    role_id: uuid.UUID | None
    role_name: str | None
    permission_id: uuid.UUID | None
    permission_name: str | None
    user_id: uuid.UUID | None
    performed_by_id: uuid.UUID | None
    created_at: datetime.datetime


class AuditLogPageSchema(BaseModel):
    items: list[AuditLogEntrySchema]
    total: int
    page: int
    limit: int
