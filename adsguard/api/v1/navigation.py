# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Navigation endpoint: what the logged in user may open."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from adsguard.api.deps import get_db, get_principal
from adsguard.exceptions import PermissionDenied
from adsguard.rbac.principal import Principal
from adsguard.schemas.rbac import (
    ModuleSchema,
    NavigationSchema,
    PermissionKeySchema,
    RoleSchema,
)
from adsguard.services import permission_resolver, rbac_service

router = APIRouter()


@router.get("", response_model=NavigationSchema)
def get_navigation(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_principal),
) -> NavigationSchema:
    """Effective permissions and allowed modules of the current user."""
    if not principal.role_is_active:
        raise PermissionDenied("navigation", "read", principal.role_name, reason="role_inactive")

    role = rbac_service.require_role(db, principal.role_id)
    permissions = sorted(permission_resolver.effective_permissions(db, principal.role_id))
    modules = permission_resolver.allowed_modules(db, principal.role_id)

    actions_by_module: dict[str, list[str]] = {}
    for key in permissions:
        actions_by_module.setdefault(key.module, []).append(key.action)

    return NavigationSchema(
        role=RoleSchema.model_validate(role),
        permissions=[PermissionKeySchema(module=k.module, action=k.action) for k in permissions],
        modules=[
            ModuleSchema(
                name=spec.name,
                display_name=spec.display_name,
                route=spec.route,
                actions=sorted(actions_by_module.get(spec.name, [])),
            )
            for spec in modules
        ],
    )
