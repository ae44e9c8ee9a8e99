"""RBAC building blocks: permission keys, module registry, roles and cache."""
