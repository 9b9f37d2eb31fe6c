"""
Permission catalogue and default role templates.

Permissions are global ``resource:action`` strings. Roles are bundles of them;
nothing bypasses the check, so the Super Admin role is simply granted every
permission in the catalogue.
"""
import re
from typing import Dict, List, Tuple

PERMISSION_PATTERN = re.compile(r"^[a-z_]+:[a-z_]+$")

RESOURCES = (
    "tenants",
    "users",
    "roles",
    "teachers",
    "parents",
    "students",
    "subjects",
    "classes",
    "schedules",
    "content",
)

ACTIONS = ("create", "read", "update", "delete")

SUPER_ADMIN_ROLE = "Super Admin"
TENANT_ADMIN_ROLE = "Tenant Admin"
TEACHER_ROLE = "Teacher"
PARENT_ROLE = "Parent"

# Holders manage every parent of the school; others with a parent profile see only their own
PARENT_MANAGER_PERMISSION = "parents:update"


def permission_name(resource: str, action: str) -> str:
    return f"{resource}:{action}"


def split_permission(name: str) -> Tuple[str, str]:
    """Split ``resource:action``; raises ValueError for anything else."""
    if not PERMISSION_PATTERN.match(name):
        raise ValueError(f"Invalid permission name '{name}', expected 'resource:action'")
    resource, action = name.split(":", 1)
    return resource, action


ALL_PERMISSIONS: List[str] = [
    permission_name(resource, action) for resource in RESOURCES for action in ACTIONS
]

TENANT_ADMIN_PERMISSIONS: List[str] = [
    name for name in ALL_PERMISSIONS if not name.startswith("tenants:")
]

TEACHER_PERMISSIONS: List[str] = [
    "teachers:read",
    "students:read",
    "subjects:read",
    "classes:read",
    "schedules:read",
    "schedules:create",
    "schedules:update",
    "content:read",
    "content:create",
    "content:update",
]

PARENT_PERMISSIONS: List[str] = [
    "parents:read",
    "schedules:read",
    "content:read",
]

# Roles created inside every new tenant: name -> (description, permissions)
DEFAULT_TENANT_ROLES: Dict[str, Tuple[str, List[str]]] = {
    TENANT_ADMIN_ROLE: ("Full administrative access within the school", TENANT_ADMIN_PERMISSIONS),
    TEACHER_ROLE: ("Teaching staff", TEACHER_PERMISSIONS),
    PARENT_ROLE: ("Parent / guardian portal access", PARENT_PERMISSIONS),
}
