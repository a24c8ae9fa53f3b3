"""Two-tier RBAC permission engine.

Defines:
- Permissions / Menus: the permission and menu catalogs
- merge_role_permissions(): system role + project role, most restrictive wins
- has_permission() and friends: fail-closed queries for handlers and UI
- can_access_project_resource(): system permission + project membership gate
- SYSTEM_ROLE_PROFILES / PROJECT_ROLE_PROFILES: predefined roles
"""

from .access import (
    ACCESSIBLE_DATA_FLAGS,
    PermissionContext,
    get_accessible_data,
    get_menu_access,
    get_merged_permissions,
    get_system_role,
    get_user_id,
    get_visible_menus,
    has_permission,
    is_menu_visible,
)
from .constants import ALL_MENUS, ALL_PERMISSIONS, MENU_SET, PERMISSION_SET, Menus, Permissions
from .merge import merge_role_permissions, strict_true
from .profiles import (
    PROJECT_ROLE_PROFILES,
    SYSTEM_ROLE_PROFILES,
    RoleProfile,
    build_role_maps,
    get_project_role_profile,
    get_system_role_profile,
    initialize_project_roles,
)
from .project import (
    can_access_project_resource,
    get_member_entry,
    get_project_id,
    is_project_participant,
)

__all__ = [
    "ACCESSIBLE_DATA_FLAGS",
    "ALL_MENUS",
    "ALL_PERMISSIONS",
    "MENU_SET",
    "PERMISSION_SET",
    "PROJECT_ROLE_PROFILES",
    "SYSTEM_ROLE_PROFILES",
    "Menus",
    "PermissionContext",
    "Permissions",
    "RoleProfile",
    "build_role_maps",
    "can_access_project_resource",
    "get_accessible_data",
    "get_member_entry",
    "get_project_id",
    "get_menu_access",
    "get_merged_permissions",
    "get_project_role_profile",
    "get_system_role",
    "get_system_role_profile",
    "get_user_id",
    "get_visible_menus",
    "has_permission",
    "initialize_project_roles",
    "is_menu_visible",
    "is_project_participant",
    "merge_role_permissions",
    "strict_true",
]
