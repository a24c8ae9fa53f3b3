from .config import AccessConfig, EnforcementMode, LogLevel, load_config_from_env
from .exceptions import (
    AccessCoreError,
    PermissionDeniedError,
    ProjectAccessDeniedError,
    RoleValidationError,
)
from .guard import ensure_permission, ensure_project_access, require_permission
from .logging import (
    AccessLogFormatter,
    AccessLoggerAdapter,
    get_access_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .models import (
    EffectivePermissions,
    Project,
    ProjectMember,
    ProjectRole,
    Role,
    User,
    load_project,
    load_project_role,
    load_role,
    normalize_user,
)
from .permissions import (
    ACCESSIBLE_DATA_FLAGS,
    ALL_MENUS,
    ALL_PERMISSIONS,
    PROJECT_ROLE_PROFILES,
    SYSTEM_ROLE_PROFILES,
    Menus,
    PermissionContext,
    Permissions,
    can_access_project_resource,
    get_accessible_data,
    get_menu_access,
    get_merged_permissions,
    get_project_role_profile,
    get_system_role_profile,
    get_visible_menus,
    has_permission,
    is_menu_visible,
    is_project_participant,
    merge_role_permissions,
)

__all__ = [
    "AccessConfig",
    "EnforcementMode",
    "LogLevel",
    "load_config_from_env",
    "AccessCoreError",
    "PermissionDeniedError",
    "ProjectAccessDeniedError",
    "RoleValidationError",
    "ensure_permission",
    "ensure_project_access",
    "require_permission",
    "AccessLogFormatter",
    "AccessLoggerAdapter",
    "get_access_logger",
    "redact_secrets",
    "safe_log_value",
    "safe_preview",
    "setup_logging",
    "EffectivePermissions",
    "Project",
    "ProjectMember",
    "ProjectRole",
    "Role",
    "User",
    "load_project",
    "load_project_role",
    "load_role",
    "normalize_user",
    "ACCESSIBLE_DATA_FLAGS",
    "ALL_MENUS",
    "ALL_PERMISSIONS",
    "PROJECT_ROLE_PROFILES",
    "SYSTEM_ROLE_PROFILES",
    "Menus",
    "PermissionContext",
    "Permissions",
    "can_access_project_resource",
    "get_accessible_data",
    "get_menu_access",
    "get_merged_permissions",
    "get_project_role_profile",
    "get_system_role_profile",
    "get_visible_menus",
    "has_permission",
    "is_menu_visible",
    "is_project_participant",
    "merge_role_permissions",
]
