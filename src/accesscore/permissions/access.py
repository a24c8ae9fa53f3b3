"""Permission queries for route handlers and UI.

Every function here is built on :func:`merge_role_permissions` and fails
closed: a ``None`` user, a user without a system role, missing maps and
non-boolean values all produce the denied answer. Nothing raises.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..config import get_config
from ..models import EffectivePermissions
from .constants import ALL_MENUS, Permissions
from .merge import is_role_shaped, merge_role_permissions, read_field

logger = logging.getLogger(__name__)

# Capability flag → permission key, consumed by UI components.
ACCESSIBLE_DATA_FLAGS: dict[str, str] = {
    "canViewBudget": Permissions.VOIR_BUDGET,
    "canModifyBudget": Permissions.MODIFIER_BUDGET,
    "canViewTimesheets": Permissions.VOIR_TEMPS_PASSES,
    "canSubmitTimesheet": Permissions.SAISIR_TEMPS,
    "canViewReports": Permissions.GENERER_RAPPORTS,
    "canViewAudit": Permissions.VOIR_AUDIT,
    "canManageMembers": Permissions.GERER_MEMBRES_PROJET,
    "canChangeRoles": Permissions.CHANGER_ROLE_MEMBRE,
    "canManageTasks": Permissions.GERER_TACHES,
    "canMoveTasks": Permissions.DEPLACER_TACHES,
    "canPrioritizeBacklog": Permissions.PRIORISER_BACKLOG,
    "canManageSprints": Permissions.GERER_SPRINTS,
    "canValidateDeliverables": Permissions.VALIDER_LIVRABLE,
    "canComment": Permissions.COMMENTER,
    "canManageFiles": Permissions.GERER_FICHIERS,
    "canEditProject": Permissions.MODIFIER_CHARTE_PROJET,
    "canCreateProject": Permissions.CREER_PROJET,
    "canDeleteProject": Permissions.SUPPRIMER_PROJET,
    "canViewAllProjects": Permissions.VOIR_TOUS_PROJETS,
}


def get_system_role(user: Any) -> Optional[Any]:
    """The user's system role, or ``None`` if absent or not role-shaped."""
    role = read_field(user, "role")
    return role if is_role_shaped(role) else None


def get_user_id(user: Any) -> Optional[str]:
    """String form of the user's identifier (``id`` or ``_id``)."""
    user_id = read_field(user, "id")
    if user_id is None:
        user_id = read_field(user, "_id")
    return None if user_id is None else str(user_id)


def _log_denied(kind: str, key: str, user: Any) -> None:
    if get_config().log_decisions:
        logger.debug("%s denied: %s", kind, key, extra={"user_id": get_user_id(user)})


def get_merged_permissions(user: Any, project_role: Any = None) -> EffectivePermissions:
    """Effective permission set for a user, optionally inside a project.

    Returns empty maps when the user has no system role.
    """
    role = get_system_role(user)
    if role is None:
        return EffectivePermissions()
    return merge_role_permissions(role, project_role)


def has_permission(user: Any, permission: str, project_role: Any = None) -> bool:
    """Check if a user holds ``permission``, restricted by ``project_role`` if given.

    Example::

        has_permission(user, Permissions.GERER_TACHES)                 # system role only
        has_permission(user, Permissions.GERER_TACHES, project_role)   # both must allow
    """
    allowed = get_merged_permissions(user, project_role).permissions.get(permission) is True
    if not allowed:
        _log_denied("Permission", permission, user)
    return allowed


def is_menu_visible(user: Any, menu: str, project_role: Any = None) -> bool:
    """Check if the ``menu`` entry should be rendered for this user."""
    visible = get_merged_permissions(user, project_role).visible_menus.get(menu) is True
    if not visible:
        _log_denied("Menu", menu, user)
    return visible


def get_visible_menus(user: Any, project_role: Any = None) -> list[str]:
    """Catalog menu keys granted to the user, in catalog order.

    Keys outside the catalog are never returned, even if a role marks them ``True``.
    """
    granted = get_merged_permissions(user, project_role).granted_menus()
    return [menu for menu in ALL_MENUS if menu in granted]


def get_menu_access(user: Any, project_role: Any = None) -> dict[str, bool]:
    """One boolean per catalog menu key."""
    menus = get_merged_permissions(user, project_role).visible_menus
    return {menu: menus.get(menu) is True for menu in ALL_MENUS}


def get_accessible_data(user: Any, project_role: Any = None) -> dict[str, bool]:
    """Derived UI capability flags (see :data:`ACCESSIBLE_DATA_FLAGS`).

    All ``False`` for a ``None`` or roleless user.
    """
    permissions = get_merged_permissions(user, project_role).permissions
    return {flag: permissions.get(key) is True for flag, key in ACCESSIBLE_DATA_FLAGS.items()}


class PermissionContext:
    """Merged permissions for one user + project-role combination.

    Merges once and answers every query from that snapshot. Build a new
    context when the user's role or project role changes.

    Example::

        ctx = PermissionContext(user, project_role)
        if ctx.has_permission(Permissions.GERER_SPRINTS):
            ...
        render(menus=ctx.visible_menus(), flags=ctx.accessible_data())
    """

    __slots__ = ("user", "project_role", "merged")

    def __init__(self, user: Any, project_role: Any = None) -> None:
        self.user = user
        self.project_role = project_role
        self.merged = get_merged_permissions(user, project_role)

    def has_permission(self, permission: str) -> bool:
        return self.merged.permissions.get(permission) is True

    def is_menu_visible(self, menu: str) -> bool:
        return self.merged.visible_menus.get(menu) is True

    def visible_menus(self) -> list[str]:
        granted = self.merged.granted_menus()
        return [menu for menu in ALL_MENUS if menu in granted]

    def menu_access(self) -> dict[str, bool]:
        return {menu: self.is_menu_visible(menu) for menu in ALL_MENUS}

    def accessible_data(self) -> dict[str, bool]:
        return {flag: self.has_permission(key) for flag, key in ACCESSIBLE_DATA_FLAGS.items()}

    def __repr__(self) -> str:
        return (
            f"PermissionContext(user_id={get_user_id(self.user)!r}, "
            f"permissions={len(self.merged.granted_permissions())}, "
            f"menus={len(self.merged.granted_menus())})"
        )


__all__ = [
    "ACCESSIBLE_DATA_FLAGS",
    "PermissionContext",
    "get_accessible_data",
    "get_menu_access",
    "get_merged_permissions",
    "get_system_role",
    "get_user_id",
    "get_visible_menus",
    "has_permission",
    "is_menu_visible",
]
