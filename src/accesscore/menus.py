"""Menu configuration and filtering for the dashboard navigation.

Each menu item is guarded by two independent grants: its permission key
and its menu-visibility key. An item is shown only when both are granted
in the user's merged permission set.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .permissions.access import get_merged_permissions
from .permissions.constants import Menus
from .permissions.constants import Permissions as P


@dataclass(frozen=True)
class MenuItem:
    """One navigation entry. ``label_key`` is a translation key."""

    label_key: str
    href: str
    menu_key: str
    permission_key: str


@dataclass(frozen=True)
class AvailableMenus:
    main_menu_items: tuple[MenuItem, ...]
    admin_menu_items: tuple[MenuItem, ...]
    notifications_menu: Optional[MenuItem]


@dataclass(frozen=True)
class MenuStats:
    total_main_menu_items: int
    total_admin_menu_items: int
    has_notifications: bool
    has_admin_access: bool
    total_menu_items: int


MAIN_MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("dashboard", "/dashboard", Menus.PORTFOLIO, P.VOIR_SES_PROJETS),
    MenuItem("projects", "/dashboard/projects", Menus.PROJECTS, P.VOIR_SES_PROJETS),
    MenuItem("kanban", "/dashboard/kanban", Menus.KANBAN, P.DEPLACER_TACHES),
    MenuItem("backlog", "/dashboard/backlog", Menus.BACKLOG, P.PRIORISER_BACKLOG),
    MenuItem("sprints", "/dashboard/sprints", Menus.SPRINTS, P.GERER_SPRINTS),
    MenuItem("roadmap", "/dashboard/roadmap", Menus.ROADMAP, P.VOIR_SES_PROJETS),
    MenuItem("tasks", "/dashboard/tasks", Menus.TASKS, P.GERER_TACHES),
    MenuItem("files", "/dashboard/files", Menus.FILES, P.GERER_FICHIERS),
    MenuItem("comments", "/dashboard/comments", Menus.COMMENTS, P.COMMENTER),
    MenuItem("timesheets", "/dashboard/timesheets", Menus.TIMESHEETS, P.SAISIR_TEMPS),
    MenuItem("budget", "/dashboard/budget", Menus.BUDGET, P.VOIR_BUDGET),
    MenuItem("reports", "/dashboard/reports", Menus.REPORTS, P.GENERER_RAPPORTS),
)

ADMIN_MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("rolesPermissions", "/dashboard/admin/roles", Menus.ADMIN, P.ADMIN_CONFIG),
    MenuItem("users", "/dashboard/users", Menus.ADMIN, P.GERER_UTILISATEURS),
    MenuItem("projectTemplates", "/dashboard/admin/templates", Menus.ADMIN, P.ADMIN_CONFIG),
    MenuItem("deliverableTypes", "/dashboard/admin/deliverable-types", Menus.ADMIN, P.ADMIN_CONFIG),
    MenuItem("sharepoint", "/dashboard/admin/sharepoint", Menus.ADMIN, P.ADMIN_CONFIG),
    MenuItem("auditLogs", "/dashboard/admin/audit", Menus.ADMIN, P.VOIR_AUDIT),
    MenuItem("settings", "/dashboard/settings", Menus.ADMIN, P.ADMIN_CONFIG),
    MenuItem("maintenance", "/dashboard/maintenance", Menus.ADMIN, P.ADMIN_CONFIG),
)

NOTIFICATIONS_MENU = MenuItem(
    "notifications",
    "/dashboard/notifications",
    Menus.NOTIFICATIONS,
    P.RECEVOIR_NOTIFICATIONS,
)

_ALL_ITEMS: tuple[MenuItem, ...] = (*MAIN_MENU_ITEMS, *ADMIN_MENU_ITEMS, NOTIFICATIONS_MENU)


def filter_menu_items(
    items: tuple[MenuItem, ...] | list[MenuItem],
    user: Any,
    project_role: Any = None,
) -> tuple[MenuItem, ...]:
    """Keep the items whose permission key and menu key are both granted."""
    merged = get_merged_permissions(user, project_role)
    return tuple(
        item
        for item in items
        if merged.permissions.get(item.permission_key) is True
        and merged.visible_menus.get(item.menu_key) is True
    )


def get_available_menus(user: Any, project_role: Any = None) -> AvailableMenus:
    """Navigation sections the user may see."""
    notifications = filter_menu_items((NOTIFICATIONS_MENU,), user, project_role)
    return AvailableMenus(
        main_menu_items=filter_menu_items(MAIN_MENU_ITEMS, user, project_role),
        admin_menu_items=filter_menu_items(ADMIN_MENU_ITEMS, user, project_role),
        notifications_menu=NOTIFICATIONS_MENU if notifications else None,
    )


def can_access_menu_item(href: str, user: Any, project_role: Any = None) -> bool:
    """Check a route against the menu configuration. Unknown routes are denied."""
    item = next((i for i in _ALL_ITEMS if i.href == href), None)
    if item is None:
        return False
    return bool(filter_menu_items((item,), user, project_role))


def get_menu_stats(user: Any, project_role: Any = None) -> MenuStats:
    menus = get_available_menus(user, project_role)
    main = len(menus.main_menu_items)
    admin = len(menus.admin_menu_items)
    has_notifications = menus.notifications_menu is not None
    return MenuStats(
        total_main_menu_items=main,
        total_admin_menu_items=admin,
        has_notifications=has_notifications,
        has_admin_access=admin > 0,
        total_menu_items=main + admin + (1 if has_notifications else 0),
    )


__all__ = [
    "ADMIN_MENU_ITEMS",
    "MAIN_MENU_ITEMS",
    "NOTIFICATIONS_MENU",
    "AvailableMenus",
    "MenuItem",
    "MenuStats",
    "can_access_menu_item",
    "filter_menu_items",
    "get_available_menus",
    "get_menu_stats",
]
