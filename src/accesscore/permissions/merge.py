"""Two-tier role merge: system role + optional project role.

Most restrictive wins. A permission or menu is granted in the effective
set iff it is ``True`` in the system role and, when a project role is
supplied, also ``True`` in the project role. A project role can restrict
the system role or match it, never escalate it.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..models import EffectivePermissions

_MENU_FIELDS = ("visibleMenus", "visible_menus")


def strict_true(value: Any) -> bool:
    """Only the boolean ``True`` grants.

    ``"yes"``, ``1``, ``{}`` and every other truthy non-boolean deny.
    """
    return value is True


def read_field(source: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute; ``None`` when absent."""
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _as_map(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def is_role_shaped(role: Any) -> bool:
    """Whether ``role`` can be read as a role (mapping or object with role maps)."""
    if role is None or isinstance(role, (str, bytes, int, float, bool)):
        return False
    if isinstance(role, Mapping):
        return True
    return hasattr(role, "permissions") or any(hasattr(role, f) for f in _MENU_FIELDS)


def role_permissions(role: Any) -> Mapping[str, Any]:
    """The ``permissions`` map of a role, or an empty map."""
    return _as_map(read_field(role, "permissions"))


def role_menus(role: Any) -> Mapping[str, Any]:
    """The ``visibleMenus`` map of a role (either spelling), or an empty map."""
    for name in _MENU_FIELDS:
        value = read_field(role, name)
        if value is not None:
            return _as_map(value)
    return {}


def merge_maps(system: Mapping[str, Any], project: Mapping[str, Any] | None) -> dict[str, bool]:
    """Merge one pair of grant maps.

    Without ``project`` every system key is carried with its strict value.
    With ``project`` the result covers the union of both key sets; a key
    missing on one side is ``False`` on that side.
    """
    if project is None:
        return {key: strict_true(value) for key, value in system.items() if isinstance(key, str)}

    merged = {
        key: strict_true(value) and strict_true(project.get(key))
        for key, value in system.items()
        if isinstance(key, str)
    }
    for key in project:
        if isinstance(key, str) and key not in merged:
            merged[key] = False
    return merged


def merge_role_permissions(system_role: Any, project_role: Any = None) -> EffectivePermissions:
    """Combine a system role with an optional project role.

    Args:
        system_role: Role-shaped value (``Role`` model, mapping, or object).
            Missing maps are empty.
        project_role: ``None`` or a role-shaped value scoped to one project.

    Returns:
        EffectivePermissions with ``permissions`` and ``visible_menus`` maps.

    Example::

        system = {"permissions": {"gererTaches": True, "modifierBudget": False}}
        project = {"permissions": {"gererTaches": False, "modifierBudget": True}}
        merge_role_permissions(system, project).permissions
        # {"gererTaches": False, "modifierBudget": False}
    """
    if project_role is not None and not is_role_shaped(project_role):
        # Garbage project role: deny everything rather than fall back to the system role
        project_role = {}

    has_project = project_role is not None
    return EffectivePermissions(
        permissions=merge_maps(
            role_permissions(system_role),
            role_permissions(project_role) if has_project else None,
        ),
        visible_menus=merge_maps(
            role_menus(system_role),
            role_menus(project_role) if has_project else None,
        ),
    )


__all__ = [
    "is_role_shaped",
    "merge_maps",
    "merge_role_permissions",
    "read_field",
    "role_menus",
    "role_permissions",
    "strict_true",
]
