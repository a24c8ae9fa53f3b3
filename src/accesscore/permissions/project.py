"""Project resource access gate.

Combines the system-role permission check with project membership:
the system role is the ceiling, membership decides whether a user may
touch a given project at all, and ``adminConfig`` bypasses membership.

This gate does not take a project role. Callers that need the
fine-grained answer resolve the member's project role themselves and
call :func:`~accesscore.permissions.access.has_permission` with it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Optional

from ..config import get_config
from .access import get_system_role, get_user_id, has_permission
from .constants import Permissions
from .merge import read_field

logger = logging.getLogger(__name__)


def _same_id(a: Any, b: Optional[str]) -> bool:
    return a is not None and b is not None and str(a) == b


def _members(project: Any) -> Iterable[Any]:
    members = read_field(project, "membres")
    if members is None or isinstance(members, (str, bytes)):
        return ()
    try:
        return list(members)
    except TypeError:
        return ()


def get_project_id(project: Any) -> Optional[str]:
    """String form of the project's identifier (``id`` or ``_id``)."""
    project_id = read_field(project, "id")
    if project_id is None:
        project_id = read_field(project, "_id")
    return None if project_id is None else str(project_id)


def get_member_entry(user: Any, project: Any) -> Optional[Any]:
    """The ``membres`` entry for ``user`` in ``project``, or ``None``.

    The entry carries the member's project-role reference, which callers
    resolve to a project role before using the merge-based queries.
    """
    user_id = get_user_id(user)
    if user_id is None or project is None:
        return None
    for member in _members(project):
        if _same_id(read_field(member, "user_id"), user_id):
            return member
    return None


def is_project_participant(user: Any, project: Any) -> bool:
    """Check if the user is the project's manager, product owner, or a listed member."""
    user_id = get_user_id(user)
    if user_id is None or project is None:
        return False
    return (
        _same_id(read_field(project, "chef_projet"), user_id)
        or _same_id(read_field(project, "product_owner"), user_id)
        or get_member_entry(user, project) is not None
    )


def can_access_project_resource(user: Any, project: Any, permission: str) -> bool:
    """Decide whether ``user`` may perform ``permission`` on ``project`` resources.

    Checks in order:
    1. No system role → deny.
    2. ``adminConfig`` → allow, regardless of membership.
    3. System role denies ``permission`` → deny, even for the project manager.
    4. Participant (manager, product owner, member) → allow, else deny.

    Args:
        user: User with a system role (model, mapping, or object).
        project: Project with ``chef_projet``, ``product_owner`` and ``membres``.
        permission: Permission key required by the action.

    Returns:
        True if access is granted.
    """
    if get_system_role(user) is None:
        return False

    if has_permission(user, Permissions.ADMIN_CONFIG):
        return True

    if not has_permission(user, permission):
        return False

    participant = is_project_participant(user, project)
    if not participant and get_config().log_decisions:
        logger.debug(
            "Project access denied: not a participant",
            extra={"user_id": get_user_id(user), "project_id": get_project_id(project)},
        )
    return participant


__all__ = [
    "can_access_project_resource",
    "get_member_entry",
    "get_project_id",
    "is_project_participant",
]
