"""Enforcement helpers for route handlers.

Provides:
- ``check_permission`` / ``check_project_access`` - denial reason or ``None``.
- ``ensure_permission`` / ``ensure_project_access`` - raise on denial.
- ``require_permission`` - decorator for sync and async handlers.

Raised errors carry the generic "Access denied" message. The failing
permission key and user id go to the server log and ``error.details``
only, never to the client.

Behaviour on denial follows ``AccessConfig.enforcement``:
``enforce`` raises, ``warn`` logs and lets the call through, ``off`` does nothing.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Callable, Optional

from .config import AccessConfig, EnforcementMode, get_config
from .exceptions import PermissionDeniedError, ProjectAccessDeniedError
from .permissions.access import get_system_role, get_user_id, has_permission
from .permissions.project import can_access_project_resource, get_project_id

logger = logging.getLogger(__name__)


def check_permission(user: Any, permission: str, project_role: Any = None) -> str | None:
    """Check a permission without raising.

    Returns:
        None if allowed, or a server-side denial reason.
    """
    if get_system_role(user) is None:
        return "no system role"
    if not has_permission(user, permission, project_role):
        return f"missing permission: {permission}"
    return None


def check_project_access(user: Any, project: Any, permission: str) -> str | None:
    """Check project resource access without raising.

    Returns:
        None if allowed, or a server-side denial reason.
    """
    if project is None:
        return "no project"
    if not can_access_project_resource(user, project, permission):
        return f"project access denied: {permission}"
    return None


def _handle_denial(
    reason: str,
    error_cls: type[PermissionDeniedError],
    config: AccessConfig,
    **details: Any,
) -> None:
    if config.enforcement == EnforcementMode.OFF:
        return

    logger.warning("Access denied: %s", reason, extra=details)
    if config.enforcement == EnforcementMode.ENFORCE:
        raise error_cls(reason=reason, **details)


def ensure_permission(
    user: Any,
    permission: str,
    project_role: Any = None,
    *,
    config: Optional[AccessConfig] = None,
) -> None:
    """Raise PermissionDeniedError unless ``user`` holds ``permission``.

    Raises:
        PermissionDeniedError: In ``enforce`` mode, when the check fails.
    """
    reason = check_permission(user, permission, project_role)
    if reason is not None:
        _handle_denial(
            reason,
            PermissionDeniedError,
            config or get_config(),
            user_id=get_user_id(user),
            permission=permission,
        )


def ensure_project_access(
    user: Any,
    project: Any,
    permission: str,
    *,
    config: Optional[AccessConfig] = None,
) -> None:
    """Raise ProjectAccessDeniedError unless ``user`` may act on ``project``.

    Raises:
        ProjectAccessDeniedError: In ``enforce`` mode, when the check fails.
    """
    reason = check_project_access(user, project, permission)
    if reason is not None:
        _handle_denial(
            reason,
            ProjectAccessDeniedError,
            config or get_config(),
            user_id=get_user_id(user),
            project_id=get_project_id(project),
            permission=permission,
        )


def require_permission(
    permission: str,
    *,
    user_getter: Callable[..., Any],
    project_role_getter: Optional[Callable[..., Any]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator guarding a handler with :func:`ensure_permission`.

    The getters receive the handler's arguments and return the user and
    (optionally) the resolved project role.

    Usage::

        @require_permission(Permissions.MODIFIER_BUDGET, user_getter=lambda request: request.user)
        async def update_budget(request):
            ...
    """

    def decorator(handler: Callable[..., Any]) -> Callable[..., Any]:
        def _check(args: tuple, kwargs: dict) -> None:
            user = user_getter(*args, **kwargs)
            project_role = project_role_getter(*args, **kwargs) if project_role_getter else None
            ensure_permission(user, permission, project_role)

        if inspect.iscoroutinefunction(handler):

            @functools.wraps(handler)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                _check(args, kwargs)
                return await handler(*args, **kwargs)

            return async_wrapper

        @functools.wraps(handler)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            _check(args, kwargs)
            return handler(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "check_permission",
    "check_project_access",
    "ensure_permission",
    "ensure_project_access",
    "require_permission",
]
