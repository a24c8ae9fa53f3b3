"""Exception hierarchy for accesscore consumers.

The permission engine itself never raises: every malformed input resolves
to a denied answer. These errors exist for the layers around it:

- ``RoleValidationError`` - role data rejected at the ingestion boundary.
- ``PermissionDeniedError`` - raised by :mod:`accesscore.guard` helpers so
  route handlers can map a denial to HTTP 403 / gRPC PERMISSION_DENIED.
- ``ConfigurationError`` - invalid library configuration.

Usage in route handlers::

    from accesscore.exceptions import PermissionDeniedError, get_http_status

    try:
        ensure_permission(user, Permissions.VOIR_BUDGET)
    except PermissionDeniedError as e:
        return JSONResponse({"error": e.message}, status_code=get_http_status(e))
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar, cast

__all__ = [
    # Base hierarchy
    "AccessCoreError",
    "ConfigurationError",
    "RoleValidationError",
    "PermissionDeniedError",
    "ProjectAccessDeniedError",
    # Registry
    "ErrorRegistry",
    "error_registry",
    "register_error",
    # Protocol helpers
    "get_http_status",
    "get_grpc_status_code",
    "grpc_error_handler",
]

logger = logging.getLogger(__name__)


# ---- Exception Hierarchy ----------------------------------------------------


class AccessCoreError(Exception):
    """Base exception for accesscore.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "PERMISSION_DENIED").
        message: Human-readable error description, safe to show to end users.
        details: Additional context as keyword arguments. Never sent to clients.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"
    http_status: int = 500

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(AccessCoreError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class RoleValidationError(AccessCoreError):
    """Role or project record failed validation at the ingestion boundary."""

    code: str = "ROLE_VALIDATION_ERROR"
    message: str = "Invalid role definition"
    http_status: int = 422


class PermissionDeniedError(AccessCoreError):
    """The caller lacks the permission required for an action.

    The message is deliberately generic; the failing permission key is kept
    in ``details`` for server-side logging only.
    """

    code: str = "PERMISSION_DENIED"
    message: str = "Access denied"
    http_status: int = 403


class ProjectAccessDeniedError(PermissionDeniedError):
    """The caller may not touch resources of this project."""

    code: str = "PROJECT_ACCESS_DENIED"


# ---- Error Registry for Protocol Mapping ------------------------------------

_E = TypeVar("_E", bound=type[AccessCoreError])


class ErrorRegistry:
    """Registry for mapping internal errors to external protocol codes."""

    def __init__(self) -> None:
        self._errors: dict[str, type[AccessCoreError]] = {}

    def register(self, code: str, error_cls: type[AccessCoreError]) -> None:
        self._errors[code] = error_cls

    def get(self, code: str) -> type[AccessCoreError] | None:
        return self._errors.get(code)

    def all(self) -> dict[str, type[AccessCoreError]]:
        return dict(self._errors)


error_registry = ErrorRegistry()


def register_error(code: str) -> Callable[[_E], _E]:
    """Decorator to register a custom error type.

    Usage:
        @register_error("BUDGET_LOCKED")
        class BudgetLockedError(AccessCoreError):
            code = "BUDGET_LOCKED"
    """

    def decorator(cls: _E) -> _E:
        error_registry.register(code, cls)
        return cls

    return cast(Callable[[_E], _E], decorator)


# Register base errors
error_registry.register("INTERNAL_ERROR", AccessCoreError)
error_registry.register("CONFIGURATION_ERROR", ConfigurationError)
error_registry.register("ROLE_VALIDATION_ERROR", RoleValidationError)
error_registry.register("PERMISSION_DENIED", PermissionDeniedError)
error_registry.register("PROJECT_ACCESS_DENIED", ProjectAccessDeniedError)


# ---- Protocol Mapping -------------------------------------------------------


def get_http_status(error: AccessCoreError) -> int:
    """Map an AccessCoreError to the HTTP status a route handler should return."""
    return getattr(error, "http_status", 500)


def get_grpc_status_code(error: AccessCoreError) -> Any:
    """Map AccessCoreError to gRPC status code.

    Returns grpc.StatusCode value for the given error type.
    Import grpc locally to avoid hard dependency at module level.
    """
    import grpc

    error_to_status = {
        "PERMISSION_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "PROJECT_ACCESS_DENIED": grpc.StatusCode.PERMISSION_DENIED,
        "ROLE_VALIDATION_ERROR": grpc.StatusCode.INVALID_ARGUMENT,
        "CONFIGURATION_ERROR": grpc.StatusCode.FAILED_PRECONDITION,
    }
    return error_to_status.get(error.code, grpc.StatusCode.INTERNAL)


def grpc_error_handler(method):
    """Decorator for unary gRPC service methods with proper error handling.

    Catches AccessCoreError and aborts with the mapped gRPC status code.
    Only the generic error message reaches the client. Unexpected errors
    abort with a fixed INTERNAL message; their details stay in the server log.

    Usage:
        @grpc_error_handler
        async def UpdateBudget(self, request, context):
            ensure_project_access(user, project, Permissions.MODIFIER_BUDGET)
            ...
    """

    @functools.wraps(method)
    async def wrapper(self, request, context):
        try:
            return await method(self, request, context)
        except AccessCoreError as e:
            status_code = get_grpc_status_code(e)
            error_message = f"[{e.code}] {e.message}"

            logger.error(
                "%s failed: %s",
                method.__name__,
                error_message,
                extra={
                    "error_code": e.code,
                    "error_details": e.details,
                },
            )

            context.set_trailing_metadata([("error-code", e.code)])
            await context.abort(status_code, error_message)
            return

        except Exception as e:
            import grpc

            logger.exception("%s unexpected error: %s", method.__name__, e)
            internal = AccessCoreError()
            context.set_trailing_metadata([("error-code", internal.code)])
            await context.abort(
                grpc.StatusCode.INTERNAL,
                f"[{internal.code}] {internal.message}",
            )
            return

    return wrapper
