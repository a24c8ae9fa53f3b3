"""Data model for roles, users and projects.

These are Pydantic models used at the ingestion boundary. Permission and
menu values are ``StrictBool``: ``"yes"``, ``1`` or ``{}`` are rejected here
rather than silently coerced to ``True``.

The permission engine also accepts plain mappings and arbitrary objects
with the same field names, so records fresh from a document store can be
queried without conversion. Only the canonical shape is read: a user's
system role lives under ``role``. Legacy producers that send ``role_id``
must go through :func:`normalize_user` first.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel, Field, StrictBool, ValidationError, field_validator

from .exceptions import RoleValidationError


def _id_to_str(v: Any) -> Any:
    """Coerce ObjectId/UUID/int identifiers to their string form."""
    if v is None or isinstance(v, str):
        return v
    return str(v)


class Role(BaseModel):
    """A named bundle of permission and menu grants.

    Missing keys are denials. The engine never mutates a role.
    """

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    name: str = Field(default="", alias="nom")
    description: str = ""
    is_predefined: bool = False
    is_custom: bool = False
    permissions: dict[str, StrictBool] = Field(default_factory=dict)
    visible_menus: dict[str, StrictBool] = Field(default_factory=dict, alias="visibleMenus")


class ProjectRole(Role):
    """Role scoped to a single project. Can only restrict the system role."""

    project_id: Optional[str] = None

    @field_validator("project_id", mode="before")
    @classmethod
    def validate_project_id(cls, v: Any) -> Any:
        return _id_to_str(v)


class User(BaseModel):
    """Identity performing an action, with exactly one system role."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    id: Optional[str] = Field(default=None, alias="_id")
    role: Optional[Role] = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> Any:
        return _id_to_str(v)


class ProjectMember(BaseModel):
    """One entry of a project's ``membres`` list."""

    model_config = {"frozen": True, "extra": "ignore"}

    user_id: str
    project_role_id: Optional[str] = None

    @field_validator("user_id", "project_role_id", mode="before")
    @classmethod
    def validate_ids(cls, v: Any) -> Any:
        return _id_to_str(v)


class Project(BaseModel):
    """Membership-relevant slice of a project record."""

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "extra": "ignore",
    }

    id: Optional[str] = Field(default=None, alias="_id")
    chef_projet: Optional[str] = None  # Project manager
    product_owner: Optional[str] = None
    membres: list[ProjectMember] = Field(default_factory=list)

    @field_validator("id", "chef_projet", "product_owner", mode="before")
    @classmethod
    def validate_ids(cls, v: Any) -> Any:
        return _id_to_str(v)


class EffectivePermissions(BaseModel):
    """Result of merging a system role with an optional project role.

    Computed fresh on every query, never persisted.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    permissions: dict[str, bool] = Field(default_factory=dict)
    visible_menus: dict[str, bool] = Field(default_factory=dict, alias="visibleMenus")

    def granted_permissions(self) -> frozenset[str]:
        """Keys whose effective value is ``True``."""
        return frozenset(k for k, v in self.permissions.items() if v is True)

    def granted_menus(self) -> frozenset[str]:
        """Menu keys whose effective value is ``True``."""
        return frozenset(k for k, v in self.visible_menus.items() if v is True)

    def to_dict(self) -> dict[str, dict[str, bool]]:
        """Wire shape consumed by the UI: ``{"permissions": ..., "visibleMenus": ...}``."""
        return {
            "permissions": dict(self.permissions),
            "visibleMenus": dict(self.visible_menus),
        }


# ── Boundary loaders ─────────────────────────────────────


def load_role(data: Any) -> Role:
    """Validate an external role record.

    Raises:
        RoleValidationError: If any permission or menu value is not a strict boolean.
    """
    if isinstance(data, Role):
        return data
    try:
        return Role.model_validate(data)
    except ValidationError as e:
        raise RoleValidationError(errors=e.errors(include_url=False)) from e


def load_project_role(data: Any) -> ProjectRole:
    """Validate an external project-role record.

    Raises:
        RoleValidationError: If any permission or menu value is not a strict boolean.
    """
    if isinstance(data, ProjectRole):
        return data
    try:
        return ProjectRole.model_validate(data)
    except ValidationError as e:
        raise RoleValidationError(errors=e.errors(include_url=False)) from e


def load_project(data: Any) -> Project:
    """Validate an external project record."""
    if isinstance(data, Project):
        return data
    try:
        return Project.model_validate(data)
    except ValidationError as e:
        raise RoleValidationError("Invalid project record", errors=e.errors(include_url=False)) from e


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def normalize_user(record: Any) -> Optional[User]:
    """Adapt an external user record to the canonical :class:`User` shape.

    Accepts both spellings of the system role reference (``role`` from the
    session endpoint, ``role_id`` from populated documents) and both
    spellings of the identifier (``id`` / ``_id``). A role reference that was
    never populated (a bare id string) is dropped, which leaves the user
    without permissions.

    Returns:
        ``None`` for a ``None`` record, otherwise a validated :class:`User`.

    Raises:
        RoleValidationError: If the embedded role carries non-boolean values.
    """
    if record is None:
        return None
    if isinstance(record, User):
        return record

    role = _field(record, "role")
    if role is None:
        role = _field(record, "role_id")
    if not isinstance(role, (Role, Mapping)):
        role = None

    user_id = _field(record, "id")
    if user_id is None:
        user_id = _field(record, "_id")

    return User(
        id=_id_to_str(user_id),
        role=load_role(role) if role is not None else None,
    )


__all__ = [
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
]
