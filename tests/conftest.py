"""Shared fixtures for accesscore tests."""

from __future__ import annotations

from typing import Any

import pytest

from accesscore import ALL_MENUS, ALL_PERMISSIONS, AccessConfig
from accesscore.config import reset_config, set_config


@pytest.fixture(autouse=True)
def default_config():
    """Isolate tests from ACCESS_* environment variables."""
    set_config(AccessConfig())
    yield
    reset_config()


def make_role(permissions: dict[str, Any] | None = None, menus: dict[str, Any] | None = None) -> dict:
    return {"permissions": permissions or {}, "visibleMenus": menus or {}}


@pytest.fixture
def super_admin_role() -> dict:
    return make_role(
        {key: True for key in ALL_PERMISSIONS},
        {key: True for key in ALL_MENUS},
    )


@pytest.fixture
def guest_role() -> dict:
    return make_role(
        {"voirSesProjets": True},
        {"portfolio": True, "projects": True},
    )


@pytest.fixture
def project() -> dict:
    return {
        "id": "p1",
        "chef_projet": "u1",
        "product_owner": "u2",
        "membres": [{"user_id": "u3", "project_role_id": "r1"}],
    }
