"""Tests for the permission catalog, merge engine and query functions."""

from __future__ import annotations

import itertools

import pytest

from accesscore import (
    ACCESSIBLE_DATA_FLAGS,
    ALL_MENUS,
    ALL_PERMISSIONS,
    EffectivePermissions,
    Menus,
    PermissionContext,
    Permissions,
    Role,
    User,
    get_accessible_data,
    get_menu_access,
    get_merged_permissions,
    get_visible_menus,
    has_permission,
    is_menu_visible,
    merge_role_permissions,
)
from accesscore.permissions import MENU_SET, PERMISSION_SET, strict_true

from .conftest import make_role


class TestCatalog:
    """Tests for the permission and menu catalogs."""

    def test_permission_count(self) -> None:
        assert len(ALL_PERMISSIONS) == 23
        assert len(PERMISSION_SET) == 23

    def test_menu_count(self) -> None:
        assert len(ALL_MENUS) == 14
        assert len(MENU_SET) == 14

    def test_permission_order(self) -> None:
        assert ALL_PERMISSIONS[0] == "voirTousProjets"
        assert ALL_PERMISSIONS[-1] == "adminConfig"
        assert ALL_PERMISSIONS.index("modifierBudget") == 11

    def test_menu_order(self) -> None:
        assert ALL_MENUS == (
            "portfolio", "projects", "kanban", "backlog", "sprints", "roadmap", "tasks",
            "files", "comments", "timesheets", "budget", "reports", "notifications", "admin",
        )

    def test_constants_match_catalog(self) -> None:
        """Every Permissions / Menus constant is in its catalog and vice versa."""
        perm_values = {v for k, v in vars(Permissions).items() if not k.startswith("_")}
        menu_values = {v for k, v in vars(Menus).items() if not k.startswith("_")}
        assert perm_values == PERMISSION_SET
        assert menu_values == MENU_SET

    def test_catalog_is_immutable(self) -> None:
        assert isinstance(ALL_PERMISSIONS, tuple)
        assert isinstance(MENU_SET, frozenset)


class TestStrictTrue:
    @pytest.mark.parametrize("value", ["yes", 1, {}, {"a": 1}, [True], "true", 1.0, None, False])
    def test_non_true_values_deny(self, value) -> None:
        assert strict_true(value) is False

    def test_true_grants(self) -> None:
        assert strict_true(True) is True


class TestMergeRolePermissions:
    """Tests for the most-restrictive-wins merge."""

    @pytest.mark.parametrize("system_value,project_value", list(itertools.product([True, False], repeat=2)))
    def test_most_restrictive_wins_every_key(self, system_value: bool, project_value: bool) -> None:
        system = make_role(
            {key: system_value for key in ALL_PERMISSIONS},
            {key: system_value for key in ALL_MENUS},
        )
        project = make_role(
            {key: project_value for key in ALL_PERMISSIONS},
            {key: project_value for key in ALL_MENUS},
        )
        merged = merge_role_permissions(system, project)
        expected = system_value and project_value
        for key in ALL_PERMISSIONS:
            assert merged.permissions[key] is expected, key
        for key in ALL_MENUS:
            assert merged.visible_menus[key] is expected, key

    def test_single_key_project_role(self) -> None:
        """A project role naming one key denies every other system grant."""
        system = make_role({key: True for key in ALL_PERMISSIONS})
        merged = merge_role_permissions(system, {"permissions": {"gererTaches": True}})
        assert merged.permissions["gererTaches"] is True
        assert merged.permissions["voirBudget"] is False

    def test_no_project_role_falls_back_to_system(self) -> None:
        system = make_role(
            {"gererTaches": True, "voirBudget": False},
            {"kanban": True, "admin": False},
        )
        merged = merge_role_permissions(system, None)
        assert merged.permissions == {"gererTaches": True, "voirBudget": False}
        assert merged.visible_menus == {"kanban": True, "admin": False}

    def test_no_project_role_normalizes_truthy_values(self) -> None:
        merged = merge_role_permissions({"permissions": {"gererTaches": "yes", "commenter": 1}})
        assert merged.permissions == {"gererTaches": False, "commenter": False}

    def test_union_of_keys(self) -> None:
        """Keys present only on one side appear in the output as False."""
        merged = merge_role_permissions(
            {"permissions": {"gererTaches": True}},
            {"permissions": {"voirBudget": True}},
        )
        assert merged.permissions == {"gererTaches": False, "voirBudget": False}

    def test_restrictive_project_role_scenario(self) -> None:
        system = make_role({"voirTousProjets": True, "gererTaches": True, "modifierBudget": False})
        project = make_role({"voirTousProjets": False, "gererTaches": False, "modifierBudget": True})
        merged = merge_role_permissions(system, project)
        assert merged.permissions == {
            "voirTousProjets": False,
            "gererTaches": False,
            "modifierBudget": False,
        }

    def test_project_role_cannot_escalate(self) -> None:
        system = make_role({"adminConfig": False})
        project = make_role({key: True for key in ALL_PERMISSIONS})
        merged = merge_role_permissions(system, project)
        assert merged.permissions["adminConfig"] is False
        assert merged.permissions["voirBudget"] is False

    def test_all_false_project_role_denies_everything(self, super_admin_role) -> None:
        project = make_role(
            {key: False for key in ALL_PERMISSIONS},
            {key: False for key in ALL_MENUS},
        )
        merged = merge_role_permissions(super_admin_role, project)
        assert not merged.granted_permissions()
        assert not merged.granted_menus()

    def test_empty_roles(self) -> None:
        merged = merge_role_permissions({}, {})
        assert merged.permissions == {}
        assert merged.visible_menus == {}

    def test_missing_and_malformed_maps(self) -> None:
        merged = merge_role_permissions({"permissions": None, "visibleMenus": "admin"})
        assert merged.permissions == {}
        assert merged.visible_menus == {}

    def test_truthy_values_in_project_role_deny(self) -> None:
        system = make_role({"gererTaches": True, "commenter": True, "voirBudget": True})
        project = make_role({"gererTaches": "yes", "commenter": 1, "voirBudget": {}})
        merged = merge_role_permissions(system, project)
        assert not merged.granted_permissions()

    def test_non_role_project_role_denies(self, super_admin_role) -> None:
        """An unresolved project-role reference (bare id) must not fall back to the system role."""
        merged = merge_role_permissions(super_admin_role, "64f0c2a1e4b0")
        assert not merged.granted_permissions()

    def test_accepts_models(self) -> None:
        system = Role(permissions={"gererTaches": True}, visible_menus={"kanban": True})
        project = Role(permissions={"gererTaches": True}, visibleMenus={"kanban": False})
        merged = merge_role_permissions(system, project)
        assert merged.permissions == {"gererTaches": True}
        assert merged.visible_menus == {"kanban": False}

    def test_accepts_snake_case_menu_key(self) -> None:
        merged = merge_role_permissions({"visible_menus": {"tasks": True}})
        assert merged.visible_menus == {"tasks": True}

    def test_does_not_mutate_inputs(self) -> None:
        system = make_role({"gererTaches": True})
        project = make_role({"voirBudget": True})
        merge_role_permissions(system, project)
        assert system == make_role({"gererTaches": True})
        assert project == make_role({"voirBudget": True})

    def test_extraneous_keys_survive_merge(self) -> None:
        merged = merge_role_permissions({"permissions": {"fakePermission": True}})
        assert merged.permissions == {"fakePermission": True}

    def test_to_dict_wire_shape(self) -> None:
        merged = merge_role_permissions(make_role({"commenter": True}, {"comments": True}))
        assert merged.to_dict() == {
            "permissions": {"commenter": True},
            "visibleMenus": {"comments": True},
        }


class TestHasPermission:
    """Tests for has_permission."""

    @pytest.mark.parametrize("user", [None, {}, {"role": None}, {"_id": "u1"}, {"role": "64f0c2a1"}])
    def test_roleless_user_denied_for_every_key(self, user) -> None:
        for key in ALL_PERMISSIONS:
            assert has_permission(user, key) is False

    def test_role_without_maps(self) -> None:
        assert has_permission({"role": {}}, Permissions.VOIR_TOUS_PROJETS) is False

    def test_truthy_non_boolean_values(self) -> None:
        user = {"role": {"permissions": {"voirTousProjets": "yes", "adminConfig": 1, "gererTaches": {}}}}
        assert has_permission(user, Permissions.VOIR_TOUS_PROJETS) is False
        assert has_permission(user, Permissions.ADMIN_CONFIG) is False
        assert has_permission(user, Permissions.GERER_TACHES) is False

    def test_system_role_only(self) -> None:
        user = {"role": make_role({"gererTaches": True})}
        assert has_permission(user, Permissions.GERER_TACHES) is True
        assert has_permission(user, Permissions.GERER_SPRINTS) is False

    def test_with_project_role(self) -> None:
        user = {"role": make_role({"gererTaches": True, "voirBudget": True})}
        project_role = make_role({"gererTaches": True})
        assert has_permission(user, Permissions.GERER_TACHES, project_role) is True
        assert has_permission(user, Permissions.VOIR_BUDGET, project_role) is False

    def test_non_catalog_key_is_still_checked(self) -> None:
        user = {"role": make_role({"fakePermission": True})}
        assert has_permission(user, "fakePermission") is True
        assert has_permission(user, "anotherFakePermission") is False

    def test_with_user_model(self) -> None:
        user = User(id="u1", role=Role(permissions={"commenter": True}))
        assert has_permission(user, Permissions.COMMENTER) is True
        assert has_permission(User(id="u2"), Permissions.COMMENTER) is False

    def test_legacy_role_id_is_not_read(self) -> None:
        """The core reads only the canonical ``role`` field; use normalize_user for role_id."""
        user = {"role_id": make_role({"commenter": True})}
        assert has_permission(user, Permissions.COMMENTER) is False


class TestMergedPermissionQueries:
    """Tests for get_merged_permissions, menus and accessible data."""

    def test_roleless_user_gets_empty_set(self) -> None:
        merged = get_merged_permissions(None)
        assert isinstance(merged, EffectivePermissions)
        assert merged.to_dict() == {"permissions": {}, "visibleMenus": {}}

    def test_roleless_result_not_shared(self) -> None:
        """Changing one returned set must not grant later roleless checks."""
        merged = get_merged_permissions(None)
        assert merged is not get_merged_permissions(None)

        merged.permissions[Permissions.ADMIN_CONFIG] = True
        merged.visible_menus[Menus.ADMIN] = True

        assert has_permission(None, Permissions.ADMIN_CONFIG) is False
        assert has_permission({}, Permissions.ADMIN_CONFIG) is False
        assert get_visible_menus({}) == []

    def test_idempotent(self) -> None:
        user = {"role": make_role({"gererTaches": True}, {"kanban": True})}
        project_role = make_role({"gererTaches": True, "voirBudget": True}, {"kanban": False})
        assert get_merged_permissions(user, project_role) == get_merged_permissions(user, project_role)

    def test_is_menu_visible(self) -> None:
        user = {"role": make_role(menus={"kanban": True, "budget": "yes"})}
        assert is_menu_visible(user, Menus.KANBAN) is True
        assert is_menu_visible(user, Menus.BUDGET) is False
        assert is_menu_visible(user, Menus.KANBAN, make_role(menus={"kanban": False})) is False
        assert is_menu_visible(None, Menus.KANBAN) is False

    def test_visible_menus(self) -> None:
        user = {"role": make_role(menus={"projects": True, "kanban": True, "admin": False})}
        assert set(get_visible_menus(user)) == {"projects", "kanban"}

    def test_visible_menus_excludes_non_catalog_keys(self) -> None:
        user = {"role": make_role(menus={"projects": True, "secretMenu": True})}
        assert get_visible_menus(user) == ["projects"]

    def test_visible_menus_no_duplicates_and_catalog_order(self, super_admin_role) -> None:
        menus = get_visible_menus({"role": super_admin_role})
        assert menus == list(ALL_MENUS)

    def test_visible_menus_roleless(self) -> None:
        assert get_visible_menus({}) == []

    def test_menu_access_covers_catalog(self, guest_role) -> None:
        access = get_menu_access({"role": guest_role})
        assert set(access) == set(ALL_MENUS)
        assert [m for m, v in access.items() if v] == ["portfolio", "projects"]

    def test_accessible_data_mapping(self) -> None:
        assert len(ACCESSIBLE_DATA_FLAGS) == 19
        assert set(ACCESSIBLE_DATA_FLAGS.values()) <= set(ALL_PERMISSIONS)
        assert ACCESSIBLE_DATA_FLAGS["canViewBudget"] == "voirBudget"
        assert ACCESSIBLE_DATA_FLAGS["canViewAllProjects"] == "voirTousProjets"

    def test_accessible_data_roleless(self) -> None:
        data = get_accessible_data(None)
        assert set(data) == set(ACCESSIBLE_DATA_FLAGS)
        assert not any(data.values())

    def test_accessible_data_follows_merge(self) -> None:
        user = {"role": make_role({"voirBudget": True, "modifierBudget": True, "commenter": True})}
        project_role = make_role({"voirBudget": True, "commenter": True})
        data = get_accessible_data(user, project_role)
        assert data["canViewBudget"] is True
        assert data["canComment"] is True
        assert data["canModifyBudget"] is False
        assert data["canManageTasks"] is False


class TestScenarios:
    """End-to-end role scenarios."""

    def test_super_admin(self, super_admin_role) -> None:
        user = {"role": super_admin_role}
        assert len(get_visible_menus(user)) == 14
        assert all(has_permission(user, key) for key in ALL_PERMISSIONS)
        assert all(get_accessible_data(user).values())

    def test_guest(self, guest_role) -> None:
        user = {"role": guest_role}
        assert len(get_visible_menus(user)) == 2
        assert has_permission(user, Permissions.VOIR_SES_PROJETS) is True
        assert has_permission(user, Permissions.ADMIN_CONFIG) is False


class TestPermissionContext:
    """Tests for the memoized per-user context."""

    def test_matches_functional_api(self, guest_role) -> None:
        user = {"id": "u1", "role": guest_role}
        project_role = make_role({"voirSesProjets": True}, {"projects": True})
        ctx = PermissionContext(user, project_role)

        assert ctx.merged == get_merged_permissions(user, project_role)
        assert ctx.visible_menus() == get_visible_menus(user, project_role)
        assert ctx.menu_access() == get_menu_access(user, project_role)
        assert ctx.accessible_data() == get_accessible_data(user, project_role)
        for key in ALL_PERMISSIONS:
            assert ctx.has_permission(key) == has_permission(user, key, project_role)

    def test_roleless(self) -> None:
        ctx = PermissionContext(None)
        assert ctx.has_permission(Permissions.COMMENTER) is False
        assert ctx.is_menu_visible(Menus.PROJECTS) is False
        assert ctx.visible_menus() == []

    def test_repr(self, guest_role) -> None:
        ctx = PermissionContext({"id": "u1", "role": guest_role})
        assert "u1" in repr(ctx)
        assert "menus=2" in repr(ctx)
