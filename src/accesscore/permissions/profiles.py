"""Predefined system and project role profiles.

Provides:
- ``SYSTEM_ROLE_PROFILES`` - seed system roles (Admin, Project_Manager, Team_Member).
- ``PROJECT_ROLE_PROFILES`` - the eight roles created for every new project.
- ``build_role_maps()`` - expand granted keys into full boolean maps.

Profiles list only granted keys; everything else in the catalog is
explicitly ``False`` once expanded.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from ..models import ProjectRole, Role
from .constants import ALL_MENUS, ALL_PERMISSIONS, Menus
from .constants import Permissions as P


@dataclass(frozen=True)
class RoleProfile:
    """Granted permission and menu keys of a predefined role."""

    name: str
    description: str
    permissions: frozenset[str]
    menus: frozenset[str]


def build_role_maps(
    permissions: Iterable[str],
    menus: Iterable[str],
) -> tuple[dict[str, bool], dict[str, bool]]:
    """Expand granted keys into complete catalog maps.

    Returns:
        ``(permissions, visible_menus)`` with every catalog key present.
    """
    granted_perms = set(permissions)
    granted_menus = set(menus)
    return (
        {key: key in granted_perms for key in ALL_PERMISSIONS},
        {key: key in granted_menus for key in ALL_MENUS},
    )


def _profile(name: str, description: str, permissions: Iterable[str], menus: Iterable[str]) -> RoleProfile:
    return RoleProfile(name, description, frozenset(permissions), frozenset(menus))


_ALL_BUT_ADMIN_MENU = tuple(m for m in ALL_MENUS if m != Menus.ADMIN)

# ── System roles ────────────────────────────────────────

SYSTEM_ROLE_PROFILES: dict[str, RoleProfile] = {
    "Admin": _profile(
        "Admin",
        "Accès complet + configuration système",
        ALL_PERMISSIONS,
        ALL_MENUS,
    ),
    "Project_Manager": _profile(
        "Project_Manager",
        "Gestion projets assignés + équipes + budget",
        (
            P.VOIR_SES_PROJETS, P.CREER_PROJET, P.MODIFIER_CHARTE_PROJET,
            P.GERER_MEMBRES_PROJET, P.CHANGER_ROLE_MEMBRE, P.GERER_TACHES,
            P.DEPLACER_TACHES, P.PRIORISER_BACKLOG, P.GERER_SPRINTS,
            P.MODIFIER_BUDGET, P.VOIR_BUDGET, P.VOIR_TEMPS_PASSES, P.SAISIR_TEMPS,
            P.GERER_FICHIERS, P.COMMENTER, P.RECEVOIR_NOTIFICATIONS, P.GENERER_RAPPORTS,
        ),
        _ALL_BUT_ADMIN_MENU,
    ),
    "Team_Member": _profile(
        "Team_Member",
        "Tâches personnelles + time tracking",
        (
            P.VOIR_SES_PROJETS, P.DEPLACER_TACHES, P.SAISIR_TEMPS,
            P.GERER_FICHIERS, P.COMMENTER, P.RECEVOIR_NOTIFICATIONS,
        ),
        (
            Menus.PROJECTS, Menus.KANBAN, Menus.TASKS, Menus.FILES,
            Menus.COMMENTS, Menus.TIMESHEETS, Menus.NOTIFICATIONS,
        ),
    ),
}

# ── Project roles ───────────────────────────────────────
# None of these grant voirTousProjets, creerProjet, supprimerProjet,
# gererUtilisateurs or adminConfig: those are system-level concerns.

PROJECT_ROLE_PROFILES: dict[str, RoleProfile] = {
    "Chef de Projet": _profile(
        "Chef de Projet",
        "Gestion complète du projet, équipe et budget",
        (
            P.VOIR_SES_PROJETS, P.MODIFIER_CHARTE_PROJET, P.GERER_MEMBRES_PROJET,
            P.CHANGER_ROLE_MEMBRE, P.GERER_TACHES, P.DEPLACER_TACHES,
            P.PRIORISER_BACKLOG, P.GERER_SPRINTS, P.MODIFIER_BUDGET, P.VOIR_BUDGET,
            P.VOIR_TEMPS_PASSES, P.SAISIR_TEMPS, P.GERER_FICHIERS, P.COMMENTER,
            P.RECEVOIR_NOTIFICATIONS, P.GENERER_RAPPORTS,
        ),
        _ALL_BUT_ADMIN_MENU,
    ),
    "Responsable Équipe": _profile(
        "Responsable Équipe",
        "Gestion équipe, tâches et reporting",
        (
            P.VOIR_SES_PROJETS, P.GERER_TACHES, P.DEPLACER_TACHES, P.PRIORISER_BACKLOG,
            P.VOIR_BUDGET, P.VOIR_TEMPS_PASSES, P.SAISIR_TEMPS, P.GERER_FICHIERS,
            P.COMMENTER, P.RECEVOIR_NOTIFICATIONS, P.GENERER_RAPPORTS,
        ),
        _ALL_BUT_ADMIN_MENU,
    ),
    "Product Owner": _profile(
        "Product Owner",
        "Backlog, prioritisation et validation livrables",
        (
            P.VOIR_SES_PROJETS, P.GERER_TACHES, P.DEPLACER_TACHES, P.PRIORISER_BACKLOG,
            P.VOIR_BUDGET, P.VALIDER_LIVRABLE, P.GERER_FICHIERS, P.COMMENTER,
            P.RECEVOIR_NOTIFICATIONS,
        ),
        (
            Menus.PORTFOLIO, Menus.PROJECTS, Menus.KANBAN, Menus.BACKLOG, Menus.ROADMAP,
            Menus.TASKS, Menus.FILES, Menus.COMMENTS, Menus.NOTIFICATIONS,
        ),
    ),
    "Membre Équipe": _profile(
        "Membre Équipe",
        "Tâches personnelles, time tracking et commentaires",
        (
            P.VOIR_SES_PROJETS, P.DEPLACER_TACHES, P.SAISIR_TEMPS, P.GERER_FICHIERS,
            P.COMMENTER, P.RECEVOIR_NOTIFICATIONS,
        ),
        (
            Menus.PORTFOLIO, Menus.PROJECTS, Menus.KANBAN, Menus.TASKS, Menus.FILES,
            Menus.COMMENTS, Menus.TIMESHEETS, Menus.NOTIFICATIONS,
        ),
    ),
    "Partie Prenante": _profile(
        "Partie Prenante",
        "Lecture seule - suivi et commentaires",
        (P.VOIR_SES_PROJETS, P.COMMENTER, P.RECEVOIR_NOTIFICATIONS),
        (Menus.PORTFOLIO, Menus.PROJECTS, Menus.KANBAN, Menus.COMMENTS, Menus.NOTIFICATIONS),
    ),
    "Consultant": _profile(
        "Consultant",
        "Accès spécialisé à domaines spécifiques",
        (
            P.VOIR_SES_PROJETS, P.GERER_TACHES, P.DEPLACER_TACHES, P.VOIR_BUDGET,
            P.VOIR_TEMPS_PASSES, P.SAISIR_TEMPS, P.GERER_FICHIERS, P.COMMENTER,
            P.RECEVOIR_NOTIFICATIONS,
        ),
        (
            Menus.PORTFOLIO, Menus.PROJECTS, Menus.KANBAN, Menus.BACKLOG, Menus.SPRINTS,
            Menus.TASKS, Menus.FILES, Menus.COMMENTS, Menus.TIMESHEETS, Menus.BUDGET,
            Menus.NOTIFICATIONS,
        ),
    ),
    "Responsable Fonctionnel": _profile(
        "Responsable Fonctionnel",
        "Rôle projet intermédiaire - Gestion spécifique avec droits modérés",
        (
            P.VOIR_SES_PROJETS, P.MODIFIER_CHARTE_PROJET, P.GERER_TACHES,
            P.DEPLACER_TACHES, P.PRIORISER_BACKLOG, P.GERER_SPRINTS, P.VOIR_BUDGET,
            P.VOIR_TEMPS_PASSES, P.SAISIR_TEMPS, P.GERER_FICHIERS, P.COMMENTER,
            P.RECEVOIR_NOTIFICATIONS, P.GENERER_RAPPORTS,
        ),
        _ALL_BUT_ADMIN_MENU,
    ),
    "Auditeur": _profile(
        "Auditeur",
        "Accès lecture complète pour audits et vérifications",
        (
            P.VOIR_SES_PROJETS, P.VOIR_BUDGET, P.VOIR_TEMPS_PASSES, P.GERER_FICHIERS,
            P.COMMENTER, P.RECEVOIR_NOTIFICATIONS, P.GENERER_RAPPORTS, P.VOIR_AUDIT,
        ),
        tuple(m for m in _ALL_BUT_ADMIN_MENU if m != Menus.PORTFOLIO),
    ),
}


def get_system_role_profile(name: str) -> Role:
    """Build the predefined system role ``name``.

    Raises:
        KeyError: If no such profile exists.
    """
    profile = SYSTEM_ROLE_PROFILES[name]
    permissions, menus = build_role_maps(profile.permissions, profile.menus)
    return Role(
        name=profile.name,
        description=profile.description,
        is_predefined=True,
        permissions=permissions,
        visible_menus=menus,
    )


def get_project_role_profile(name: str, project_id: str | None = None) -> ProjectRole:
    """Build the predefined project role ``name``, optionally bound to ``project_id``.

    Raises:
        KeyError: If no such profile exists.
    """
    profile = PROJECT_ROLE_PROFILES[name]
    permissions, menus = build_role_maps(profile.permissions, profile.menus)
    return ProjectRole(
        name=profile.name,
        description=profile.description,
        is_predefined=True,
        project_id=project_id,
        permissions=permissions,
        visible_menus=menus,
    )


def initialize_project_roles(project_id: str) -> list[ProjectRole]:
    """All predefined project roles for a new project, in profile order."""
    return [get_project_role_profile(name, project_id) for name in PROJECT_ROLE_PROFILES]


__all__ = [
    "PROJECT_ROLE_PROFILES",
    "SYSTEM_ROLE_PROFILES",
    "RoleProfile",
    "build_role_maps",
    "get_project_role_profile",
    "get_system_role_profile",
    "initialize_project_roles",
]
