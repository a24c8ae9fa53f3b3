"""Permission and menu catalog for accesscore.

Provides:
- ``Permissions`` - the 23 atomic permission keys.
- ``Menus`` - the 14 menu visibility keys.
- ``ALL_PERMISSIONS`` / ``ALL_MENUS`` - ordered catalogs for iteration.
"""

from __future__ import annotations


class Permissions:
    """Canonical permission keys.

    Keys are stored verbatim in role documents (camelCase, French),
    so the values must never change::

        has_permission(user, Permissions.VOIR_BUDGET)
    """

    # ── Projects ────────────────────────────────────────
    VOIR_TOUS_PROJETS = "voirTousProjets"
    VOIR_SES_PROJETS = "voirSesProjets"
    CREER_PROJET = "creerProjet"
    SUPPRIMER_PROJET = "supprimerProjet"
    MODIFIER_CHARTE_PROJET = "modifierCharteProjet"

    # ── Members ─────────────────────────────────────────
    GERER_MEMBRES_PROJET = "gererMembresProjet"
    CHANGER_ROLE_MEMBRE = "changerRoleMembre"

    # ── Tasks & Agile ───────────────────────────────────
    GERER_TACHES = "gererTaches"
    DEPLACER_TACHES = "deplacerTaches"
    PRIORISER_BACKLOG = "prioriserBacklog"
    GERER_SPRINTS = "gererSprints"

    # ── Budget & Time ───────────────────────────────────
    MODIFIER_BUDGET = "modifierBudget"
    VOIR_BUDGET = "voirBudget"
    VOIR_TEMPS_PASSES = "voirTempsPasses"
    SAISIR_TEMPS = "saisirTemps"

    # ── Deliverables & Collaboration ────────────────────
    VALIDER_LIVRABLE = "validerLivrable"
    GERER_FICHIERS = "gererFichiers"
    COMMENTER = "commenter"
    RECEVOIR_NOTIFICATIONS = "recevoirNotifications"

    # ── Reporting & Administration ──────────────────────
    GENERER_RAPPORTS = "genererRapports"
    VOIR_AUDIT = "voirAudit"
    GERER_UTILISATEURS = "gererUtilisateurs"
    ADMIN_CONFIG = "adminConfig"  # Bypasses project membership checks


class Menus:
    """Canonical menu visibility keys."""

    PORTFOLIO = "portfolio"
    PROJECTS = "projects"
    KANBAN = "kanban"
    BACKLOG = "backlog"
    SPRINTS = "sprints"
    ROADMAP = "roadmap"
    TASKS = "tasks"
    FILES = "files"
    COMMENTS = "comments"
    TIMESHEETS = "timesheets"
    BUDGET = "budget"
    REPORTS = "reports"
    NOTIFICATIONS = "notifications"
    ADMIN = "admin"


ALL_PERMISSIONS: tuple[str, ...] = (
    Permissions.VOIR_TOUS_PROJETS,
    Permissions.VOIR_SES_PROJETS,
    Permissions.CREER_PROJET,
    Permissions.SUPPRIMER_PROJET,
    Permissions.MODIFIER_CHARTE_PROJET,
    Permissions.GERER_MEMBRES_PROJET,
    Permissions.CHANGER_ROLE_MEMBRE,
    Permissions.GERER_TACHES,
    Permissions.DEPLACER_TACHES,
    Permissions.PRIORISER_BACKLOG,
    Permissions.GERER_SPRINTS,
    Permissions.MODIFIER_BUDGET,
    Permissions.VOIR_BUDGET,
    Permissions.VOIR_TEMPS_PASSES,
    Permissions.SAISIR_TEMPS,
    Permissions.VALIDER_LIVRABLE,
    Permissions.GERER_FICHIERS,
    Permissions.COMMENTER,
    Permissions.RECEVOIR_NOTIFICATIONS,
    Permissions.GENERER_RAPPORTS,
    Permissions.VOIR_AUDIT,
    Permissions.GERER_UTILISATEURS,
    Permissions.ADMIN_CONFIG,
)

ALL_MENUS: tuple[str, ...] = (
    Menus.PORTFOLIO,
    Menus.PROJECTS,
    Menus.KANBAN,
    Menus.BACKLOG,
    Menus.SPRINTS,
    Menus.ROADMAP,
    Menus.TASKS,
    Menus.FILES,
    Menus.COMMENTS,
    Menus.TIMESHEETS,
    Menus.BUDGET,
    Menus.REPORTS,
    Menus.NOTIFICATIONS,
    Menus.ADMIN,
)

PERMISSION_SET: frozenset[str] = frozenset(ALL_PERMISSIONS)
MENU_SET: frozenset[str] = frozenset(ALL_MENUS)


__all__ = [
    "ALL_MENUS",
    "ALL_PERMISSIONS",
    "MENU_SET",
    "PERMISSION_SET",
    "Menus",
    "Permissions",
]
