"""Default Task Template — the fixed procurement task list every dossier starts from.

Invariants:
    - Task ids are 1..N, stable, and never reused for another task
    - build_default_tasks() returns fresh objects: progress None, applicable, unassigned
    - A dossier's task list is always the full template, never a subset
"""

from dao_manager.schemas.dao import DaoTask

DEFAULT_TASK_NAMES: tuple[str, ...] = (
    "Résumé sommaire DAO et création du drive",
    "Demande de caution et garanties",
    "Identification et renseignement des profils dans le drive",
    "Identification et renseignement des ABE dans le drive",
    "Légalisation des ABE, CNI et RCCM",
    "Indication directive de remplissage des pièces administratives",
    "Elaboration de la méthodologie",
    "Planification prévisionnelle",
    "Identification des références précises des équipements et matériels",
    "Demande de cotation",
    "Elaboration du squelette des offres",
    "Rédaction du contenu des OF et OT",
    "Contrôle et validation des offres",
    "Impression et présentation des offres",
    "Dépôt des offres et clôture",
)

DEFAULT_TASK_IDS: frozenset[int] = frozenset(range(1, len(DEFAULT_TASK_NAMES) + 1))


def build_default_tasks() -> list[DaoTask]:
    """Fresh template task list for a new or cloned dossier."""
    return [
        DaoTask(id=i, name=name, is_applicable=True, progress=None)
        for i, name in enumerate(DEFAULT_TASK_NAMES, start=1)
    ]
