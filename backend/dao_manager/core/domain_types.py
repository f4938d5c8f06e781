"""Domain Types — enums that replace bare status and role strings across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


class DaoStatus(str, Enum):
    """Oracle output for one dossier."""
    COMPLETED = "completed"
    URGENT = "urgent"
    SAFE = "safe"
    DEFAULT = "default"


class StatusFilter(str, Enum):
    """Status categories accepted by the filter engine."""
    EN_COURS = "en_cours"
    TERMINE = "termine"
    A_RISQUE = "a_risque"


class TeamRole(str, Enum):
    """Role of a team member inside one dossier."""
    CHEF_EQUIPE = "chef_equipe"
    MEMBRE_EQUIPE = "membre_equipe"
