"""DAO Schemas — Pydantic models for dossiers, tasks, team members and derived results.

Invariants:
    - DaoTask.progress is None (not started) or an int in [0, 100]; out-of-range input is clamped
    - DaoCreate carries no tasks: the service always injects the default template
    - Serialized JSON uses camelCase aliases (numeroListe, dateDepot, totalDaos, ...)

Design Decisions:
    - alias_generator=to_camel + populate_by_name: Python code stays snake_case,
      clients keep the camelCase wire format
    - Clamping in a before-validator so every construction path (create, update, model_validate) normalizes
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from dao_manager.core.domain_types import DaoStatus, StatusFilter, TeamRole
from dao_manager.core.progress_math import clamp_progress, round_half_up


class CamelModel(BaseModel):
    """Base for every schema exchanged with clients."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _non_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty or whitespace")
    return v


# --- Records ------------------------------------------------------------------

class TeamMember(CamelModel):
    id: str
    name: str
    role: TeamRole = TeamRole.MEMBRE_EQUIPE
    email: str = ""


class DaoTask(CamelModel):
    """One template task inside a dossier."""
    id: int
    name: str
    is_applicable: bool = True
    progress: int | None = None
    assigned_to: str | None = None
    last_updated_by: str | None = None
    last_updated_at: datetime | None = None

    @field_validator("progress", mode="before")
    @classmethod
    def clamp(cls, v):
        if v is None:
            return None
        try:
            value = float(v)
        except (TypeError, ValueError):
            raise ValueError("progress must be a number") from None
        return round_half_up(clamp_progress(value))


class Dao(CamelModel):
    """A procurement dossier as returned by the store."""
    id: str
    numero_liste: str
    objet_dossier: str
    reference: str
    autorite_contractante: str
    date_depot: date
    equipe: list[TeamMember] = Field(default_factory=list)
    tasks: list[DaoTask] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DaoCreate(CamelModel):
    """Dossier creation payload — identifying fields and initial team only."""
    numero_liste: str = Field(min_length=1, max_length=100)
    objet_dossier: str = Field(min_length=1)
    reference: str = Field(min_length=1, max_length=100)
    autorite_contractante: str = Field(min_length=1)
    date_depot: date
    equipe: list[TeamMember] = Field(default_factory=list)

    @field_validator("numero_liste", "objet_dossier", "reference", "autorite_contractante")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _non_blank(v)


class DaoUpdate(CamelModel):
    """Partial dossier update — only fields explicitly set are written."""
    numero_liste: str | None = Field(None, max_length=100)
    objet_dossier: str | None = None
    reference: str | None = Field(None, max_length=100)
    autorite_contractante: str | None = None
    date_depot: date | None = None
    equipe: list[TeamMember] | None = None
    tasks: list[DaoTask] | None = None

    @field_validator("numero_liste", "objet_dossier", "reference", "autorite_contractante")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return None if v is None else _non_blank(v)


class CloneOverrides(CamelModel):
    """Identifying fields a clone may override; empty values fall back to the source."""
    numero_liste: str | None = None
    objet_dossier: str | None = None
    reference: str | None = None
    autorite_contractante: str | None = None
    date_depot: date | None = None


# --- Mutation payloads --------------------------------------------------------

class TaskUpdate(CamelModel):
    name: str | None = None
    is_applicable: bool | None = None
    progress: float | None = None
    assigned_to: str | None = None
    last_updated_by: str | None = None


class TaskProgressUpdate(CamelModel):
    progress: float
    user_id: str | None = None


class TaskAssignment(CamelModel):
    member_id: str
    user_id: str | None = None


class TaskApplicability(CamelModel):
    is_applicable: bool
    user_id: str | None = None


class TeamMemberCreate(CamelModel):
    """New member — the identifier is generated by the service, never supplied."""
    name: str = Field(min_length=1, max_length=200)
    role: TeamRole = TeamRole.MEMBRE_EQUIPE
    email: str = ""


class TeamMemberUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    role: TeamRole | None = None
    email: str | None = None


# --- Queries ------------------------------------------------------------------

class DateRange(CamelModel):
    start: date
    end: date


class DaoFilters(CamelModel):
    """Filter criteria — every field optional, combined with logical AND."""
    date_range: DateRange | None = None
    autorite_contractante: str | None = None
    statut: StatusFilter | None = None
    equipe: str | None = None


# --- Derived results ----------------------------------------------------------

class DaoStats(CamelModel):
    total_daos: int = 0
    dao_en_cours: int = 0
    dao_termines: int = 0
    dao_arisque: int = 0
    progression_globale: int = 0


class TaskGlobalProgress(CamelModel):
    task_id: int
    task_name: str
    global_progress: int
    applicable_daos_count: int


class TaskDistributionEntry(CamelModel):
    member: TeamMember
    task_count: int = 0


class DaoSummary(CamelModel):
    """Derived fields of one dossier, recomputed on every read."""
    dao_id: str
    status: DaoStatus
    progress: int
    days_until_deadline: int
    is_overdue: bool
