"""DAO Mutations — pure transforms of one dossier's task list and team list.

Invariants:
    - Every transform returns NEW lists; the input Dao is never mutated
    - Task updates are shallow field replacements validated through DaoTask
      (progress clamped), task id and list order preserved
    - Unknown task / member ids raise TaskNotFoundError / TeamMemberNotFoundError
      before anything is produced (no partial application)
    - Member removal returns the team AND the task list with every assignment to
      that member cleared; the caller writes both in one update. A whole-team
      replacement goes through unassign_departed for the same guarantee
    - Member ids are generated here, unique within the dossier

Design Decisions:
    - "now" and the id factory are parameters: deterministic in tests
    - Toggling applicability leaves progress and assignee untouched (dormant, restorable)
"""

import uuid
from collections.abc import Callable, Collection
from datetime import datetime
from typing import Any

from dao_manager.core.errors import (
    InvalidTaskListError, TaskNotFoundError, TeamMemberNotFoundError,
)
from dao_manager.core.progress_math import clamp_progress
from dao_manager.schemas.dao import (
    CloneOverrides, Dao, DaoTask, TeamMember, TeamMemberCreate,
)

COPY_SUFFIX = "_COPIE"
COPY_TITLE_SUFFIX = " (Copie)"


# ─── Tasks ───────────────────────────────────────────────────────

def find_task_index(dao: Dao, task_id: int) -> int:
    for i, task in enumerate(dao.tasks):
        if task.id == task_id:
            return i
    raise TaskNotFoundError(dao.id, task_id)


def apply_task_update(
    dao: Dao, task_id: int, updates: dict[str, Any], now: datetime,
) -> list[DaoTask]:
    """Replace one task with its updated copy and return the full task list."""
    index = find_task_index(dao, task_id)
    current = dao.tasks[index]
    merged = {**current.model_dump(), **updates}
    merged["id"] = current.id
    merged["last_updated_at"] = now

    tasks = list(dao.tasks)
    tasks[index] = DaoTask.model_validate(merged)
    return tasks


def check_task_ids_unchanged(dao: Dao, tasks: list[DaoTask]) -> None:
    """A replacement task list must carry exactly the ids the dossier already has."""
    current = {t.id for t in dao.tasks}
    proposed = [t.id for t in tasks]
    if len(proposed) != len(set(proposed)) or set(proposed) != current:
        raise InvalidTaskListError(
            dao.id,
            missing=sorted(current - set(proposed)),
            unexpected=sorted(set(proposed) - current),
        )


def progress_update(progress: float, user_id: str | None = None) -> dict[str, Any]:
    return {"progress": clamp_progress(progress), "last_updated_by": user_id}


def assignment_update(member_id: str, user_id: str | None = None) -> dict[str, Any]:
    # Membership is not checked here; remove_team_member keeps references consistent.
    return {"assigned_to": member_id, "last_updated_by": user_id}


def applicability_update(is_applicable: bool, user_id: str | None = None) -> dict[str, Any]:
    return {"is_applicable": is_applicable, "last_updated_by": user_id}


# ─── Team ────────────────────────────────────────────────────────

def _random_member_id() -> str:
    return f"member_{uuid.uuid4().hex[:12]}"


def generate_member_id(
    existing_ids: Collection[str],
    factory: Callable[[], str] = _random_member_id,
) -> str:
    """Draw ids from *factory* until one is not already used in the dossier."""
    candidate = factory()
    while candidate in existing_ids:
        candidate = factory()
    return candidate


def add_team_member(
    dao: Dao,
    payload: TeamMemberCreate,
    id_factory: Callable[[], str] = _random_member_id,
) -> tuple[list[TeamMember], TeamMember]:
    existing = {m.id for m in dao.equipe}
    member = TeamMember(
        id=generate_member_id(existing, id_factory),
        name=payload.name,
        role=payload.role,
        email=payload.email,
    )
    return [*dao.equipe, member], member


def find_member_index(dao: Dao, member_id: str) -> int:
    for i, member in enumerate(dao.equipe):
        if member.id == member_id:
            return i
    raise TeamMemberNotFoundError(dao.id, member_id)


def update_team_member(
    dao: Dao, member_id: str, updates: dict[str, Any],
) -> list[TeamMember]:
    index = find_member_index(dao, member_id)
    current = dao.equipe[index]
    merged = {**current.model_dump(), **updates, "id": current.id}
    team = list(dao.equipe)
    team[index] = TeamMember.model_validate(merged)
    return team


def remove_team_member(
    dao: Dao, member_id: str,
) -> tuple[list[TeamMember], list[DaoTask]]:
    """Drop the member and clear every task assignment that pointed at it."""
    find_member_index(dao, member_id)
    team = [m for m in dao.equipe if m.id != member_id]
    tasks = [
        t.model_copy(update={"assigned_to": None}) if t.assigned_to == member_id else t
        for t in dao.tasks
    ]
    return team, tasks


def unassign_departed(
    before: list[TeamMember], team: list[TeamMember], tasks: list[DaoTask],
) -> list[DaoTask]:
    """Clear assigned_to on tasks held by members of *before* that are absent from *team*."""
    departed = {m.id for m in before} - {m.id for m in team}
    return [
        t.model_copy(update={"assigned_to": None}) if t.assigned_to in departed else t
        for t in tasks
    ]


# ─── Clone ───────────────────────────────────────────────────────

def build_clone_fields(source: Dao, overrides: CloneOverrides) -> dict[str, Any]:
    """Identifying fields and team of a clone; tasks are NOT included (fresh template)."""
    return {
        "numero_liste": overrides.numero_liste or f"{source.numero_liste}{COPY_SUFFIX}",
        "objet_dossier": overrides.objet_dossier or f"{source.objet_dossier}{COPY_TITLE_SUFFIX}",
        "reference": overrides.reference or f"{source.reference}{COPY_SUFFIX}",
        "autorite_contractante": (
            overrides.autorite_contractante or source.autorite_contractante
        ),
        "date_depot": overrides.date_depot or source.date_depot,
        "equipe": [m.model_copy() for m in source.equipe],
    }
