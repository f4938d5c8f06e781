"""DAO Accessors — read-only derived fields of a single dossier.

Invariants:
    - Nothing here is persisted; every value is recomputed from tasks/team and "today"
    - days_until_deadline counts whole days: deadline today -> 0, yesterday -> -1
    - Task distribution lists every current member (count 0 included) and ignores
      assignments to ids that are no longer in the team
"""

from datetime import date

from dao_manager.core.progress_math import PROGRESS_MAX
from dao_manager.schemas.dao import Dao, DaoTask, TaskDistributionEntry


def get_tasks_assigned_to(dao: Dao, member_id: str) -> list[DaoTask]:
    return [t for t in dao.tasks if t.assigned_to == member_id]


def get_days_until_deadline(dao: Dao, today: date | None = None) -> int:
    today = today or date.today()
    return (dao.date_depot - today).days


def is_dao_overdue(dao: Dao, today: date | None = None) -> bool:
    return get_days_until_deadline(dao, today) < 0


def get_non_applicable_tasks(dao: Dao) -> list[DaoTask]:
    return [t for t in dao.tasks if not t.is_applicable]


def get_in_progress_tasks(dao: Dao) -> list[DaoTask]:
    """Applicable tasks below 100% (not-started tasks included)."""
    return [
        t for t in dao.tasks
        if t.is_applicable and (t.progress or 0) < PROGRESS_MAX
    ]


def get_completed_tasks(dao: Dao) -> list[DaoTask]:
    return [
        t for t in dao.tasks
        if t.is_applicable and t.progress == PROGRESS_MAX
    ]


def get_task_distribution(dao: Dao) -> dict[str, TaskDistributionEntry]:
    """Number of tasks assigned to each team member, keyed by member id."""
    distribution = {
        member.id: TaskDistributionEntry(member=member, task_count=0)
        for member in dao.equipe
    }
    for task in dao.tasks:
        if task.assigned_to and task.assigned_to in distribution:
            distribution[task.assigned_to].task_count += 1
    return distribution


def export_dao_to_json(dao: Dao) -> str:
    return dao.model_dump_json(by_alias=True, indent=2)
