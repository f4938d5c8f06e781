"""DAO Stats — pure aggregation of collection statistics and per-task global progress.

Invariants:
    - Every dossier lands in exactly one of en_cours / termines
    - URGENT dossiers counted in dao_arisque AND dao_en_cours
    - Empty collection -> all counts 0, progression_globale 0 (never raises)
    - Per-task aggregate only folds applicable tasks with a recorded progress;
      a task id with zero contributors is omitted, not reported as 0

Design Decisions:
    - Pure functions over already-fetched dossiers; caching and IO live in services/
    - Oracle passed in, so status policy stays outside the fold
"""

from collections.abc import Sequence

from dao_manager.core.domain_types import DaoStatus
from dao_manager.core.progress_math import rounded_average
from dao_manager.core.repository_protocols import StatusOracle
from dao_manager.schemas.dao import Dao, DaoStats, TaskGlobalProgress


def compute_dao_stats(daos: Sequence[Dao], oracle: StatusOracle) -> DaoStats:
    """Classify every dossier through the oracle and average their progress. Pure, no IO."""
    en_cours = termines = arisque = 0
    total_progress = 0

    for dao in daos:
        progress = oracle.progress(dao.tasks)
        status = oracle.status(dao.date_depot, progress)
        total_progress += progress

        if status == DaoStatus.COMPLETED:
            termines += 1
        elif status == DaoStatus.URGENT:
            arisque += 1
            en_cours += 1
        else:
            en_cours += 1

    return DaoStats(
        total_daos=len(daos),
        dao_en_cours=en_cours,
        dao_termines=termines,
        dao_arisque=arisque,
        progression_globale=rounded_average(total_progress, len(daos)),
    )


def compute_task_global_progress(daos: Sequence[Dao]) -> list[TaskGlobalProgress]:
    """Average each template task's progress across the dossiers where it counts."""
    totals: dict[int, list] = {}  # task_id -> [sum, count, name]

    for dao in daos:
        for task in dao.tasks:
            if not task.is_applicable or task.progress is None:
                continue
            entry = totals.setdefault(task.id, [0, 0, task.name])
            entry[0] += task.progress
            entry[1] += 1

    return [
        TaskGlobalProgress(
            task_id=task_id,
            task_name=name,
            global_progress=rounded_average(total, count),
            applicable_daos_count=count,
        )
        for task_id, (total, count, name) in sorted(totals.items())
    ]
