"""Deadline Status Oracle — default progress/status policy for a dossier.

Invariants:
    - progress() only looks at applicable tasks; None progress counts as 0
    - progress() is 0 when no task is applicable (never divides by zero)
    - status() is COMPLETED as soon as progress reaches 100, whatever the deadline
    - Day thresholds are constructor arguments (policy from Settings), not constants

Design Decisions:
    - Clock injected as a callable returning a date: tests pin "today" without patching
"""

from collections.abc import Callable, Sequence
from datetime import date

from dao_manager.core.domain_types import DaoStatus
from dao_manager.core.progress_math import PROGRESS_MAX, rounded_average
from dao_manager.schemas.dao import DaoTask


class DeadlineStatusOracle:
    """Maps a task list to a percentage and (deadline, percentage) to a status."""

    def __init__(
        self,
        urgent_within_days: int = 3,
        safe_from_days: int = 5,
        clock: Callable[[], date] = date.today,
    ):
        if safe_from_days < urgent_within_days:
            raise ValueError("safe_from_days must be >= urgent_within_days")
        self.urgent_within_days = urgent_within_days
        self.safe_from_days = safe_from_days
        self._clock = clock

    def progress(self, tasks: Sequence[DaoTask]) -> int:
        applicable = [t for t in tasks if t.is_applicable]
        total = sum(t.progress or 0 for t in applicable)
        return rounded_average(total, len(applicable))

    def status(self, date_depot: date, progress: int) -> DaoStatus:
        if progress >= PROGRESS_MAX:
            return DaoStatus.COMPLETED
        days_left = (date_depot - self._clock()).days
        if days_left < self.urgent_within_days:
            return DaoStatus.URGENT
        if days_left >= self.safe_from_days:
            return DaoStatus.SAFE
        return DaoStatus.DEFAULT
