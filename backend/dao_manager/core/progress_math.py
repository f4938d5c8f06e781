"""Progress Math — clamping and rounding shared by the model, the oracle and aggregations.

Invariants:
    - clamp_progress(v) is always within [PROGRESS_MIN, PROGRESS_MAX]
    - round_half_up(x) rounds .5 away from zero for positives (2.5 -> 3), unlike round()
"""

import math

PROGRESS_MIN = 0
PROGRESS_MAX = 100


def clamp_progress(value: float) -> float:
    """Clamp a progress value into [0, 100]. Out-of-range input is corrected, never rejected."""
    return max(PROGRESS_MIN, min(PROGRESS_MAX, value))


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def rounded_average(total: float, count: int) -> int:
    """Rounded mean; 0 when there is nothing to average."""
    if count <= 0:
        return 0
    return round_half_up(total / count)
