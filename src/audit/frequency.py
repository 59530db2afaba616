"""Runs-per-day estimation.

Observed history wins. Without it the declared schedule gives a rough
figure; cron support is intentionally shallow (``*/N`` minute steps and
wildcard hours only), everything else counts as once a day.
"""

import logging
from typing import Literal, Optional

from src.constants import HOURS_PER_DAY, MINUTES_PER_DAY, MINUTES_PER_HOUR, MS_PER_DAY
from src.models import CronSchedule, IntervalSchedule, Schedule

logger = logging.getLogger(__name__)

FrequencySource = Literal["history", "schedule", "default"]

DEFAULT_RUNS_PER_DAY = 1.0


def runs_per_day_from_history(run_count: int, window_hours: float) -> float:
    return run_count * (HOURS_PER_DAY / window_hours)


def runs_per_day_from_cron(expr: str) -> float:
    """Estimate daily runs from the minute and hour fields of ``expr``."""
    parts = expr.split()
    if not parts:
        return DEFAULT_RUNS_PER_DAY
    minute = parts[0]
    hour = parts[1] if len(parts) > 1 else None

    if minute.startswith("*/"):
        try:
            step = int(minute[2:])
        except ValueError:
            logger.debug(f"Unparsable cron step in '{expr}'")
            return DEFAULT_RUNS_PER_DAY
        if step <= 0:
            return DEFAULT_RUNS_PER_DAY
        if hour == "*":
            return MINUTES_PER_DAY / step
        return MINUTES_PER_HOUR / step
    if hour == "*":
        return float(HOURS_PER_DAY)
    return DEFAULT_RUNS_PER_DAY


def runs_per_day_from_schedule(schedule: Optional[Schedule]) -> Optional[float]:
    """Schedule-based estimate, or None when there is no schedule."""
    if schedule is None:
        return None
    if isinstance(schedule, IntervalSchedule):
        if not schedule.every_ms or schedule.every_ms <= 0:
            return DEFAULT_RUNS_PER_DAY
        return MS_PER_DAY / schedule.every_ms
    if isinstance(schedule, CronSchedule):
        return runs_per_day_from_cron(schedule.expr)
    # One-shot
    return DEFAULT_RUNS_PER_DAY


def resolve_runs_per_day(
    run_count: int,
    window_hours: float,
    schedule: Optional[Schedule],
) -> tuple[float, FrequencySource]:
    """Pick the best available frequency and report where it came from."""
    if run_count > 0:
        return runs_per_day_from_history(run_count, window_hours), "history"
    estimate = runs_per_day_from_schedule(schedule)
    if estimate is not None:
        return estimate, "schedule"
    return DEFAULT_RUNS_PER_DAY, "default"
