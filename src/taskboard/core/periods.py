"""Time-of-day periods for today's tasks."""

from datetime import datetime

from .tasks import TimeOfDay

PERIODS: list[TimeOfDay] = [TimeOfDay.MORNING, TimeOfDay.AFTERNOON, TimeOfDay.EVENING]

# (start hour, end hour)
PERIOD_BOUNDARIES: dict[TimeOfDay, tuple[int, int]] = {
    TimeOfDay.MORNING: (0, 12),
    TimeOfDay.AFTERNOON: (12, 18),
    TimeOfDay.EVENING: (18, 22),
}

PERIOD_LABELS: dict[TimeOfDay, str] = {
    TimeOfDay.MORNING: "Morning",
    TimeOfDay.AFTERNOON: "Afternoon",
    TimeOfDay.EVENING: "Evening",
}


def _minute_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def period_minutes_left(period: TimeOfDay, now: datetime) -> int:
    """
    Wall-clock minutes remaining in a period.

    Full duration before the period starts, zero once it has ended.
    """
    start, end = PERIOD_BOUNDARIES[period]
    current = _minute_of_day(now)

    if current >= end * 60:
        return 0
    if current < start * 60:
        return (end - start) * 60
    return end * 60 - current


def is_period_past(period: TimeOfDay, now: datetime) -> bool:
    """Whether the period has fully elapsed."""
    _, end = PERIOD_BOUNDARIES[period]
    return _minute_of_day(now) >= end * 60


def get_current_period(now: datetime) -> TimeOfDay | None:
    """Active period, or None after the evening ends."""
    for period in PERIODS:
        if not is_period_past(period, now):
            return period
    return None
