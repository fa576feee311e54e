"""Pure date classification logic - no I/O dependencies.

Weeks run Monday to Sunday. Every function takes an explicit ``now`` so
results are deterministic for a given wall-clock instant.
"""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum


class DatePreset(Enum):
    ALL = "all"
    TODAY = "today"
    TOMORROW = "tomorrow"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this-week"
    SPECIFIC_DATE = "specific-date"
    DATE_RANGE = "date-range"


class DateGroup(Enum):
    PAST = "past"
    TODAY = "today"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"
    NEXT_WEEK = "next-week"
    FUTURE = "future"
    NO_DATE = "no-date"


WEEKDAY_GROUPS: list[DateGroup] = [
    DateGroup.MONDAY,
    DateGroup.TUESDAY,
    DateGroup.WEDNESDAY,
    DateGroup.THURSDAY,
    DateGroup.FRIDAY,
    DateGroup.SATURDAY,
    DateGroup.SUNDAY,
]

# Header sort order: past < today < mon..sun < next-week < future < no-date
GROUP_ORDER: dict[DateGroup, int] = {group: i for i, group in enumerate(DateGroup)}

GROUP_LABELS: dict[DateGroup, str] = {
    DateGroup.PAST: "Past",
    DateGroup.TODAY: "Today",
    DateGroup.MONDAY: "Monday",
    DateGroup.TUESDAY: "Tuesday",
    DateGroup.WEDNESDAY: "Wednesday",
    DateGroup.THURSDAY: "Thursday",
    DateGroup.FRIDAY: "Friday",
    DateGroup.SATURDAY: "Saturday",
    DateGroup.SUNDAY: "Sunday",
    DateGroup.NEXT_WEEK: "Next Week",
    DateGroup.FUTURE: "Future",
    DateGroup.NO_DATE: "No Date",
}


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of timestamps."""

    start: datetime
    end: datetime


def start_of_day(d: datetime) -> datetime:
    """Midnight at the start of d's calendar day."""
    return datetime.combine(d.date(), time.min)


def end_of_day(d: datetime) -> datetime:
    """Last representable instant of d's calendar day."""
    return datetime.combine(d.date(), time.max)


def get_week_start(d: datetime) -> datetime:
    """Monday 00:00 of d's week. Sunday belongs to the preceding Monday."""
    return start_of_day(d) - timedelta(days=d.weekday())


def get_week_end(d: datetime) -> datetime:
    """Sunday end-of-day of d's week, six days after the week start."""
    return end_of_day(get_week_start(d) + timedelta(days=6))


def is_on_date(ts: datetime, target: datetime) -> bool:
    """Same calendar year, month and day; time is ignored."""
    return ts.date() == target.date()


def is_in_date_range(ts: datetime, start: datetime, end: datetime) -> bool:
    """Inclusive timestamp range test."""
    return start <= ts <= end


def matches_date_preset(
    due_date: datetime | None,
    preset: DatePreset | str,
    now: datetime,
    specific_date: datetime | None = None,
    date_range: DateRange | None = None,
) -> bool:
    """
    Check whether a due date falls inside a date preset.

    ``all`` matches everything, undated tasks included. Every other preset
    excludes undated tasks. An unrecognized preset matches everything.
    """
    try:
        preset = DatePreset(preset)
    except ValueError:
        return True

    if preset is DatePreset.ALL:
        return True

    if due_date is None:
        return False

    match preset:
        case DatePreset.TODAY:
            return is_on_date(due_date, now)
        case DatePreset.TOMORROW:
            return is_on_date(due_date, now + timedelta(days=1))
        case DatePreset.YESTERDAY:
            return is_on_date(due_date, now - timedelta(days=1))
        case DatePreset.THIS_WEEK:
            return is_in_date_range(due_date, get_week_start(now), get_week_end(now))
        case DatePreset.SPECIFIC_DATE:
            if specific_date is None:
                return False
            return is_on_date(due_date, specific_date)
        case DatePreset.DATE_RANGE:
            if date_range is None:
                return False
            return is_in_date_range(due_date, date_range.start, date_range.end)
    return True


def get_date_group(due_date: datetime | None, now: datetime) -> DateGroup:
    """Classify a due date into exactly one relative bucket."""
    if due_date is None:
        return DateGroup.NO_DATE

    if is_on_date(due_date, now):
        return DateGroup.TODAY

    task_day = start_of_day(due_date)
    if task_day < start_of_day(now):
        return DateGroup.PAST

    week_end = get_week_end(now)
    if task_day <= week_end:
        return WEEKDAY_GROUPS[task_day.weekday()]

    if task_day <= week_end + timedelta(days=7):
        return DateGroup.NEXT_WEEK

    return DateGroup.FUTURE


def get_group_order(group: DateGroup) -> int:
    return GROUP_ORDER[group]


def get_group_label(group: DateGroup) -> str:
    return GROUP_LABELS[group]


def is_weekday_group(group: DateGroup) -> bool:
    return group in WEEKDAY_GROUPS


def get_weekday_index(group: DateGroup) -> int:
    """0 for Monday through 6 for Sunday, -1 for non-weekday groups."""
    if group not in WEEKDAY_GROUPS:
        return -1
    return WEEKDAY_GROUPS.index(group)


def get_remaining_weekday_groups(now: datetime) -> list[DateGroup]:
    """Weekday groups strictly after today within the current week."""
    return WEEKDAY_GROUPS[now.weekday() + 1 :]


def get_date_for_group(group: DateGroup, now: datetime) -> datetime | None:
    """
    Concrete due date to assign when a task is dropped into a group.

    Returns None for past, future and no-date, which are not drop targets.
    """
    today = start_of_day(now)

    if group is DateGroup.TODAY:
        return today

    if is_weekday_group(group):
        return today + timedelta(days=get_weekday_index(group) - now.weekday())

    if group is DateGroup.NEXT_WEEK:
        return get_week_start(now) + timedelta(days=7)

    return None
