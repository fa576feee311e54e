"""Pure column filter matching - no I/O dependencies."""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from .dates import DatePreset, DateRange, is_on_date, matches_date_preset
from .tasks import Task


@dataclass(frozen=True)
class MultiselectFilter:
    """Allowed raw values. An empty set means no restriction."""

    selected: frozenset[str] = frozenset()


@dataclass(frozen=True)
class TextFilter:
    """Substring pattern, or an anchored wildcard pattern when it contains '*'."""

    value: str = ""


@dataclass(frozen=True)
class DateFilter:
    """Exact calendar-day match. None means no restriction."""

    value: datetime | None = None


@dataclass(frozen=True)
class TitleEnhancedFilter:
    """
    Title search with an optional explicit row selection.

    When ``selected_task_ids`` is set it is authoritative and ``search_text``
    is ignored.
    """

    search_text: str = ""
    selected_task_ids: frozenset[str] | None = None


FilterValue = Union[MultiselectFilter, TextFilter, DateFilter, TitleEnhancedFilter]


@dataclass(frozen=True)
class ColumnFilters:
    """One filter per filterable column, combined with AND."""

    type: FilterValue | None = None
    title: FilterValue | None = None
    status: FilterValue | None = None
    importance: FilterValue | None = None
    assignee: FilterValue | None = None
    due_date: FilterValue | None = None


@dataclass(frozen=True)
class FilterState:
    """Everything that decides which tasks are visible."""

    filters: ColumnFilters = field(default_factory=ColumnFilters)
    date_preset: DatePreset = DatePreset.ALL
    specific_date: datetime | None = None
    date_range: DateRange | None = None


def wildcard_match(text: str, pattern: str) -> bool:
    """
    Case-insensitive anchored match where '*' matches any run of characters.

    Falls back to a substring test on the pattern without '*' if the
    compiled expression is rejected.
    """
    if not pattern:
        return True
    lower_text = text.lower()
    lower_pattern = pattern.lower()
    regex = ".*".join(re.escape(part) for part in lower_pattern.split("*"))
    try:
        return re.fullmatch(regex, lower_text, re.DOTALL) is not None
    except re.error:
        return lower_pattern.replace("*", "") in lower_text


def _matches_pattern(text: str, pattern: str) -> bool:
    pattern = pattern.strip()
    if not pattern:
        return True
    if "*" in pattern:
        return wildcard_match(text, pattern)
    return pattern.lower() in text.lower()


def matches_multiselect(filter_value: FilterValue | None, value: str) -> bool:
    if not isinstance(filter_value, MultiselectFilter) or not filter_value.selected:
        return True
    return value in filter_value.selected


def matches_text_filter(filter_value: FilterValue | None, value: str) -> bool:
    if not isinstance(filter_value, TextFilter):
        return True
    return _matches_pattern(value, filter_value.value)


def matches_date_filter(filter_value: FilterValue | None, task_date: datetime | None) -> bool:
    if not isinstance(filter_value, DateFilter) or filter_value.value is None:
        return True
    if task_date is None:
        return False
    return is_on_date(task_date, filter_value.value)


def matches_title_enhanced_filter(filter_value: FilterValue | None, task: Task) -> bool:
    if not isinstance(filter_value, TitleEnhancedFilter):
        return True
    if filter_value.selected_task_ids is not None:
        return task.id in filter_value.selected_task_ids
    return _matches_pattern(task.title, filter_value.search_text)


def matches_title_filter(filter_value: FilterValue | None, task: Task) -> bool:
    """The title column accepts either a text or a title-enhanced filter."""
    match filter_value:
        case TitleEnhancedFilter():
            return matches_title_enhanced_filter(filter_value, task)
        case TextFilter():
            return matches_text_filter(filter_value, task.title)
        case MultiselectFilter() | DateFilter() | None:
            return True


def task_matches_filters(task: Task, state: FilterState, now: datetime) -> bool:
    """
    AND of the date preset and every column filter.

    The due-date column filter is skipped while a preset other than ``all``
    is active; the preset already constrains dates.
    """
    if not matches_date_preset(
        task.due_date,
        state.date_preset,
        now,
        specific_date=state.specific_date,
        date_range=state.date_range,
    ):
        return False

    filters = state.filters
    skip_due_date = state.date_preset is not DatePreset.ALL

    return (
        matches_multiselect(filters.type, task.type.value)
        and matches_title_filter(filters.title, task)
        and matches_multiselect(filters.status, task.status.value)
        and matches_multiselect(
            filters.importance, task.importance.value if task.importance else ""
        )
        and matches_multiselect(filters.assignee, task.assignee_id or "")
        and (skip_due_date or matches_date_filter(filters.due_date, task.due_date))
    )


def filter_tasks(tasks: list[Task], state: FilterState, now: datetime) -> list[Task]:
    """Visible tasks, in their original order."""
    return [t for t in tasks if task_matches_filters(t, state, now)]


def is_filter_active(filter_value: FilterValue | None) -> bool:
    match filter_value:
        case None:
            return False
        case MultiselectFilter(selected=selected):
            return bool(selected)
        case TextFilter(value=value):
            return bool(value.strip())
        case DateFilter(value=value):
            return value is not None
        case TitleEnhancedFilter(search_text=text, selected_task_ids=ids):
            return bool(text.strip()) or ids is not None


def has_active_filters(state: FilterState) -> bool:
    """Whether anything narrows the visible task set."""
    if state.date_preset is not DatePreset.ALL:
        return True
    if state.specific_date is not None or state.date_range is not None:
        return True
    filters = state.filters
    return any(
        is_filter_active(f)
        for f in (
            filters.type,
            filters.title,
            filters.status,
            filters.importance,
            filters.assignee,
            filters.due_date,
        )
    )
