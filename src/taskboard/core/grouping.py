"""Pure grouping logic - turns a task snapshot into ordered display rows."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Union

from .capacity import MAX_MINUTES_PER_DAY, CapacityLedger, build_ledger
from .dates import (
    DateGroup,
    get_date_for_group,
    get_date_group,
    get_group_label,
    get_group_order,
    get_remaining_weekday_groups,
)
from .filters import FilterState, filter_tasks
from .periods import PERIOD_LABELS, PERIODS, is_period_past, period_minutes_left
from .tasks import (
    TASK_IMPORTANCE_OPTIONS,
    TASK_STATUS_OPTIONS,
    TASK_TYPE_OPTIONS,
    Task,
    TimeOfDay,
    remaining_estimate,
)

UNASSIGNED = ""
UNASSIGNED_LABEL = "Unassigned"
NO_IMPORTANCE = ""
NO_IMPORTANCE_LABEL = "No Importance"


class GroupBy(Enum):
    NONE = "none"
    DATE = "date"
    TYPE = "type"
    STATUS = "status"
    IMPORTANCE = "importance"
    ASSIGNEE = "assignee"


@dataclass(frozen=True)
class GroupKey:
    """Identity, sort position and label of one group."""

    key: str
    order: int
    label: str


@dataclass(frozen=True)
class GroupStats:
    key: str
    label: str
    order: int
    task_count: int = 0
    estimate_minutes: int = 0
    # Date mode only: completed today, and budget left for drop targets
    completed_count: int | None = None
    capacity_remaining: int | None = None


@dataclass(frozen=True)
class HeaderRow:
    group: str
    label: str
    stats: GroupStats


@dataclass(frozen=True)
class SubheaderRow:
    group: str
    period: TimeOfDay
    label: str
    minutes_left: int
    estimate_minutes: int
    task_count: int
    is_past: bool


@dataclass(frozen=True)
class TaskRow:
    task: Task
    group: str | None
    subgroup: TimeOfDay | None
    is_first: bool
    is_last: bool


RowData = Union[HeaderRow, SubheaderRow, TaskRow]


@dataclass(frozen=True)
class BoardState:
    """Immutable view state: filters, grouping mode and focus."""

    filter: FilterState = field(default_factory=FilterState)
    group_by: GroupBy = GroupBy.DATE
    focused_group: str | None = None
    show_empty_days: bool = False


@dataclass(frozen=True)
class Board:
    """One evaluation pass over a task snapshot."""

    rows: list[RowData]
    groups: list[GroupStats]
    ledger: CapacityLedger
    visible: list[Task]

    def task_rows(self) -> list[TaskRow]:
        return [r for r in self.rows if isinstance(r, TaskRow)]


def _option_keys(options: list) -> dict[str, GroupKey]:
    return {value.value: GroupKey(value.value, i, label) for i, (value, label) in enumerate(options)}


TYPE_KEYS = _option_keys(TASK_TYPE_OPTIONS)
STATUS_KEYS = _option_keys(TASK_STATUS_OPTIONS)
IMPORTANCE_KEYS = _option_keys(TASK_IMPORTANCE_OPTIONS)


def date_group_key(group: DateGroup) -> GroupKey:
    return GroupKey(group.value, get_group_order(group), get_group_label(group))


def assignee_keys(tasks: list[Task], assignee_names: dict[str, str]) -> dict[str, GroupKey]:
    """Assignees ordered by display name, with Unassigned last."""
    ids = {t.assignee_id for t in tasks if t.assignee_id}
    ordered = sorted(ids, key=lambda i: (assignee_names.get(i, i).lower(), i))
    keys = {i: GroupKey(i, n, assignee_names.get(i, i)) for n, i in enumerate(ordered)}
    keys[UNASSIGNED] = GroupKey(UNASSIGNED, len(ordered), UNASSIGNED_LABEL)
    return keys


def task_group_key(
    task: Task,
    group_by: GroupBy,
    now: datetime,
    assignees: dict[str, GroupKey] | None = None,
) -> GroupKey | None:
    """Group of a task under a grouping mode; None when not grouping."""
    match group_by:
        case GroupBy.NONE:
            return None
        case GroupBy.DATE:
            return date_group_key(get_date_group(task.due_date, now))
        case GroupBy.TYPE:
            return TYPE_KEYS[task.type.value]
        case GroupBy.STATUS:
            return STATUS_KEYS[task.status.value]
        case GroupBy.IMPORTANCE:
            if task.importance is None:
                return GroupKey(NO_IMPORTANCE, len(IMPORTANCE_KEYS), NO_IMPORTANCE_LABEL)
            return IMPORTANCE_KEYS[task.importance.value]
        case GroupBy.ASSIGNEE:
            assignees = assignees or assignee_keys([task], {})
            return assignees.get(task.assignee_id or UNASSIGNED, assignees[UNASSIGNED])


def _task_block(tasks: list[Task], group: str | None, subgroup: TimeOfDay | None) -> list[TaskRow]:
    last = len(tasks) - 1
    return [
        TaskRow(task=t, group=group, subgroup=subgroup, is_first=i == 0, is_last=i == last)
        for i, t in enumerate(tasks)
    ]


def _today_rows(tasks: list[Task], now: datetime) -> list[RowData]:
    """
    Split today's tasks by time of day.

    Tasks without a period come first with no subheader. A period subheader
    is dropped only when the period has elapsed and holds no tasks.
    """
    group = DateGroup.TODAY.value
    rows: list[RowData] = []
    rows.extend(_task_block([t for t in tasks if t.time_of_day is None], group, None))

    for period in PERIODS:
        in_period = [t for t in tasks if t.time_of_day is period]
        past = is_period_past(period, now)
        if past and not in_period:
            continue
        rows.append(
            SubheaderRow(
                group=group,
                period=period,
                label=PERIOD_LABELS[period],
                minutes_left=period_minutes_left(period, now),
                estimate_minutes=sum(remaining_estimate(t, now) for t in in_period),
                task_count=len(in_period),
                is_past=past,
            )
        )
        rows.extend(_task_block(in_period, group, period))
    return rows


def group_tasks(
    tasks: list[Task],
    group_by: GroupBy,
    now: datetime,
    ledger: CapacityLedger | None = None,
    completed_today: int | None = None,
    assignee_names: dict[str, str] | None = None,
    show_empty_days: bool = False,
) -> tuple[list[RowData], list[GroupStats]]:
    """
    Partition an already-filtered task list into ordered display rows.

    Tasks are stably sorted by group order, so tasks sharing a group keep
    their manual order. Returns the rows and per-group statistics.
    """
    if group_by is GroupBy.NONE:
        return _task_block(tasks, None, None), []

    assignees = assignee_keys(tasks, assignee_names or {}) if group_by is GroupBy.ASSIGNEE else None
    keyed = [(task_group_key(t, group_by, now, assignees), i, t) for i, t in enumerate(tasks)]
    keyed.sort(key=lambda item: (item[0].order, item[1]))

    members: dict[str, list[Task]] = {}
    keys: dict[str, GroupKey] = {}
    for key, _, task in keyed:
        keys.setdefault(key.key, key)
        members.setdefault(key.key, []).append(task)

    if group_by is GroupBy.DATE and show_empty_days:
        for group in [DateGroup.TODAY, *get_remaining_weekday_groups(now), DateGroup.NEXT_WEEK]:
            keys.setdefault(group.value, date_group_key(group))
            members.setdefault(group.value, [])

    rows: list[RowData] = []
    stats: list[GroupStats] = []
    for key in sorted(keys.values(), key=lambda k: k.order):
        group_members = members[key.key]
        group_stats = _group_stats(key, group_members, group_by, now, ledger, completed_today)
        stats.append(group_stats)
        rows.append(HeaderRow(group=key.key, label=key.label, stats=group_stats))
        if group_by is GroupBy.DATE and key.key == DateGroup.TODAY.value:
            rows.extend(_today_rows(group_members, now))
        else:
            rows.extend(_task_block(group_members, key.key, None))

    return rows, stats


def _group_stats(
    key: GroupKey,
    tasks: list[Task],
    group_by: GroupBy,
    now: datetime,
    ledger: CapacityLedger | None,
    completed_today: int | None,
) -> GroupStats:
    completed = None
    capacity = None
    if group_by is GroupBy.DATE:
        group = DateGroup(key.key)
        if group is DateGroup.TODAY:
            completed = completed_today
        if ledger is not None and get_date_for_group(group, now) is not None:
            capacity = ledger.remaining(group)

    return GroupStats(
        key=key.key,
        label=key.label,
        order=key.order,
        task_count=len(tasks),
        estimate_minutes=sum(remaining_estimate(t, now) for t in tasks if t.estimate),
        completed_count=completed,
        capacity_remaining=capacity,
    )


def focus_rows(rows: list[RowData], group: str | None) -> list[RowData]:
    """Hide every group but one. A display filter only; grouping is unchanged."""
    if group is None:
        return rows
    return [r for r in rows if r.group == group]


def count_completed_today(tasks: list[Task], now: datetime) -> int:
    """Done tasks due today."""
    return sum(
        1 for t in tasks if t.is_done and get_date_group(t.due_date, now) is DateGroup.TODAY
    )


def build_board(
    tasks: list[Task],
    state: BoardState,
    now: datetime,
    max_minutes_per_day: int = MAX_MINUTES_PER_DAY,
    completed_today: int | None = None,
    assignee_names: dict[str, str] | None = None,
) -> Board:
    """
    Filter, group and annotate a task snapshot.

    The ledger is built from the full snapshot so hidden tasks still count
    against bucket budgets.
    """
    ledger = build_ledger(tasks, now, max_minutes_per_day)
    visible = filter_tasks(tasks, state.filter, now)
    if completed_today is None:
        completed_today = count_completed_today(tasks, now)
    rows, groups = group_tasks(
        visible,
        state.group_by,
        now,
        ledger=ledger,
        completed_today=completed_today,
        assignee_names=assignee_names,
        show_empty_days=state.show_empty_days,
    )
    return Board(
        rows=focus_rows(rows, state.focused_group),
        groups=groups,
        ledger=ledger,
        visible=visible,
    )
