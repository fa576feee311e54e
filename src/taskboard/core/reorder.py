"""Move evaluation for drag-and-drop and keyboard reordering.

A move never mutates the snapshot. ``evaluate_move`` decides the outcome
and returns the field updates and list order the caller should apply. The
hover preview and the commit both go through it, so a preview can never
disagree with the committed result.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Union

from .capacity import (
    MAX_MINUTES_PER_DAY,
    CapacityLedger,
    build_ledger,
    is_group_over_capacity,
    is_subgroup_over_capacity,
)
from .dates import DateGroup, get_date_for_group, get_date_group
from .grouping import BoardState, GroupBy, build_board
from .tasks import Task, TimeOfDay, move_in_list, remaining_estimate


@dataclass(frozen=True)
class TaskTarget:
    """Drop onto (or shift next to) another task row."""

    task_id: str


@dataclass(frozen=True)
class SubheaderTarget:
    """Drop onto one of today's period subheaders."""

    period: TimeOfDay


MoveTarget = Union[TaskTarget, SubheaderTarget]


class RejectReason(Enum):
    UNKNOWN_TASK = "unknown-task"
    NOT_A_DROP_TARGET = "not-a-drop-target"
    DAY_OVER_CAPACITY = "day-over-capacity"
    PERIOD_OVER_CAPACITY = "period-over-capacity"
    END_OF_LIST = "end-of-list"


@dataclass(frozen=True)
class TaskUpdate:
    """Field changes for one task, keyed by Task attribute name."""

    task_id: str
    changes: dict


@dataclass(frozen=True)
class MoveAccepted:
    updates: tuple[TaskUpdate, ...] = ()
    order: tuple[str, ...] | None = None

    @property
    def is_noop(self) -> bool:
        return not self.updates and self.order is None


@dataclass(frozen=True)
class MoveRejected:
    reason: RejectReason


MoveOutcome = Union[MoveAccepted, MoveRejected]


@dataclass(frozen=True)
class KeyboardMove:
    outcome: MoveOutcome
    active_index: int


def _moved_order(tasks: list[Task], active_id: str, target_id: str) -> tuple[str, ...]:
    ids = [t.id for t in tasks]
    return tuple(move_in_list(ids, ids.index(active_id), ids.index(target_id)))


def _accept(task: Task, changes: dict, order: tuple[str, ...] | None) -> MoveAccepted:
    updates = (TaskUpdate(task.id, changes),) if changes else ()
    return MoveAccepted(updates=updates, order=order)


def _period_check(
    task: Task,
    period: TimeOfDay,
    ledger: CapacityLedger,
    now: datetime,
    exclude_self: bool,
) -> bool:
    """True when the task fits in the period."""
    return not is_subgroup_over_capacity(period, ledger, remaining_estimate(task, now), exclude_self)


def _move_across_days(
    active: Task,
    target: Task,
    target_group: DateGroup,
    ledger: CapacityLedger,
    now: datetime,
    order: tuple[str, ...],
) -> MoveOutcome:
    new_date = get_date_for_group(target_group, now)
    if new_date is None:
        return MoveRejected(RejectReason.NOT_A_DROP_TARGET)

    if is_group_over_capacity(target_group, ledger, remaining_estimate(active, now)):
        return MoveRejected(RejectReason.DAY_OVER_CAPACITY)

    changes: dict = {"due_date": new_date}
    # Time of day only means something today; adopt the target row's period
    new_period = target.time_of_day if target_group is DateGroup.TODAY else None
    if new_period is not None and not _period_check(active, new_period, ledger, now, False):
        return MoveRejected(RejectReason.PERIOD_OVER_CAPACITY)
    if new_period is not active.time_of_day:
        changes["time_of_day"] = new_period
    return _accept(active, changes, order)


def _move_across_periods(
    active: Task,
    period: TimeOfDay | None,
    ledger: CapacityLedger,
    now: datetime,
    order: tuple[str, ...] | None,
) -> MoveOutcome:
    exclude_self = active.time_of_day is not None and active.time_of_day is not period
    # The unassigned bucket has no budget
    if period is not None and not _period_check(active, period, ledger, now, exclude_self):
        return MoveRejected(RejectReason.PERIOD_OVER_CAPACITY)
    return _accept(active, {"time_of_day": period}, order)


def _drop_on_period(
    active: Task,
    period: TimeOfDay,
    ledger: CapacityLedger,
    now: datetime,
) -> MoveOutcome:
    active_group = get_date_group(active.due_date, now)
    changes: dict = {}
    if active_group is not DateGroup.TODAY:
        if is_group_over_capacity(DateGroup.TODAY, ledger, remaining_estimate(active, now)):
            return MoveRejected(RejectReason.DAY_OVER_CAPACITY)
        changes["due_date"] = get_date_for_group(DateGroup.TODAY, now)

    # Only a task due today has its minutes in one of today's periods
    exclude_self = active_group is DateGroup.TODAY and active.time_of_day is not None
    if not _period_check(active, period, ledger, now, exclude_self):
        return MoveRejected(RejectReason.PERIOD_OVER_CAPACITY)
    changes["time_of_day"] = period
    return _accept(active, changes, None)


def evaluate_move(
    tasks: list[Task],
    active_id: str,
    target: MoveTarget,
    group_by: GroupBy,
    now: datetime,
    ledger: CapacityLedger | None = None,
    max_minutes_per_day: int = MAX_MINUTES_PER_DAY,
) -> MoveOutcome:
    """
    Decide a move of one task relative to a target.

    Outside date grouping, and within a single date group, a move only
    changes list order (plus the time of day when it crosses one of today's
    periods). Across date groups the task takes the target group's date,
    provided the group is a drop target and has room for its remaining
    estimate.
    """
    by_id = {t.id: t for t in tasks}
    active = by_id.get(active_id)
    if active is None:
        return MoveRejected(RejectReason.UNKNOWN_TASK)
    if ledger is None:
        ledger = build_ledger(tasks, now, max_minutes_per_day)

    match target:
        case SubheaderTarget(period=period):
            if group_by is not GroupBy.DATE:
                return MoveRejected(RejectReason.NOT_A_DROP_TARGET)
            return _drop_on_period(active, period, ledger, now)

        case TaskTarget(task_id=target_id):
            target_task = by_id.get(target_id)
            if target_task is None:
                return MoveRejected(RejectReason.UNKNOWN_TASK)
            if target_task.id == active.id:
                return MoveAccepted()

            order = _moved_order(tasks, active.id, target_task.id)
            if group_by is not GroupBy.DATE:
                return MoveAccepted(order=order)

            active_group = get_date_group(active.due_date, now)
            target_group = get_date_group(target_task.due_date, now)
            if active_group is not target_group:
                return _move_across_days(active, target_task, target_group, ledger, now, order)
            if active_group is DateGroup.TODAY and active.time_of_day is not target_task.time_of_day:
                return _move_across_periods(active, target_task.time_of_day, ledger, now, order)
            return MoveAccepted(order=order)


def preview_move(
    tasks: list[Task],
    active_id: str,
    target: MoveTarget,
    group_by: GroupBy,
    now: datetime,
    ledger: CapacityLedger | None = None,
    max_minutes_per_day: int = MAX_MINUTES_PER_DAY,
) -> bool:
    """Whether a hovered drop would be accepted. Emits nothing."""
    outcome = evaluate_move(tasks, active_id, target, group_by, now, ledger, max_minutes_per_day)
    return isinstance(outcome, MoveAccepted)


def apply_outcome(tasks: list[Task], outcome: MoveOutcome) -> list[Task]:
    """New snapshot with an accepted outcome applied; rejected outcomes change nothing."""
    if isinstance(outcome, MoveRejected):
        return list(tasks)

    changes = {u.task_id: u.changes for u in outcome.updates}
    updated = [replace(t, **changes[t.id]) if t.id in changes else t for t in tasks]
    if outcome.order is None:
        return updated

    by_id = {t.id: t for t in updated}
    return [by_id[i] for i in outcome.order if i in by_id]


def keyboard_move(
    tasks: list[Task],
    active_index: int,
    direction: int,
    state: BoardState,
    now: datetime,
    max_minutes_per_day: int = MAX_MINUTES_PER_DAY,
    assignee_names: dict[str, str] | None = None,
) -> KeyboardMove:
    """
    Shift the active row one step up (-1) or down (+1).

    Uses the same decision as a drop onto the neighbouring row. On
    acceptance the active index follows the task; on rejection it stays.
    """
    board = build_board(tasks, state, now, max_minutes_per_day, assignee_names=assignee_names)
    rows = board.task_rows()
    if not 0 <= active_index < len(rows):
        return KeyboardMove(MoveRejected(RejectReason.UNKNOWN_TASK), active_index)

    target_index = active_index + (1 if direction > 0 else -1)
    if not 0 <= target_index < len(rows):
        return KeyboardMove(MoveRejected(RejectReason.END_OF_LIST), active_index)

    active = rows[active_index].task
    outcome = evaluate_move(
        tasks,
        active.id,
        TaskTarget(rows[target_index].task.id),
        state.group_by,
        now,
        ledger=board.ledger,
    )
    if isinstance(outcome, MoveRejected):
        return KeyboardMove(outcome, active_index)

    moved = build_board(
        apply_outcome(tasks, outcome), state, now, max_minutes_per_day, assignee_names=assignee_names
    )
    new_ids = [r.task.id for r in moved.task_rows()]
    new_index = new_ids.index(active.id) if active.id in new_ids else active_index
    return KeyboardMove(outcome, new_index)
