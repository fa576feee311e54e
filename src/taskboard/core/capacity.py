"""Capacity ledger - remaining-estimate budgets per date bucket and period.

The ledger is derived from a task snapshot on every pass and never stored,
so it always reflects the latest task list.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime

from .dates import DateGroup, get_date_group, is_on_date
from .periods import PERIODS, period_minutes_left
from .tasks import Task, TimeOfDay, remaining_estimate

MAX_MINUTES_PER_DAY = 480


@dataclass(frozen=True)
class CapacityLedger:
    """
    Committed remaining-estimate minutes per bucket.

    ``by_date`` covers every date group; ``by_period`` covers today's
    morning, afternoon and evening. ``period_budgets`` holds the wall-clock
    minutes left in each period at the time the ledger was built.
    """

    by_date: dict[DateGroup, int] = field(default_factory=dict)
    by_period: dict[TimeOfDay, int] = field(default_factory=dict)
    period_budgets: dict[TimeOfDay, int] = field(default_factory=dict)
    max_minutes_per_day: int = MAX_MINUTES_PER_DAY

    def committed(self, group: DateGroup) -> int:
        return self.by_date.get(group, 0)

    def remaining(self, group: DateGroup) -> int:
        """Budget left in a date bucket, floored at zero."""
        return max(0, self.max_minutes_per_day - self.committed(group))

    def period_committed(self, period: TimeOfDay) -> int:
        return self.by_period.get(period, 0)

    def period_budget(self, period: TimeOfDay) -> int:
        return self.period_budgets.get(period, 0)

    def period_remaining(self, period: TimeOfDay) -> int:
        return max(0, self.period_budget(period) - self.period_committed(period))


def build_ledger(
    tasks: list[Task],
    now: datetime,
    max_minutes_per_day: int = MAX_MINUTES_PER_DAY,
) -> CapacityLedger:
    """
    Sum each task's remaining estimate into its date bucket and, for
    tasks due today with a time of day, into its period.

    Status plays no part: a done task still counts for whatever its
    estimate exceeds the time logged against it.
    """
    by_date: dict[DateGroup, int] = defaultdict(int)
    by_period: dict[TimeOfDay, int] = defaultdict(int)

    for task in tasks:
        minutes = remaining_estimate(task, now)
        if minutes <= 0:
            continue
        by_date[get_date_group(task.due_date, now)] += minutes
        if task.time_of_day and task.due_date and is_on_date(task.due_date, now):
            by_period[task.time_of_day] += minutes

    return CapacityLedger(
        by_date=dict(by_date),
        by_period=dict(by_period),
        period_budgets={p: period_minutes_left(p, now) for p in PERIODS},
        max_minutes_per_day=max_minutes_per_day,
    )


def is_group_over_capacity(
    target_group: DateGroup,
    ledger: CapacityLedger,
    incoming_minutes: int,
) -> bool:
    """
    Whether adding incoming_minutes to a date bucket would exceed its budget.

    Weightless tasks never exceed capacity.
    """
    if incoming_minutes <= 0:
        return False
    return ledger.committed(target_group) + incoming_minutes > ledger.max_minutes_per_day


def is_subgroup_over_capacity(
    period: TimeOfDay,
    ledger: CapacityLedger,
    task_minutes: int,
    exclude_self: bool = False,
) -> bool:
    """
    Whether placing a task in a period would push it past its budget.

    With exclude_self the task's minutes are already part of the period's
    load and are taken out first. A placement only fails if it raises the
    period's load above the budget, so moving a task into the period it
    already occupies never fails.
    """
    if task_minutes <= 0:
        return False
    current = ledger.period_committed(period)
    if exclude_self:
        current = max(0, current - task_minutes)
    after = current + task_minutes
    if after <= ledger.period_committed(period):
        return False
    return after > ledger.period_budget(period)
