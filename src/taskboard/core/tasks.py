"""Pure task domain logic - no I/O dependencies."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TypeVar

T = TypeVar("T")


class TaskType(Enum):
    ADMIN = "admin"
    OPERATIONS = "operations"
    BUSINESS_DEV = "business-dev"
    JARDIN_CASA = "jardin-casa"
    JARDIN_FINCA = "jardin-finca"
    PERSONAL = "personal"
    FITNESS = "fitness"


class TaskStatus(Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    BLOCKED = "blocked"
    DONE = "done"


class TaskImportance(Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


class TimeOfDay(Enum):
    """Intraday period of a task due today."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# Display order doubles as grouping order
TASK_TYPE_OPTIONS: list[tuple[TaskType, str]] = [
    (TaskType.ADMIN, "Admin"),
    (TaskType.OPERATIONS, "Operations"),
    (TaskType.BUSINESS_DEV, "Business Dev"),
    (TaskType.JARDIN_CASA, "Jardin: Casa"),
    (TaskType.JARDIN_FINCA, "Jardin: Finca"),
    (TaskType.PERSONAL, "Personal"),
    (TaskType.FITNESS, "Fitness"),
]

TASK_STATUS_OPTIONS: list[tuple[TaskStatus, str]] = [
    (TaskStatus.TODO, "To-do"),
    (TaskStatus.IN_PROGRESS, "In progress"),
    (TaskStatus.BLOCKED, "Blocked"),
    (TaskStatus.DONE, "Done"),
]

TASK_IMPORTANCE_OPTIONS: list[tuple[TaskImportance, str]] = [
    (TaskImportance.LOW, "Low"),
    (TaskImportance.MID, "Mid"),
    (TaskImportance.HIGH, "High"),
]


@dataclass(frozen=True)
class TimeSession:
    """A time-tracking interval. An open session has no end."""

    start: datetime
    end: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.end is None

    def duration_seconds(self, now: datetime) -> float:
        """Length of the session, counting an open session up to now."""
        end = self.end if self.end is not None else now
        return max(0.0, (end - self.start).total_seconds())


@dataclass(frozen=True)
class Task:
    """A task as supplied by the task store. Never mutated by the engine."""

    id: str
    title: str
    type: TaskType = TaskType.ADMIN
    status: TaskStatus = TaskStatus.TODO
    importance: TaskImportance | None = None
    estimate: int | None = None
    due_date: datetime | None = None
    time_of_day: TimeOfDay | None = None
    sessions: tuple[TimeSession, ...] = field(default_factory=tuple)
    assignee_id: str | None = None

    @property
    def is_done(self) -> bool:
        return self.status is TaskStatus.DONE

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """Create Task from the store's JSON shape (camelCase, epoch millis)."""
        importance = data.get("importance")
        time_of_day = data.get("timeOfDay")
        return cls(
            id=data["id"],
            title=data.get("title", ""),
            type=TaskType(data.get("type") or "admin"),
            status=TaskStatus(data.get("status") or "todo"),
            importance=TaskImportance(importance) if importance else None,
            estimate=data.get("estimate"),
            due_date=from_millis(data.get("dueDate")),
            time_of_day=TimeOfDay(time_of_day) if time_of_day else None,
            sessions=tuple(
                TimeSession(start=from_millis(s["startTime"]), end=from_millis(s.get("endTime")))
                for s in data.get("sessions") or []
            ),
            assignee_id=data.get("assigneeId"),
        )

    def to_api(self) -> dict:
        """Serialize to the store's JSON shape."""
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "status": self.status.value,
            "importance": self.importance.value if self.importance else None,
            "estimate": self.estimate,
            "dueDate": to_millis(self.due_date),
            "timeOfDay": self.time_of_day.value if self.time_of_day else None,
            "sessions": [
                {"startTime": to_millis(s.start), "endTime": to_millis(s.end)}
                for s in self.sessions
            ],
            "assigneeId": self.assignee_id,
        }


def from_millis(value: int | float | None) -> datetime | None:
    """Local datetime from a Unix timestamp in milliseconds."""
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000)


def to_millis(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


_API_FIELDS = {
    "due_date": "dueDate",
    "time_of_day": "timeOfDay",
    "status": "status",
    "importance": "importance",
    "estimate": "estimate",
    "title": "title",
    "assignee_id": "assigneeId",
}


def changes_to_api(changes: dict) -> dict:
    """Translate Task attribute changes into the store's JSON keys and values."""
    payload = {}
    for name, value in changes.items():
        if isinstance(value, datetime):
            value = to_millis(value)
        elif isinstance(value, Enum):
            value = value.value
        payload[_API_FIELDS[name]] = value
    return payload


def minutes_spent(task: Task, now: datetime) -> float:
    """
    Minutes logged against a task.

    Closed sessions count in full; an open session counts up to now.
    """
    return sum(s.duration_seconds(now) for s in task.sessions) / 60


def remaining_estimate(task: Task, now: datetime) -> int:
    """Estimate minus whole minutes already spent, floored at zero."""
    if not task.estimate:
        return 0
    return max(0, task.estimate - math.floor(minutes_spent(task, now)))


def format_minutes(minutes: int) -> str:
    """Format minutes as "1h 30m", "45m" or "2h"."""
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"


def move_in_list(items: list[T], from_index: int, to_index: int) -> list[T]:
    """Return a copy with the item at from_index moved to to_index."""
    result = list(items)
    item = result.pop(from_index)
    result.insert(to_index, item)
    return result
