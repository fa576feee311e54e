"""Task store interface."""

from typing import Protocol

from taskboard.core.tasks import Task


class TaskStore(Protocol):
    """Interface for the store that owns tasks. The engine only reads and proposes."""

    def fetch_all(self) -> list[Task]:
        """Fetch all tasks in manual list order."""
        ...

    def update(self, task_id: str, changes: dict) -> None:
        """Apply field changes (keyed by Task attribute name) to one task."""
        ...

    def reorder(self, task_ids: list[str]) -> None:
        """Persist a new manual list order."""
        ...
