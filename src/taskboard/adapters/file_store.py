"""File-based task storage adapter."""

import json
import logging
from dataclasses import replace
from pathlib import Path

from taskboard.core.tasks import Task

logger = logging.getLogger(__name__)


class FileTaskStore:
    """
    JSON file task storage.

    Implements TaskStore protocol. Tasks live in a single ``{"tasks": [...]}``
    document in the same shape the organizer API uses; list order is the
    manual order.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read_raw(self) -> list[dict]:
        if not self.path.exists():
            return []
        data = json.loads(self.path.read_text())
        return data.get("tasks", [])

    def _write(self, tasks: list[Task]) -> None:
        self.path.write_text(json.dumps({"tasks": [t.to_api() for t in tasks]}, indent=2))
        logger.debug(f"Wrote {len(tasks)} tasks to {self.path}")

    def fetch_all(self) -> list[Task]:
        """Load all tasks. A missing file is an empty store."""
        return [Task.from_api(item) for item in self._read_raw()]

    def save_all(self, tasks: list[Task]) -> None:
        """Replace the stored task list."""
        self._write(tasks)

    def update(self, task_id: str, changes: dict) -> None:
        """Apply field changes to one task. Raises KeyError for unknown ids."""
        tasks = self.fetch_all()
        for i, task in enumerate(tasks):
            if task.id == task_id:
                tasks[i] = replace(task, **changes)
                break
        else:
            raise KeyError(task_id)
        self._write(tasks)

    def reorder(self, task_ids: list[str]) -> None:
        """Persist a new manual order. Tasks missing from task_ids keep their place at the end."""
        tasks = self.fetch_all()
        by_id = {t.id: t for t in tasks}
        ordered = [by_id[i] for i in task_ids if i in by_id]
        listed = set(task_ids)
        ordered.extend(t for t in tasks if t.id not in listed)
        self._write(ordered)
