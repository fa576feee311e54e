"""Shared workflow layer between the CLI and the task store.

Each function takes a fresh snapshot from the store, runs the pure core
over it, and writes any accepted updates back.
"""

import logging
from datetime import datetime

from .adapters.api_store import ApiTaskStore
from .adapters.file_store import FileTaskStore
from .config import Config
from .core.grouping import Board, BoardState, GroupBy, build_board
from .core.reorder import (
    KeyboardMove,
    MoveAccepted,
    MoveOutcome,
    MoveRejected,
    MoveTarget,
    evaluate_move,
    keyboard_move,
)
from .ports.task_store import TaskStore

logger = logging.getLogger(__name__)


def get_store(config: Config) -> TaskStore:
    """Resolve the task store from config."""
    if config.store == "api":
        return ApiTaskStore(config)
    return FileTaskStore(config.task_path)


def default_state(config: Config) -> BoardState:
    return BoardState(group_by=GroupBy(config.group_by), show_empty_days=config.show_empty_days)


def load_board(
    store: TaskStore,
    config: Config,
    state: BoardState,
    now: datetime | None = None,
) -> Board:
    """Fetch tasks and build the grouped board."""
    now = now or datetime.now()
    tasks = store.fetch_all()
    return build_board(tasks, state, now, config.max_minutes_per_day)


def commit_outcome(store: TaskStore, outcome: MoveOutcome) -> None:
    """Write an accepted outcome's updates and order to the store."""
    if not isinstance(outcome, MoveAccepted):
        return
    for update in outcome.updates:
        store.update(update.task_id, update.changes)
    if outcome.order is not None:
        store.reorder(list(outcome.order))


def move_task(
    store: TaskStore,
    config: Config,
    active_id: str,
    target: MoveTarget,
    group_by: GroupBy = GroupBy.DATE,
    now: datetime | None = None,
    dry_run: bool = False,
) -> MoveOutcome:
    """Evaluate a drop and, unless dry_run, apply it to the store."""
    now = now or datetime.now()
    tasks = store.fetch_all()
    outcome = evaluate_move(
        tasks, active_id, target, group_by, now, max_minutes_per_day=config.max_minutes_per_day
    )
    _log_outcome(active_id, outcome)
    if not dry_run:
        commit_outcome(store, outcome)
    return outcome


def nudge_task(
    store: TaskStore,
    config: Config,
    active_id: str,
    direction: int,
    state: BoardState,
    now: datetime | None = None,
) -> KeyboardMove:
    """Keyboard-style shift of one task by a single visible row."""
    now = now or datetime.now()
    tasks = store.fetch_all()
    board = build_board(tasks, state, now, config.max_minutes_per_day)
    ids = [r.task.id for r in board.task_rows()]
    if active_id not in ids:
        raise KeyError(active_id)

    result = keyboard_move(
        tasks, ids.index(active_id), direction, state, now, config.max_minutes_per_day
    )
    _log_outcome(active_id, result.outcome)
    commit_outcome(store, result.outcome)
    return result


def _log_outcome(active_id: str, outcome: MoveOutcome) -> None:
    if isinstance(outcome, MoveRejected):
        logger.info(f"Move of {active_id} rejected: {outcome.reason.value}")
    else:
        logger.info(f"Move of {active_id} accepted with {len(outcome.updates)} update(s)")
