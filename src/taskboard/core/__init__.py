"""Functional core - pure business logic with no I/O."""

from .tasks import (
    Task,
    TaskImportance,
    TaskStatus,
    TaskType,
    TimeOfDay,
    TimeSession,
    format_minutes,
    remaining_estimate,
)
from .dates import (
    DateGroup,
    DatePreset,
    DateRange,
    get_date_for_group,
    get_date_group,
    matches_date_preset,
)
from .filters import (
    ColumnFilters,
    DateFilter,
    FilterState,
    MultiselectFilter,
    TextFilter,
    TitleEnhancedFilter,
    filter_tasks,
)
from .capacity import CapacityLedger, build_ledger, is_group_over_capacity, is_subgroup_over_capacity
from .grouping import Board, BoardState, GroupBy, build_board, group_tasks
from .reorder import (
    MoveAccepted,
    MoveRejected,
    SubheaderTarget,
    TaskTarget,
    evaluate_move,
    keyboard_move,
    preview_move,
)

__all__ = [
    # Tasks
    "Task",
    "TaskImportance",
    "TaskStatus",
    "TaskType",
    "TimeOfDay",
    "TimeSession",
    "format_minutes",
    "remaining_estimate",
    # Dates
    "DateGroup",
    "DatePreset",
    "DateRange",
    "get_date_for_group",
    "get_date_group",
    "matches_date_preset",
    # Filters
    "ColumnFilters",
    "DateFilter",
    "FilterState",
    "MultiselectFilter",
    "TextFilter",
    "TitleEnhancedFilter",
    "filter_tasks",
    # Capacity
    "CapacityLedger",
    "build_ledger",
    "is_group_over_capacity",
    "is_subgroup_over_capacity",
    # Grouping
    "Board",
    "BoardState",
    "GroupBy",
    "build_board",
    "group_tasks",
    # Reorder
    "MoveAccepted",
    "MoveRejected",
    "SubheaderTarget",
    "TaskTarget",
    "evaluate_move",
    "keyboard_move",
    "preview_move",
]
