"""Taskboard - task grouping, filtering and capacity-aware placement."""

__version__ = "0.1.0"
