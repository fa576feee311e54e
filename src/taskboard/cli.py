"""Taskboard CLI - grouped task board with capacity-aware moves."""

import json
import logging
import sys
from datetime import datetime

import click
import requests

from .adapters.api_store import AuthenticationError
from .config import GROUP_BY_MODES, load_config
from .core.dates import DateGroup, DatePreset, DateRange, end_of_day, get_group_label, start_of_day
from .core.filters import ColumnFilters, FilterState, MultiselectFilter, TextFilter
from .core.grouping import Board, BoardState, GroupBy, HeaderRow, SubheaderRow, TaskRow
from .core.periods import PERIOD_LABELS, PERIODS
from .core.reorder import MoveRejected, SubheaderTarget, TaskTarget
from .core.tasks import TimeOfDay, format_minutes
from .workflows import default_state, get_store, load_board, move_task, nudge_task

STORE_ERRORS = (AuthenticationError, requests.RequestException, KeyError)


@click.group()
@click.version_option(package_name="taskboard")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Taskboard - grouped tasks with daily capacity limits."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _parse_day(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _format_task(row: TaskRow) -> str:
    task = row.task
    check = "x" if task.is_done else " "
    estimate = f" ({format_minutes(task.estimate)})" if task.estimate else ""
    importance = f" !{task.importance.value}" if task.importance else ""
    return f"  [{check}] {task.title}{estimate}{importance}  <{task.id}>"


def _render(board: Board) -> None:
    for row in board.rows:
        match row:
            case HeaderRow(label=label, stats=stats):
                parts = [f"{stats.task_count} tasks"]
                if stats.estimate_minutes:
                    parts.append(format_minutes(stats.estimate_minutes))
                if stats.completed_count:
                    parts.append(f"{stats.completed_count} done")
                if stats.capacity_remaining is not None:
                    parts.append(f"{format_minutes(stats.capacity_remaining)} free")
                click.echo(f"\n### {label} ({', '.join(parts)})")
            case SubheaderRow(label=label, minutes_left=left, estimate_minutes=estimate):
                click.echo(f"  -- {label}: {format_minutes(estimate)} of {format_minutes(left)} left")
            case TaskRow():
                click.echo(_format_task(row))


def _board_json(board: Board) -> list[dict]:
    return [
        {
            "key": g.key,
            "label": g.label,
            "task_count": g.task_count,
            "estimate_minutes": g.estimate_minutes,
            "completed_count": g.completed_count,
            "capacity_remaining": g.capacity_remaining,
            "tasks": [r.task.id for r in board.task_rows() if r.group == g.key],
        }
        for g in board.groups
    ]


@main.command()
@click.option("--group-by", type=click.Choice(GROUP_BY_MODES), default=None, help="Grouping mode")
@click.option("--preset", type=click.Choice([p.value for p in DatePreset]), default="all")
@click.option("--date", "on_date", default=None, help="Day for the specific-date preset (YYYY-MM-DD)")
@click.option("--from", "range_start", default=None, help="Range start for the date-range preset")
@click.option("--to", "range_end", default=None, help="Range end for the date-range preset")
@click.option("--title", default="", help="Title search; '*' is a wildcard")
@click.option("--status", multiple=True, help="Allowed status (repeatable)")
@click.option("--type", "types", multiple=True, help="Allowed type (repeatable)")
@click.option("--importance", multiple=True, help="Allowed importance (repeatable)")
@click.option("--focus", default=None, help="Show only this group key")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def board(group_by, preset, on_date, range_start, range_end, title, status, types, importance, focus, as_json):
    """Show tasks grouped into buckets."""
    config = load_config()
    date_range = None
    if range_start and range_end:
        date_range = DateRange(
            start_of_day(datetime.fromisoformat(range_start)),
            end_of_day(datetime.fromisoformat(range_end)),
        )
    state = BoardState(
        filter=FilterState(
            filters=ColumnFilters(
                type=MultiselectFilter(frozenset(types)),
                title=TextFilter(title),
                status=MultiselectFilter(frozenset(status)),
                importance=MultiselectFilter(frozenset(importance)),
            ),
            date_preset=DatePreset(preset),
            specific_date=_parse_day(on_date),
            date_range=date_range,
        ),
        group_by=GroupBy(group_by or config.group_by),
        focused_group=focus,
        show_empty_days=config.show_empty_days,
    )

    try:
        result = load_board(get_store(config), config, state)
    except STORE_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(_board_json(result), indent=2))
        return

    if not result.visible:
        click.echo("No tasks match.")
        return
    _render(result)


@main.command()
@click.argument("active_id")
@click.option("--onto", "onto_id", default=None, help="Drop onto this task")
@click.option("--period", type=click.Choice([p.value for p in PERIODS]), default=None,
              help="Drop onto today's period subheader")
@click.option("--group-by", type=click.Choice(GROUP_BY_MODES), default=None)
@click.option("--dry-run", is_flag=True, help="Report the outcome without saving")
def move(active_id, onto_id, period, group_by, dry_run):
    """Move a task next to another task or into a period of today."""
    if bool(onto_id) == bool(period):
        click.echo("Error: give exactly one of --onto or --period", err=True)
        sys.exit(2)

    config = load_config()
    target = TaskTarget(onto_id) if onto_id else SubheaderTarget(TimeOfDay(period))
    try:
        outcome = move_task(
            get_store(config),
            config,
            active_id,
            target,
            GroupBy(group_by or config.group_by),
            dry_run=dry_run,
        )
    except STORE_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if isinstance(outcome, MoveRejected):
        click.echo(f"Rejected: {outcome.reason.value}")
        sys.exit(1)

    for update in outcome.updates:
        changes = ", ".join(f"{k}={_display(v)}" for k, v in update.changes.items())
        click.echo(f"{update.task_id}: {changes}")
    if outcome.order is not None:
        click.echo("Order updated.")
    if dry_run:
        click.echo("(dry run, nothing saved)")


def _display(value) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, TimeOfDay):
        return value.value
    return "none" if value is None else str(value)


@main.command()
@click.argument("active_id")
@click.option("--up", "direction", flag_value=-1, help="Shift up one row")
@click.option("--down", "direction", flag_value=1, help="Shift down one row")
def nudge(active_id, direction):
    """Shift a task one visible row up or down."""
    if direction is None:
        click.echo("Error: give --up or --down", err=True)
        sys.exit(2)

    config = load_config()
    try:
        result = nudge_task(get_store(config), config, active_id, direction, default_state(config))
    except STORE_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if isinstance(result.outcome, MoveRejected):
        click.echo(f"Rejected: {result.outcome.reason.value}")
        sys.exit(1)
    click.echo(f"Moved to row {result.active_index + 1}.")


@main.command()
def capacity():
    """Show committed and free minutes per bucket."""
    config = load_config()
    state = BoardState(group_by=GroupBy.DATE)
    try:
        result = load_board(get_store(config), config, state)
    except STORE_ERRORS as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ledger = result.ledger
    click.echo(f"Daily budget: {format_minutes(ledger.max_minutes_per_day)}")
    for group in DateGroup:
        committed = ledger.committed(group)
        if not committed:
            continue
        click.echo(
            f"  {get_group_label(group):10} {format_minutes(committed):>8} committed, "
            f"{format_minutes(ledger.remaining(group))} free"
        )

    click.echo("Today:")
    for period in PERIODS:
        click.echo(
            f"  {PERIOD_LABELS[period]:10} {format_minutes(ledger.period_committed(period)):>8} of "
            f"{format_minutes(ledger.period_budget(period))}"
        )


if __name__ == "__main__":
    main()
