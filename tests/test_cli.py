"""Tests for the click CLI."""

import json
from datetime import datetime, timedelta
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from taskboard.adapters.api_store import AuthenticationError
from taskboard.adapters.file_store import FileTaskStore
from taskboard.cli import main
from taskboard.config import Config
from taskboard.core.tasks import Task


@pytest.fixture
def config(tmp_path):
    return Config(task_file=str(tmp_path / "tasks.json"), max_minutes_per_day=480)


@pytest.fixture
def store(config):
    today = datetime.now()
    store = FileTaskStore(config.task_path)
    store.save_all(
        [
            Task(id="a", title="Buy groceries", estimate=30, due_date=today),
            Task(id="b", title="Call mom", due_date=today - timedelta(days=8)),
            Task(id="c", title="Buy flowers"),
            Task(id="d", title="Huge", estimate=600, due_date=today + timedelta(days=8)),
        ]
    )
    return store


@pytest.fixture
def runner(config, store):
    with patch("taskboard.cli.load_config", return_value=config):
        yield CliRunner()


class TestBoard:
    def test_renders_groups(self, runner):
        result = runner.invoke(main, ["board"])
        assert result.exit_code == 0
        assert "### Today" in result.output
        assert "### Past" in result.output
        assert "Buy groceries" in result.output

    def test_json(self, runner):
        result = runner.invoke(main, ["board", "--json", "--group-by", "none"])
        assert result.exit_code == 0
        assert json.loads(result.output) == []

    def test_title_wildcard(self, runner):
        result = runner.invoke(main, ["board", "--title", "Buy*", "--json"])
        data = json.loads(result.output)
        ids = [i for g in data for i in g["tasks"]]
        assert sorted(ids) == ["a", "c"]

    def test_preset_without_matches(self, runner):
        result = runner.invoke(main, ["board", "--preset", "tomorrow"])
        assert result.exit_code == 0
        assert "No tasks match." in result.output

    def test_store_error(self, runner):
        with patch("taskboard.cli.load_board", side_effect=AuthenticationError("no token")):
            result = runner.invoke(main, ["board"])
        assert result.exit_code == 1
        assert "Error: no token" in result.output


class TestMove:
    def test_requires_one_target(self, runner):
        result = runner.invoke(main, ["move", "a"])
        assert result.exit_code == 2

    def test_rejected(self, runner):
        result = runner.invoke(main, ["move", "a", "--onto", "b"])
        assert result.exit_code == 1
        assert "Rejected: not-a-drop-target" in result.output

    def test_dry_run(self, runner, store):
        result = runner.invoke(main, ["move", "c", "--onto", "a", "--dry-run"])
        assert result.exit_code == 0
        assert "dry run" in result.output
        assert store.fetch_all()[2].due_date is None

    def test_saves(self, runner, store):
        result = runner.invoke(main, ["move", "c", "--onto", "a"])
        assert result.exit_code == 0
        moved = next(t for t in store.fetch_all() if t.id == "c")
        assert moved.due_date is not None


class TestNudge:
    def test_requires_direction(self, runner):
        result = runner.invoke(main, ["nudge", "a"])
        assert result.exit_code == 2

    def test_unknown_task(self, runner):
        result = runner.invoke(main, ["nudge", "zzz", "--down"])
        assert result.exit_code == 1
        assert "Error" in result.output


class TestCapacity:
    def test_prints_budget(self, runner):
        result = runner.invoke(main, ["capacity"])
        assert result.exit_code == 0
        assert "Daily budget: 8h" in result.output
        assert "Morning" in result.output
