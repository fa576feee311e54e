"""Tests for column filter matching."""

import re
from datetime import datetime
from unittest.mock import patch

import pytest

from taskboard.core.dates import DatePreset
from taskboard.core.filters import (
    ColumnFilters,
    DateFilter,
    FilterState,
    MultiselectFilter,
    TextFilter,
    TitleEnhancedFilter,
    filter_tasks,
    has_active_filters,
    matches_date_filter,
    matches_multiselect,
    matches_text_filter,
    matches_title_enhanced_filter,
    task_matches_filters,
    wildcard_match,
)
from taskboard.core.tasks import Task, TaskImportance, TaskStatus, TaskType


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 14, 0)


@pytest.fixture
def sample_tasks(now):
    return [
        Task(id="1", title="Buy groceries", type=TaskType.PERSONAL, due_date=now),
        Task(id="2", title="Call mom", type=TaskType.PERSONAL, status=TaskStatus.DONE),
        Task(
            id="3",
            title="Buy flowers",
            type=TaskType.JARDIN_CASA,
            importance=TaskImportance.HIGH,
            due_date=datetime(2025, 1, 20),
        ),
    ]


class TestMultiselect:
    def test_absent_filter(self):
        assert matches_multiselect(None, "todo") is True

    def test_empty_selection_is_unconstrained(self):
        assert matches_multiselect(MultiselectFilter(), "todo") is True

    def test_membership(self):
        f = MultiselectFilter(frozenset({"todo", "blocked"}))
        assert matches_multiselect(f, "blocked") is True
        assert matches_multiselect(f, "done") is False

    def test_other_filter_kind_is_ignored(self):
        assert matches_multiselect(TextFilter("x"), "todo") is True


class TestTextFilter:
    def test_empty_pattern(self):
        assert matches_text_filter(TextFilter("   "), "anything") is True

    def test_substring_case_insensitive(self):
        assert matches_text_filter(TextFilter("GROC"), "Buy groceries") is True
        assert matches_text_filter(TextFilter("milk"), "Buy groceries") is False

    def test_wildcard_scenario(self):
        titles = ["Buy groceries", "Call mom", "Buy flowers"]
        f = TextFilter("Buy*")
        assert [t for t in titles if matches_text_filter(f, t)] == ["Buy groceries", "Buy flowers"]

    def test_wildcard_is_anchored(self):
        assert matches_text_filter(TextFilter("groc*"), "Buy groceries") is False
        assert matches_text_filter(TextFilter("*groc*"), "Buy groceries") is True

    def test_wildcard_escapes_metacharacters(self):
        assert wildcard_match("cost (est.) 5$", "cost (est.)*") is True
        assert wildcard_match("cost Xest.Y 5$", "cost (est.)*") is False

    def test_wildcard_in_middle(self):
        assert wildcard_match("Buy red flowers", "buy*flowers") is True
        assert wildcard_match("Buy red flowers today", "buy*flowers") is False

    def test_rejected_expression_degrades_to_substring(self):
        with patch("taskboard.core.filters.re.fullmatch", side_effect=re.error("bad pattern")):
            assert wildcard_match("Buy red flowers", "red fl*") is True
            assert wildcard_match("Buy red flowers", "blue*") is False


class TestDateFilter:
    def test_absent_value(self, now):
        assert matches_date_filter(DateFilter(None), None) is True
        assert matches_date_filter(None, now) is True

    def test_task_without_date(self, now):
        assert matches_date_filter(DateFilter(now), None) is False

    def test_same_day(self, now):
        assert matches_date_filter(DateFilter(datetime(2025, 1, 15)), now) is True
        assert matches_date_filter(DateFilter(datetime(2025, 1, 16)), now) is False


class TestTitleEnhancedFilter:
    def test_selection_is_authoritative(self, sample_tasks):
        f = TitleEnhancedFilter(search_text="Buy", selected_task_ids=frozenset({"2"}))
        assert [t.id for t in sample_tasks if matches_title_enhanced_filter(f, t)] == ["2"]

    def test_empty_selection_matches_nothing(self, sample_tasks):
        f = TitleEnhancedFilter(selected_task_ids=frozenset())
        assert not any(matches_title_enhanced_filter(f, t) for t in sample_tasks)

    def test_falls_back_to_search_text(self, sample_tasks):
        f = TitleEnhancedFilter(search_text="buy*")
        assert [t.id for t in sample_tasks if matches_title_enhanced_filter(f, t)] == ["1", "3"]

    def test_blank_search(self, sample_tasks):
        f = TitleEnhancedFilter(search_text=" ")
        assert all(matches_title_enhanced_filter(f, t) for t in sample_tasks)


class TestComposite:
    def test_no_filters(self, sample_tasks, now):
        assert filter_tasks(sample_tasks, FilterState(), now) == sample_tasks

    def test_and_of_columns(self, sample_tasks, now):
        state = FilterState(
            filters=ColumnFilters(
                type=MultiselectFilter(frozenset({"personal"})),
                title=TextFilter("buy"),
            )
        )
        assert [t.id for t in filter_tasks(sample_tasks, state, now)] == ["1"]

    def test_importance_empty_category(self, sample_tasks, now):
        state = FilterState(filters=ColumnFilters(importance=MultiselectFilter(frozenset({""}))))
        assert [t.id for t in filter_tasks(sample_tasks, state, now)] == ["1", "2"]

    def test_preset_applies(self, sample_tasks, now):
        state = FilterState(date_preset=DatePreset.TODAY)
        assert [t.id for t in filter_tasks(sample_tasks, state, now)] == ["1"]

    def test_due_date_column_skipped_under_preset(self, sample_tasks, now):
        state = FilterState(
            filters=ColumnFilters(due_date=DateFilter(datetime(2025, 1, 20))),
            date_preset=DatePreset.TODAY,
        )
        assert [t.id for t in filter_tasks(sample_tasks, state, now)] == ["1"]

    def test_due_date_column_applies_without_preset(self, sample_tasks, now):
        state = FilterState(filters=ColumnFilters(due_date=DateFilter(datetime(2025, 1, 20))))
        assert [t.id for t in filter_tasks(sample_tasks, state, now)] == ["3"]

    def test_title_column_accepts_enhanced(self, sample_tasks, now):
        state = FilterState(
            filters=ColumnFilters(title=TitleEnhancedFilter(selected_task_ids=frozenset({"3"})))
        )
        assert task_matches_filters(sample_tasks[2], state, now) is True
        assert task_matches_filters(sample_tasks[0], state, now) is False

    def test_preserves_order(self, sample_tasks, now):
        reversed_tasks = list(reversed(sample_tasks))
        state = FilterState(filters=ColumnFilters(title=TextFilter("buy")))
        assert [t.id for t in filter_tasks(reversed_tasks, state, now)] == ["3", "1"]


class TestHasActiveFilters:
    def test_default_state(self):
        assert has_active_filters(FilterState()) is False

    def test_blank_filters_are_inactive(self):
        state = FilterState(
            filters=ColumnFilters(
                type=MultiselectFilter(),
                title=TextFilter("  "),
                due_date=DateFilter(None),
            )
        )
        assert has_active_filters(state) is False

    def test_preset(self):
        assert has_active_filters(FilterState(date_preset=DatePreset.THIS_WEEK)) is True

    def test_selection(self):
        state = FilterState(filters=ColumnFilters(title=TitleEnhancedFilter(selected_task_ids=frozenset())))
        assert has_active_filters(state) is True
