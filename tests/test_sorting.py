from types import SimpleNamespace

import pytest

from services.hierarchy import activities_for
from services.metrics import compute_row_metrics
from services.sorting import SortDirection, SortKey, SortState, sort_rows
from utils.exceptions import ValidationError


@pytest.fixture
def rows(tasks, profiles, now):
    return [
        SimpleNamespace(id=task.id, metrics=compute_row_metrics(task, now, profiles, activities_for(task.id, tasks)))
        for task in tasks if task.is_project
    ]


def order(rows, key, direction=SortDirection.ASC):
    return [row.id for row in sort_rows(rows, SortState(key=key, direction=direction))]


@pytest.mark.parametrize("key,expected", [
    (SortKey.TITLE, ["p3", "p2", "p1"]),
    (SortKey.ASSIGNEE_NAME, ["p1", "p2", "p3"]),
    (SortKey.START_DATE, ["p1", "p2", "p3"]),
    (SortKey.BUSINESS_DAYS, ["p3", "p1", "p2"]),
    (SortKey.CALENDAR_DAYS, ["p3", "p1", "p2"]),
    (SortKey.END_DATE, ["p1", "p2", "p3"]),
    (SortKey.PROGRESS, ["p3", "p1", "p2"]),
    (SortKey.STATUS, ["p2", "p1", "p3"]),
])
def test_ascending_by_key(rows, key, expected):
    assert order(rows, key) == expected


def test_no_key_keeps_input_order(rows):
    assert [row.id for row in sort_rows(rows, SortState())] == ["p1", "p2", "p3"]


def test_ties_keep_prior_order_in_both_directions(rows):
    # p2 and p3 both resolve their end to "now"
    assert order(rows, SortKey.END_DATE) == ["p1", "p2", "p3"]
    assert order(rows, SortKey.END_DATE, SortDirection.DESC) == ["p2", "p3", "p1"]


@pytest.mark.parametrize("key", list(SortKey))
def test_idempotent(rows, key):
    state = SortState(key=key)
    once = sort_rows(rows, state)
    assert sort_rows(once, state) == once


def test_descending_reverses_distinct_rows(rows):
    ascending = order(rows, SortKey.PROGRESS)
    assert order(rows, SortKey.PROGRESS, SortDirection.DESC) == list(reversed(ascending))


class TestSortState:
    def test_new_key_starts_ascending(self):
        state = SortState().toggle("progress")
        assert state.key == SortKey.PROGRESS
        assert state.direction == SortDirection.ASC

    def test_same_key_flips_direction(self):
        state = SortState().toggle("title").toggle("title")
        assert state.descending
        assert not state.toggle("title").descending

    def test_switching_key_resets_direction(self):
        state = SortState(key=SortKey.TITLE, direction=SortDirection.DESC).toggle(SortKey.STATUS)
        assert state == SortState(key=SortKey.STATUS)

    def test_unknown_key(self):
        with pytest.raises(ValidationError):
            SortState().toggle("priority_rank")

    def test_dict_round_trip(self):
        state = SortState(key=SortKey.END_DATE, direction=SortDirection.DESC)
        assert state.to_dict() == {"key": "end_date", "direction": "desc"}
        assert SortState.from_dict(state.to_dict()) == state
        assert SortState.from_dict(None) == SortState()
