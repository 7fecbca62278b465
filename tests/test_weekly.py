# tests/test_weekly.py

from __future__ import annotations

import pytest

from taskbell.tasks import weekly
from taskbell.tasks.weekly import next_weekly_occurrence

from .fakes import local_ts, make_weekly

# 2024-06-03 is a Monday; the window runs Monday..Sunday of that week.


def test_same_day_slot_before_due_time() -> None:
    task = make_weekly()
    now = local_ts(2024, 6, 3, 8, 0)
    assert next_weekly_occurrence(task, now) == local_ts(2024, 6, 3, 9, 0)


def test_same_day_slot_already_passed_moves_to_next_day() -> None:
    task = make_weekly()
    now = local_ts(2024, 6, 3, 9, 30)
    assert next_weekly_occurrence(task, now) == local_ts(2024, 6, 4, 9, 0)


def test_exactly_at_due_time_is_not_strictly_after() -> None:
    task = make_weekly()
    now = local_ts(2024, 6, 3, 9, 0)
    assert next_weekly_occurrence(task, now) == local_ts(2024, 6, 4, 9, 0)


def test_after_end_of_window_returns_none() -> None:
    task = make_weekly()
    assert next_weekly_occurrence(task, local_ts(2024, 6, 10, 0, 0)) is None
    assert next_weekly_occurrence(task, local_ts(2024, 6, 9, 23, 59, 59) + 1) is None


def test_last_weekday_slot_then_exhausted() -> None:
    task = make_weekly()
    # Friday after 09:00: Sat/Sun are not selected, so nothing is left.
    assert next_weekly_occurrence(task, local_ts(2024, 6, 7, 9, 1)) is None
    assert next_weekly_occurrence(task, local_ts(2024, 6, 7, 8, 0)) == local_ts(2024, 6, 7, 9, 0)


def test_now_before_start_date_starts_at_window() -> None:
    task = make_weekly(start_date="2024-06-05", end_date="2024-06-30", days_of_week=(1,))
    # Wednesday start, Mondays only -> first Monday in window.
    now = local_ts(2024, 5, 1, 12, 0)
    assert next_weekly_occurrence(task, now) == local_ts(2024, 6, 10, 9, 0)


def test_skips_unselected_days() -> None:
    task = make_weekly(end_date="2024-06-30", days_of_week=(0, 6))
    now = local_ts(2024, 6, 3, 8, 0)
    assert next_weekly_occurrence(task, now) == local_ts(2024, 6, 8, 9, 0)


def test_idempotent_for_same_now() -> None:
    task = make_weekly(end_date="2024-12-31", days_of_week=(2, 4))
    now = local_ts(2024, 7, 17, 10, 15)
    first = next_weekly_occurrence(task, now)
    assert first is not None
    assert next_weekly_occurrence(task, now) == first


@pytest.mark.parametrize(
    "fields",
    [
        {"start_date": None},
        {"end_date": ""},
        {"due_time": None},
        {"days_of_week": ()},
        {"start_date": "2024-13-01"},
        {"end_date": "not-a-date"},
        # Malformed time invalidates the reminder rather than defaulting to midnight.
        {"due_time": "9h"},
    ],
)
def test_missing_or_malformed_fields_return_none(fields) -> None:
    task = make_weekly(**fields)
    assert next_weekly_occurrence(task, local_ts(2024, 6, 3, 8, 0)) is None


def test_window_years_ahead_is_found() -> None:
    # The walk begins at start_date, not at now.
    task = make_weekly(start_date="2030-01-01", end_date="2035-01-01", days_of_week=(1,))
    assert next_weekly_occurrence(task, local_ts(2024, 6, 3)) == local_ts(2030, 1, 7, 9, 0)


def test_walk_stops_after_max_search_days(monkeypatch: pytest.MonkeyPatch) -> None:
    visited = []
    real_weekday = weekly.sunday_weekday

    def counting(day):
        visited.append(day)
        return real_weekday(day)

    monkeypatch.setattr(weekly, "sunday_weekday", counting)

    # Window far longer than the cap; the day set never matches.
    never = make_weekly(start_date="2024-06-03", end_date="2030-01-01", days_of_week=(9,))
    assert next_weekly_occurrence(never, local_ts(2024, 6, 3)) is None
    assert len(visited) == weekly.MAX_SEARCH_DAYS


def test_slot_beyond_search_cap_is_not_found(monkeypatch: pytest.MonkeyPatch) -> None:
    friday_only = make_weekly(days_of_week=(5,))
    now = local_ts(2024, 6, 3, 8, 0)

    monkeypatch.setattr(weekly, "MAX_SEARCH_DAYS", 4)
    assert next_weekly_occurrence(friday_only, now) is None

    monkeypatch.setattr(weekly, "MAX_SEARCH_DAYS", 5)
    assert next_weekly_occurrence(friday_only, now) == local_ts(2024, 6, 7, 9, 0)
