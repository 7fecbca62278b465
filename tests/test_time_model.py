# tests/test_time_model.py

from __future__ import annotations

from datetime import date

import pytest

from taskbell.tasks.task_models import TaskKind
from taskbell.tasks.time_model import (
    describe_when,
    format_due,
    format_weekly_summary,
    lead_label,
    parse_due_timestamp,
    sunday_weekday,
)

from .fakes import local_ts, make_once, make_task, make_weekly


def test_parse_due_timestamp_local_wall_clock() -> None:
    assert parse_due_timestamp("2024-06-03", "09:00") == local_ts(2024, 6, 3, 9, 0)


@pytest.mark.parametrize(
    ("due_date", "due_time"),
    [
        ("2024-02-30", "10:00"),
        ("2024-06-03", "25:00"),
        ("2024-06-03", "nine"),
        ("", "10:00"),
        ("2024-06-03", None),
        (None, None),
    ],
)
def test_parse_due_timestamp_rejects_invalid(due_date, due_time) -> None:
    assert parse_due_timestamp(due_date, due_time) is None


def test_format_due_variants() -> None:
    assert format_due("2024-06-03", "09:00") == "Due: 2024-06-03 09:00"
    assert format_due("2024-06-03", "") == "Due: 2024-06-03"
    assert format_due(None, "09:00") == "Due: 09:00"
    assert format_due("", None) == ""


def test_sunday_is_zero() -> None:
    assert sunday_weekday(date(2024, 6, 2)) == 0  # Sunday
    assert sunday_weekday(date(2024, 6, 3)) == 1  # Monday
    assert sunday_weekday(date(2024, 6, 8)) == 6  # Saturday


def test_weekly_summary() -> None:
    task = make_weekly(days_of_week=(5, 1, 2, 3, 4))
    assert format_weekly_summary(task) == "Weekly Mon–Fri, 2024-06-03 → 2024-06-09 at 09:00"

    task = make_weekly(days_of_week=(3, 1))
    assert format_weekly_summary(task).startswith("Weekly Mon, Wed,")

    assert format_weekly_summary(make_once()) == ""


def test_describe_when() -> None:
    assert describe_when(make_weekly()) == "Due at 09:00"
    assert describe_when(make_once()) == "Due: 2024-06-03 09:00"
    assert describe_when(make_task(kind=TaskKind.PLAIN)) == "No time specified"


def test_lead_label() -> None:
    assert lead_label(120) == "2 minutes before"
    assert lead_label(60) == "1 minute before"
    assert lead_label(30) == "30 seconds before"
