# src/taskbell/tasks/time_model.py

"""
Pure date/time helpers for reminder records.

All instants are epoch seconds (float) computed from local wall-clock time;
no timezone other than the host's local one is involved.
"""

from __future__ import annotations

from datetime import date, datetime, time

from .task_models import ReminderMode, Task

DAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")
WORKDAYS = (1, 2, 3, 4, 5)


def parse_date(raw: str | None) -> date | None:
    """Strict calendar date (YYYY-MM-DD); None when absent or not a real date."""
    if not raw or not raw.strip():
        return None
    try:
        return date.fromisoformat(raw.strip())
    except ValueError:
        return None


def parse_time_of_day(raw: str | None) -> time | None:
    """Local time-of-day (HH:MM or HH:MM:SS); None when absent or malformed."""
    if not raw or not raw.strip():
        return None
    try:
        parsed = time.fromisoformat(raw.strip())
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        return None
    return parsed


def local_timestamp(day: date, at: time) -> float:
    return datetime.combine(day, at).timestamp()


def sunday_weekday(day: date) -> int:
    """Weekday index with Sunday = 0 ... Saturday = 6."""
    return (day.weekday() + 1) % 7


def parse_due_timestamp(due_date: str | None, due_time: str | None) -> float | None:
    """Combine a calendar date and a local time-of-day into an absolute instant."""
    day = parse_date(due_date)
    at = parse_time_of_day(due_time)
    if day is None or at is None:
        return None
    try:
        return local_timestamp(day, at)
    except (OverflowError, OSError, ValueError):
        return None


def format_due(due_date: str | None, due_time: str | None) -> str:
    due_date = (due_date or "").strip()
    due_time = (due_time or "").strip()
    if due_date and due_time:
        return f"Due: {due_date} {due_time}"
    if due_date:
        return f"Due: {due_date}"
    if due_time:
        return f"Due: {due_time}"
    return ""


def format_days(days: tuple[int, ...]) -> str:
    selected = sorted(set(days))
    if tuple(selected) == WORKDAYS:
        return "Mon–Fri"
    return ", ".join(DAY_NAMES[d] for d in selected if 0 <= d < len(DAY_NAMES))


def format_weekly_summary(task: Task) -> str:
    """One-line description of a weekly reminder, e.g. 'Weekly Mon–Fri, A → B at 09:00'."""
    if task.mode != ReminderMode.WEEKLY:
        return ""
    text = f"Weekly {format_days(task.days_of_week)}"
    if task.start_date and task.end_date:
        text += f", {task.start_date} → {task.end_date}"
    if task.due_time:
        text += f" at {task.due_time}"
    return text


def describe_when(task: Task) -> str:
    """Detail line shown alongside a fired reminder."""
    if task.mode == ReminderMode.WEEKLY:
        label = f"Due at {task.due_time}" if task.due_time else ""
    else:
        label = format_due(task.due_date, task.due_time)
    return label or "No time specified"


def lead_label(seconds: float) -> str:
    """Timing label for the early warning, e.g. 120 -> '2 minutes before'."""
    whole = int(round(seconds))
    if whole >= 60 and whole % 60 == 0:
        minutes = whole // 60
        unit = "minute" if minutes == 1 else "minutes"
        return f"{minutes} {unit} before"
    unit = "second" if whole == 1 else "seconds"
    return f"{whole} {unit} before"
