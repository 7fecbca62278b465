# src/taskbell/tasks/task_api.py

"""
High-level task operations used by front ends.

Each helper mutates the store first and then tells the engine about it, so
the live timers always follow the stored reminders:
- create/edit -> engine.schedule_reminder(task)
- delete      -> engine.cancel_reminder(task_id) before the row goes away
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..core.state import AppState
from .task_models import ReminderMode, Task, TaskKind

logger = logging.getLogger(__name__)


def _created(state: AppState, task_id: int) -> Task:
    task = state.task_store.get_task(task_id)
    if task is None:
        raise KeyError(task_id)
    if task.is_reminder:
        state.engine.schedule_reminder(task)
    return task


def add_plain_task(
    state: AppState,
    text: str,
    *,
    due_date: str | None = None,
    due_time: str | None = None,
) -> Task:
    task_id = state.task_store.add_task(
        text=text, kind=TaskKind.PLAIN, due_date=due_date, due_time=due_time
    )
    return _created(state, task_id)


def add_once_reminder(state: AppState, text: str, *, due_date: str, due_time: str) -> Task:
    task_id = state.task_store.add_task(
        text=text,
        kind=TaskKind.REMINDER,
        mode=ReminderMode.ONCE,
        due_date=due_date,
        due_time=due_time,
    )
    return _created(state, task_id)


def add_weekly_reminder(
    state: AppState,
    text: str,
    *,
    start_date: str,
    end_date: str,
    due_time: str,
    days_of_week: Iterable[int],
) -> Task:
    task_id = state.task_store.add_task(
        text=text,
        kind=TaskKind.REMINDER,
        mode=ReminderMode.WEEKLY,
        start_date=start_date,
        end_date=end_date,
        due_time=due_time,
        days_of_week=days_of_week,
    )
    return _created(state, task_id)


def edit_task(
    state: AppState,
    task_id: int,
    *,
    text: str | None = None,
    due_date: str | None = None,
    due_time: str | None = None,
) -> Task:
    task = state.task_store.update_task(task_id, text=text, due_date=due_date, due_time=due_time)
    # Re-arm with the edited record; the text shown by the next notification changes too.
    if task.is_reminder:
        state.engine.schedule_reminder(task)
    return task


def delete_task(state: AppState, task_id: int) -> None:
    state.engine.cancel_reminder(task_id)
    state.task_store.delete_task(task_id)
    logger.info("Task %s deleted", task_id)
