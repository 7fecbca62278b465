# src/taskbell/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The reminder engine depends on Protocols instead of concrete implementations.
This keeps storage, presentation and timekeeping swappable and makes testing
easier (virtual clock + scheduler instead of real waits).
"""

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from ..tasks.task_models import Task

TIMING_NOW = "now"


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class TimerScheduler(Protocol):
    """
    Single-threaded event scheduler accepting (delay, callback) pairs.

    asyncio's event loop satisfies this directly.
    """

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable: ...


class Notifier(Protocol):
    """
    Presentation-side port: how the engine surfaces a fired reminder.

    timing_label is the early-warning label (e.g. "2 minutes before") or "now".
    The notifier never calls back into the engine.
    """

    def notify(self, task: Task, timing_label: str) -> None: ...


class TaskRepo(Protocol):
    # Engine API (read-only)
    def list_tasks(self) -> list[Task]: ...
    def get_task(self, task_id: int) -> Task | None: ...

    # Mutation API (front ends)
    def add_task(
            self,
            *,
            text: str,
            kind: Any = None,  # TaskKind
            mode: Any = None,  # ReminderMode | None
            due_date: str | None = None,
            due_time: str | None = None,
            start_date: str | None = None,
            end_date: str | None = None,
            days_of_week: Iterable[int] | None = None,
    ) -> int: ...

    def update_task(
            self,
            task_id: int,
            *,
            text: str | None = None,
            due_date: str | None = None,
            due_time: str | None = None,
    ) -> Task: ...

    def delete_task(self, task_id: int) -> None: ...
    def count_tasks(self) -> int: ...
