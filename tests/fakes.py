# tests/fakes.py

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from taskbell.core.ports import Notifier
from taskbell.tasks.task_models import ReminderMode, Task, TaskKind


def local_ts(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> float:
    """Epoch seconds for a local wall-clock moment."""
    return datetime(year, month, day, hour, minute, second).timestamp()


class FakeClock:
    """Virtual wall clock (epoch seconds). Call it to read the time."""

    def __init__(self, now: float) -> None:
        self.now = float(now)

    def __call__(self) -> float:
        return self.now


class FakeTimerHandle:
    def __init__(self, when: float, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """
    Deterministic stand-in for the asyncio loop's call_later.

    Nothing runs until advance() moves the shared FakeClock forward; due
    callbacks then run in time order, with the clock set to each one's due time.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self._queue: list[tuple[float, int, FakeTimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> FakeTimerHandle:
        handle = FakeTimerHandle(self.clock.now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    @property
    def pending(self) -> list[FakeTimerHandle]:
        return sorted(
            (h for _, _, h in self._queue if not h.cancelled), key=lambda h: h.when
        )

    def advance(self, seconds: float) -> None:
        self.advance_to(self.clock.now + seconds)

    def advance_to(self, target: float) -> None:
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self.clock.now = max(self.clock.now, when)
            handle.callback(*handle.args)
        self.clock.now = max(self.clock.now, target)


@dataclass(slots=True)
class Notification:
    at: float
    task_id: int
    text: str
    timing: str


@dataclass(slots=True)
class RecordingNotifier(Notifier):
    """Fake Notifier that records every fire with the virtual time it happened at."""

    clock: Callable[[], float]
    sent: list[Notification] = field(default_factory=list)

    def notify(self, task: Task, timing_label: str) -> None:
        self.sent.append(
            Notification(at=self.clock(), task_id=task.id, text=task.text, timing=timing_label)
        )

    @property
    def timings(self) -> list[str]:
        return [n.timing for n in self.sent]


class FakeTaskRepo:
    """In-memory read side of the task store, enough for the engine."""

    def __init__(self, tasks: list[Task]) -> None:
        self.tasks = {t.id: t for t in tasks}

    def list_tasks(self) -> list[Task]:
        return list(self.tasks.values())

    def get_task(self, task_id: int) -> Task | None:
        return self.tasks.get(task_id)


def make_task(task_id: int = 1, text: str = "ping", **fields: Any) -> Task:
    """Build a Task record directly (bypassing store validation)."""
    fields.setdefault("kind", TaskKind.REMINDER)
    return Task(id=task_id, text=text, created_at=0.0, updated_at=0.0, **fields)


def make_once(
    task_id: int = 1,
    due_date: str | None = "2024-06-03",
    due_time: str | None = "09:00",
    *,
    text: str = "ping",
) -> Task:
    return make_task(task_id, text, mode=ReminderMode.ONCE, due_date=due_date, due_time=due_time)


def make_weekly(
    task_id: int = 1,
    *,
    start_date: str | None = "2024-06-03",
    end_date: str | None = "2024-06-09",
    due_time: str | None = "09:00",
    days_of_week: tuple[int, ...] = (1, 2, 3, 4, 5),
    text: str = "ping",
) -> Task:
    return make_task(
        task_id,
        text,
        mode=ReminderMode.WEEKLY,
        start_date=start_date,
        end_date=end_date,
        due_time=due_time,
        days_of_week=days_of_week,
    )
