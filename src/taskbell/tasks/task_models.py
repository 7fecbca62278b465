# src/taskbell/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TaskKind(StrEnum):
    """What a stored item is: a plain to-do or something that must notify."""

    PLAIN = "task"
    REMINDER = "reminder"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskKind:
        if not raw:
            return cls.PLAIN
        try:
            return cls(raw)
        except Exception:
            return cls.PLAIN


class ReminderMode(StrEnum):
    ONCE = "once"
    WEEKLY = "weekly"

    @classmethod
    def from_db(cls, raw: str | None) -> ReminderMode | None:
        if not raw:
            return None
        try:
            return cls(raw)
        except Exception:
            return None


@dataclass(slots=True)
class Task:
    """
    One stored item.

    Field usage by kind/mode:
    - plain task: text, optional due_date/due_time (display only)
    - once reminder: due_date + due_time
    - weekly reminder: start_date, end_date, due_time, days_of_week (Sunday = 0)
    """

    id: int
    text: str
    kind: TaskKind
    created_at: float
    updated_at: float

    mode: ReminderMode | None = None
    due_date: str | None = None
    due_time: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    days_of_week: tuple[int, ...] = ()

    @property
    def is_reminder(self) -> bool:
        return self.kind == TaskKind.REMINDER

    @property
    def is_weekly(self) -> bool:
        return self.is_reminder and self.mode == ReminderMode.WEEKLY
