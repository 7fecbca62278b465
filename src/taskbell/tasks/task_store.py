# src/taskbell/tasks/task_store.py

from __future__ import annotations

import contextlib
import json
import logging
import re
import sqlite3
import time
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from .task_models import ReminderMode, Task, TaskKind
from .time_model import parse_date, parse_time_of_day

logger = logging.getLogger(__name__)

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(r"^\d{2}:\d{2}$")


def _clean(value: str | None) -> str:
    return (value or "").strip()


def _check_date(value: str, what: str) -> None:
    if not _DATE_RE.match(value) or parse_date(value) is None:
        raise ValueError(f"Invalid {what}: {value!r}. Use YYYY-MM-DD.")


def _check_time(value: str, what: str = "time") -> None:
    if not _TIME_RE.match(value) or parse_time_of_day(value) is None:
        raise ValueError(f"Invalid {what}: {value!r}. Use HH:MM.")


def normalize_days(days: Iterable[int] | None) -> tuple[int, ...]:
    out: set[int] = set()
    for d in days or ():
        try:
            day = int(d)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid weekday: {d!r}") from None
        if not 0 <= day <= 6:
            raise ValueError(f"Weekday out of range (0=Sun..6=Sat): {day}")
        out.add(day)
    return tuple(sorted(out))


class TaskStore:
    """
    SQLite task store. Sole owner of Task records.

    Validation happens here, before a record exists: the reminder engine is
    permissive and simply skips records it cannot schedule, so everything a
    user enters is checked on add/update.

    The schema is migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except Exception:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(Exception):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    kind TEXT NOT NULL DEFAULT 'task',
                    text TEXT NOT NULL,
                    mode TEXT,
                    due_date TEXT,
                    due_time TEXT,
                    start_date TEXT,
                    end_date TEXT,
                    days_of_week TEXT NOT NULL DEFAULT '[]'
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("updated_at", "REAL NOT NULL DEFAULT 0")
            add_col("mode", "TEXT")
            add_col("start_date", "TEXT")
            add_col("end_date", "TEXT")
            add_col("days_of_week", "TEXT NOT NULL DEFAULT '[]'")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_kind ON tasks(kind)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _days_to_str(days: tuple[int, ...]) -> str:
        return json.dumps(list(days))

    @staticmethod
    def _str_to_days(s: str | None) -> tuple[int, ...]:
        if not s:
            return ()
        try:
            val = json.loads(s)
        except Exception:
            return ()
        if not isinstance(val, list):
            return ()
        return tuple(int(d) for d in val if isinstance(d, int) and 0 <= d <= 6)

    def _row_to_task(self, row: sqlite3.Row) -> Task:
        kind = TaskKind.from_db(row["kind"])
        return Task(
            id=int(row["id"]),
            text=str(row["text"] or ""),
            kind=kind,
            created_at=float(row["created_at"] or 0.0),
            updated_at=float(row["updated_at"] or 0.0),
            mode=ReminderMode.from_db(row["mode"]) if kind == TaskKind.REMINDER else None,
            due_date=row["due_date"],
            due_time=row["due_time"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            days_of_week=self._str_to_days(row["days_of_week"]),
        )

    @staticmethod
    def _validate_new(
        *,
        text: str,
        kind: TaskKind,
        mode: ReminderMode | None,
        due_date: str,
        due_time: str,
        start_date: str,
        end_date: str,
        days: tuple[int, ...],
    ) -> None:
        if not text:
            raise ValueError("text is required")

        if kind != TaskKind.REMINDER:
            return

        if mode == ReminderMode.ONCE:
            if not due_date or not due_time:
                raise ValueError("Reminder requires both due date and time.")
            _check_date(due_date, "due date")
            _check_time(due_time)
            return

        if mode == ReminderMode.WEEKLY:
            if not start_date or not end_date or not due_time:
                raise ValueError("Weekly reminder requires start date, end date, and time.")
            _check_date(start_date, "start date")
            _check_date(end_date, "end date")
            _check_time(due_time)
            if start_date > end_date:
                raise ValueError("Start date must be on or before end date.")
            if not days:
                raise ValueError("Select at least one weekday for weekly reminders.")
            return

        raise ValueError("Reminder mode must be 'once' or 'weekly'.")

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def add_task(
        self,
        *,
        text: str,
        kind: TaskKind = TaskKind.PLAIN,
        mode: ReminderMode | None = None,
        due_date: str | None = None,
        due_time: str | None = None,
        start_date: str | None = None,
        end_date: str | None = None,
        days_of_week: Iterable[int] | None = None,
    ) -> int:
        text = _clean(text)
        due_date = _clean(due_date)
        due_time = _clean(due_time)
        start_date = _clean(start_date)
        end_date = _clean(end_date)
        days = normalize_days(days_of_week)

        if kind != TaskKind.REMINDER:
            mode = None
            start_date = end_date = ""
            days = ()

        self._validate_new(
            text=text,
            kind=kind,
            mode=mode,
            due_date=due_date,
            due_time=due_time,
            start_date=start_date,
            end_date=end_date,
            days=days,
        )
        if mode == ReminderMode.WEEKLY:
            due_date = ""
        elif mode == ReminderMode.ONCE:
            start_date = end_date = ""
            days = ()

        now = time.time()
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute(
                """
                INSERT INTO tasks(
                    created_at, updated_at, kind, text, mode,
                    due_date, due_time, start_date, end_date, days_of_week
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    now,
                    now,
                    kind.value,
                    text,
                    mode.value if mode is not None else None,
                    due_date or None,
                    due_time or None,
                    start_date or None,
                    end_date or None,
                    self._days_to_str(days),
                ),
            )
            conn.commit()
            rowid = cur.lastrowid
            if rowid is None:
                raise RuntimeError("SQLite did not return lastrowid for tasks insert")
            task_id = int(rowid)
            logger.debug(
                "Task added id=%s kind=%s mode=%s",
                task_id,
                kind.value,
                mode.value if mode is not None else None,
            )
            return task_id
        finally:
            conn.close()

    def get_task(self, task_id: int) -> Task | None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks WHERE id = ?", (int(task_id),))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None
        finally:
            conn.close()

    def list_tasks(self) -> list[Task]:
        """All tasks in creation order."""
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY created_at ASC, id ASC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def update_task(
        self,
        task_id: int,
        *,
        text: str | None = None,
        due_date: str | None = None,
        due_time: str | None = None,
    ) -> Task:
        """
        Edit a task.

        - text: new label (must stay non-empty)
        - due_date/due_time: one-time reminders only; "" clears the value,
          None leaves it unchanged

        Returns the updated Task. Raises KeyError for an unknown id.
        """
        task = self.get_task(task_id)
        if task is None:
            raise KeyError(task_id)

        fields: list[str] = []
        params: list[Any] = []

        if text is not None:
            new_text = _clean(text)
            if not new_text:
                raise ValueError("text is required")
            fields.append("text = ?")
            params.append(new_text)

        if due_date is not None or due_time is not None:
            if not (task.is_reminder and task.mode == ReminderMode.ONCE):
                raise ValueError("Only one-time reminders have an editable due date/time.")

            if due_date is not None:
                new_date = _clean(due_date)
                if new_date:
                    _check_date(new_date, "due date")
                fields.append("due_date = ?")
                params.append(new_date or None)

            if due_time is not None:
                new_time = _clean(due_time)
                if new_time:
                    _check_time(new_time)
                fields.append("due_time = ?")
                params.append(new_time or None)

        if not fields:
            return task

        fields.append("updated_at = ?")
        params.append(time.time())
        params.append(int(task_id))

        sql = f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?"

        conn = self._get_conn()
        try:
            conn.execute(sql, params)
            conn.commit()
        finally:
            conn.close()

        updated = self.get_task(task_id)
        if updated is None:
            raise KeyError(task_id)
        logger.debug("Task updated id=%s", task_id)
        return updated

    def delete_task(self, task_id: int) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
            conn.commit()
            if cur.rowcount != 1:
                raise KeyError(task_id)
        finally:
            conn.close()
        logger.debug("Task deleted id=%s", task_id)
