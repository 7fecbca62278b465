# src/taskbell/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.state import AppState
from ..tasks import task_api
from ..tasks.reminder_engine import ReminderPhase
from ..tasks.task_models import ReminderMode, Task
from ..tasks.time_model import DAY_NAMES, format_due, format_weekly_summary

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_DAY_ALIASES = {name.lower(): i for i, name in enumerate(DAY_NAMES)}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Validation problems (ValueError) and unknown task ids (KeyError) are
        turned into replies; anything else propagates to the connector.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except KeyError as e:
            return f"No task with id {e.args[0] if e.args else '?'}."
        except ValueError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        lines.append("  Any other line adds a plain task.")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def parse_days(raw: str) -> list[int]:
    """
    Parse a weekday set (Sunday = 0).

    Accepts: "all", "weekdays", "weekends", "mon-fri", "mon,wed,fri", "1,3,5", "sat-mon".
    """
    text = raw.strip().lower()
    if text == "all":
        return list(range(7))
    if text == "weekdays":
        return [1, 2, 3, 4, 5]
    if text == "weekends":
        return [0, 6]

    def one(token: str) -> int:
        token = token.strip()
        if token.isdigit():
            return int(token)
        day = _DAY_ALIASES.get(token[:3])
        if day is None:
            raise ValueError(f"Unknown weekday: {token!r}")
        return day

    out: list[int] = []
    for part in text.split(","):
        if not part.strip():
            continue
        if "-" in part:
            first, last = (one(p) for p in part.split("-", 1))
            day = first
            while True:
                out.append(day)
                if day == last:
                    break
                day = (day + 1) % 7
        else:
            out.append(one(part))
    if not out:
        raise ValueError("Select at least one weekday for weekly reminders.")
    return out


def _task_id(raw: str) -> int:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        raise ValueError(f"Invalid task id: {raw!r}") from None


def _optional(raw: str) -> str:
    return "" if raw == "-" else raw


def format_task_line(state: AppState, task: Task) -> str:
    line = f"#{task.id} "
    if task.is_reminder:
        line += "[Reminder] "
    line += task.text

    if task.is_reminder and task.mode == ReminderMode.WEEKLY:
        detail = format_weekly_summary(task)
    else:
        detail = format_due(task.due_date, task.due_time)
    if detail:
        line += f"  ({detail})"

    if task.is_reminder:
        phase = state.engine.phase(task.id)
        if phase != ReminderPhase.UNSCHEDULED:
            line += f"  [{phase.value}]"
    return line


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    """/add <text>"""
    task = task_api.add_plain_task(state, " ".join(args))
    return f"Added task #{task.id}."


def cmd_once(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/once <YYYY-MM-DD> <HH:MM> <text>"""
    if len(args) < 3:
        return "Usage: /once <YYYY-MM-DD> <HH:MM> <text>"
    task = task_api.add_once_reminder(
        state, " ".join(args[2:]), due_date=args[0], due_time=args[1]
    )
    if state.engine.phase(task.id) == ReminderPhase.UNSCHEDULED:
        return f"Added reminder #{task.id} (due time already passed; it will not fire)."
    return f"Added reminder #{task.id} ({format_due(task.due_date, task.due_time)})."


def cmd_weekly(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/weekly <start> <end> <HH:MM> <days> <text>"""
    if len(args) < 5:
        return "Usage: /weekly <start YYYY-MM-DD> <end YYYY-MM-DD> <HH:MM> <days> <text>"
    task = task_api.add_weekly_reminder(
        state,
        " ".join(args[4:]),
        start_date=args[0],
        end_date=args[1],
        due_time=args[2],
        days_of_week=parse_days(args[3]),
    )
    reply = f"Added reminder #{task.id} ({format_weekly_summary(task)})."
    if state.engine.phase(task.id) == ReminderPhase.UNSCHEDULED:
        reply += " No future occurrence in that window."
    return reply


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list_tasks()
    if not tasks:
        return "No tasks yet. Add one with /add, /once or /weekly."
    return "\n".join(format_task_line(state, t) for t in tasks)


def cmd_edit(state: AppState, args: list[str]) -> str:
    """/edit <id> <text>"""
    if len(args) < 2:
        return "Usage: /edit <id> <text>"
    task = task_api.edit_task(state, _task_id(args[0]), text=" ".join(args[1:]))
    return f"Updated #{task.id}."


def cmd_due(state: AppState, args: list[str]) -> str:
    """/due <id> <YYYY-MM-DD|-> <HH:MM|->"""
    if len(args) != 3:
        return "Usage: /due <id> <YYYY-MM-DD|-> <HH:MM|->  ('-' clears the value)"
    task = task_api.edit_task(
        state,
        _task_id(args[0]),
        due_date=_optional(args[1]),
        due_time=_optional(args[2]),
    )
    due = format_due(task.due_date, task.due_time) or "no due date/time"
    return f"Updated #{task.id} ({due})."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if len(args) != 1:
        return "Usage: /delete <id>"
    task_id = _task_id(args[0])
    task_api.delete_task(state, task_id)
    return f"Deleted #{task_id}."


def cmd_status(state: AppState, args: list[str]) -> str:
    total = state.task_store.count_tasks()
    reminders = sum(1 for t in state.task_store.list_tasks() if t.is_reminder)
    return (
        "Status:\n"
        f"  Tasks: {total} ({reminders} reminder(s))\n"
        f"  Live timers: {len(state.engine.registry)}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("add", cmd_add, help_text="Add a plain task: /add <text>.")
registry.register(
    "once", cmd_once, help_text="One-time reminder: /once <YYYY-MM-DD> <HH:MM> <text>."
)
registry.register(
    "weekly",
    cmd_weekly,
    help_text="Weekly reminder: /weekly <start> <end> <HH:MM> <days e.g. mon-fri> <text>.",
)
registry.register("list", cmd_list, help_text="List tasks.", aliases=["ls"])
registry.register("edit", cmd_edit, help_text="Edit task text: /edit <id> <text>.")
registry.register(
    "due", cmd_due, help_text="Change a one-time reminder's date/time: /due <id> <date|-> <time|->."
)
registry.register("delete", cmd_delete, help_text="Delete a task: /delete <id>.", aliases=["rm"])
registry.register("status", cmd_status, help_text="Show task and timer counts.")
