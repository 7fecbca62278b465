# src/taskbell/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (store, notifier, timers, engine).
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from ..config import get_settings
from ..connectors.console_notifier import ConsoleNotifier
from ..core.ports import Notifier, TimerScheduler
from ..core.state import AppState
from ..tasks.reminder_engine import ReminderEngine
from ..tasks.task_store import TaskStore
from ..tasks.timer_registry import TimerRegistry

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    scheduler: TimerScheduler | None = None,
    notifier: Notifier | None = None,
    clock: Callable[[], float] = time.time,
) -> AppState:
    """
    Create AppState from the provided settings.

    scheduler defaults to the running asyncio loop, so call this from inside
    the loop (or pass a scheduler and clock explicitly, as tests do).
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if scheduler is None:
        scheduler = asyncio.get_running_loop()
    if notifier is None:
        notifier = ConsoleNotifier(enable_bell=bool(getattr(settings, "console_bell", False)))

    task_store = TaskStore(settings.tasks_db_path)
    engine = ReminderEngine(
        task_store,
        notifier,
        TimerRegistry(scheduler),
        clock=clock,
        pre_alert_seconds=float(settings.pre_alert_seconds),
    )

    return AppState(
        settings=settings,
        task_store=task_store,
        notifier=notifier,
        engine=engine,
    )
