# src/taskbell/connectors/console_notifier.py

"""Console notification adapter: timestamped banner on stdout + optional bell."""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import TextIO

from ..core.ports import TIMING_NOW
from ..tasks.task_models import Task
from ..tasks.time_model import describe_when

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _prefix(timing_label: str) -> str:
    label = timing_label.lower()
    if "before" in label:
        return "⏳"
    if label == TIMING_NOW:
        return "⏰"
    return "🔔"


class ConsoleNotifier:
    """Prints fired reminders to the terminal."""

    __slots__ = ("_enable_bell", "_stream")

    def __init__(self, enable_bell: bool = False, stream: TextIO | None = None) -> None:
        self._enable_bell = enable_bell
        self._stream = stream

    def notify(self, task: Task, timing_label: str) -> None:
        out = self._stream or sys.stdout
        timing = timing_label or "Reminder"
        print(
            f"\n[{_ts_local()}] {_prefix(timing_label)} Task Reminder ({timing}): {task.text}\n"
            f"    {describe_when(task)}",
            file=out,
            flush=True,
        )
        if self._enable_bell:
            print("\a", end="", file=out, flush=True)
        logger.info("Reminder %s notified (%s)", task.id, timing)
