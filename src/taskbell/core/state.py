# src/taskbell/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..tasks.reminder_engine import ReminderEngine
from .ports import Notifier, TaskRepo


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any

    task_store: TaskRepo
    notifier: Notifier
    engine: ReminderEngine
