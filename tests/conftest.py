# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from taskbell.cli.bootstrap import create_initial_state
from taskbell.core.state import AppState
from taskbell.tasks.reminder_engine import ReminderEngine
from taskbell.tasks.timer_registry import TimerRegistry

from .fakes import FakeClock, FakeScheduler, FakeTaskRepo, RecordingNotifier, local_ts


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="taskbell-test",
        log_level="DEBUG",
        console_enabled=False,
        console_bell=False,
        pre_alert_seconds=120.0,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
    )


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(local_ts(2024, 6, 3, 8, 0))


@pytest.fixture()
def scheduler(clock: FakeClock) -> FakeScheduler:
    return FakeScheduler(clock)


@pytest.fixture()
def notifier(clock: FakeClock) -> RecordingNotifier:
    return RecordingNotifier(clock=clock)


@pytest.fixture()
def engine(clock: FakeClock, scheduler: FakeScheduler, notifier: RecordingNotifier) -> ReminderEngine:
    return ReminderEngine(FakeTaskRepo([]), notifier, TimerRegistry(scheduler), clock=clock)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    clock: FakeClock,
    scheduler: FakeScheduler,
    notifier: RecordingNotifier,
) -> AppState:
    """
    AppState wired with a real SQLite TaskStore and virtual time.

    NOTE: the store is real because validation and persistence are part of
    what we want to test; only timekeeping and presentation are faked.
    """
    return create_initial_state(
        settings=settings, scheduler=scheduler, notifier=notifier, clock=clock
    )
