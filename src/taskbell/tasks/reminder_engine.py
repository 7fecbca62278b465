# src/taskbell/tasks/reminder_engine.py

from __future__ import annotations

"""
Reminder scheduling engine.

For each reminder task the engine:
- resolves the next due instant (once: its date/time, weekly: next occurrence),
- arms an early-warning timer and a chained exact-time timer,
- emits notify(task, label) through the injected Notifier when they fire,
- re-arms weekly reminders after each exact-time fire.

Every schedule call starts by cancelling the task's timers, so it is safe to
call after each create/edit. All "nothing to schedule" outcomes (bad
date/time, expired window, past due) are silent: the task simply stays
unscheduled.
"""

import logging
import time
from collections.abc import Callable, Iterable
from enum import StrEnum

from ..config import DEFAULT_PRE_ALERT_SECONDS
from ..core.ports import TIMING_NOW, Notifier, TaskRepo
from .task_models import ReminderMode, Task
from .time_model import lead_label, parse_due_timestamp
from .timer_registry import TimerRegistry, exact_key
from .weekly import next_weekly_occurrence

logger = logging.getLogger(__name__)


class ReminderPhase(StrEnum):
    UNSCHEDULED = "unscheduled"
    PRE_ALERT_PENDING = "pre_alert_pending"
    EXACT_PENDING = "exact_pending"
    FIRED = "fired"


class ReminderEngine:
    def __init__(
        self,
        task_repo: TaskRepo,
        notifier: Notifier,
        registry: TimerRegistry,
        *,
        clock: Callable[[], float] = time.time,
        pre_alert_seconds: float = DEFAULT_PRE_ALERT_SECONDS,
    ) -> None:
        if pre_alert_seconds < 0:
            raise ValueError("pre_alert_seconds must be >= 0")
        self._task_repo = task_repo
        self._notifier = notifier
        self._registry = registry
        self._clock = clock
        self._lead = float(pre_alert_seconds)
        self._before_label = lead_label(self._lead)
        self._phases: dict[int, ReminderPhase] = {}

    @property
    def registry(self) -> TimerRegistry:
        return self._registry

    def phase(self, task_id: int) -> ReminderPhase:
        return self._phases.get(task_id, ReminderPhase.UNSCHEDULED)

    # ---- public API ----

    def schedule_reminder(self, task: Task) -> float | None:
        """
        (Re)arm timers for `task`. Returns the due instant that was armed, or None.
        """
        return self._schedule(task, after=None)

    def cancel_reminder(self, task_id: int) -> None:
        """Cancel the primary and any chained exact-time timer; nothing fires afterwards."""
        cancelled = self._registry.cancel(task_id)
        cancelled = self._registry.cancel(exact_key(task_id)) or cancelled
        self._phases.pop(task_id, None)
        if cancelled:
            logger.debug("Reminder %s cancelled", task_id)

    def schedule_all_reminders(self, tasks: Iterable[Task] | None = None) -> int:
        """
        Schedule every reminder in one pass over the store snapshot (startup).

        Returns how many reminders ended up armed.
        """
        if tasks is None:
            try:
                tasks = self._task_repo.list_tasks()
            except Exception:
                logger.exception("list_tasks failed; no reminders scheduled")
                return 0

        armed = 0
        for task in tasks:
            if not task.is_reminder:
                continue
            if self.schedule_reminder(task) is not None:
                armed += 1

        logger.info("Scheduled %d reminder(s)", armed)
        return armed

    def shutdown(self) -> None:
        n = self._registry.cancel_all()
        self._phases.clear()
        logger.debug("Engine shutdown: %d timer(s) cancelled", n)

    # ---- internals ----

    def _schedule(self, task: Task, *, after: float | None) -> float | None:
        # `after` is a slot that already fired; the next target must lie beyond it
        # even when the timer ran slightly ahead of the wall clock.
        self.cancel_reminder(task.id)

        if not task.is_reminder:
            return None

        now = self._clock()
        target = self._resolve_target(task, now, after)
        if target is None:
            return None

        pre_alert_at = target - self._lead
        exact_at = target

        if self._lead > 0 and pre_alert_at > now:
            self._registry.arm(task.id, pre_alert_at - now, lambda: self._fire_pre_alert(task, target))
            self._set_phase(task.id, ReminderPhase.PRE_ALERT_PENDING)
        elif exact_at > now:
            self._registry.arm(task.id, exact_at - now, lambda: self._fire_exact(task, target))
            self._set_phase(task.id, ReminderPhase.EXACT_PENDING)
        else:
            # Only reachable for weekly tasks when the clock moved past the resolved slot.
            return self._schedule_after(task, exact_at)

        logger.info(
            "Reminder %s armed due_at=%s phase=%s",
            task.id,
            time.strftime("%Y-%m-%d %H:%M", time.localtime(target)),
            self.phase(task.id).value,
        )
        return target

    def _resolve_target(self, task: Task, now: float, after: float | None = None) -> float | None:
        if task.mode == ReminderMode.WEEKLY:
            horizon = now if after is None else max(now, after)
            target = next_weekly_occurrence(task, horizon)
            if target is None:
                logger.debug("Weekly reminder %s has no future occurrence", task.id)
            return target

        if task.mode == ReminderMode.ONCE:
            target = parse_due_timestamp(task.due_date, task.due_time)
            if target is None:
                logger.debug(
                    "Reminder %s has invalid due date/time (%r %r)",
                    task.id,
                    task.due_date,
                    task.due_time,
                )
                return None
            if target <= now:
                logger.debug("Reminder %s is already past due", task.id)
                return None
            return target

        logger.debug("Reminder %s has no mode; skipping", task.id)
        return None

    def _schedule_after(self, task: Task, missed_at: float) -> float | None:
        if task.mode != ReminderMode.WEEKLY:
            return None
        logger.debug("Weekly reminder %s missed slot %s; searching the next one", task.id, missed_at)
        return self._schedule(task, after=missed_at)

    def _set_phase(self, task_id: int, phase: ReminderPhase) -> None:
        self._phases[task_id] = phase

    def _notify(self, task: Task, label: str) -> None:
        try:
            self._notifier.notify(task, label)
        except Exception:
            logger.exception("notify failed task_id=%s label=%s", task.id, label)

    def _fire_pre_alert(self, task: Task, target: float) -> None:
        self._notify(task, self._before_label)
        # Fixed offset from the early warning, not recomputed from the wall clock.
        self._registry.arm(exact_key(task.id), self._lead, lambda: self._fire_exact(task, target))
        self._set_phase(task.id, ReminderPhase.EXACT_PENDING)

    def _fire_exact(self, task: Task, target: float) -> None:
        self._set_phase(task.id, ReminderPhase.FIRED)
        self._notify(task, TIMING_NOW)
        self._on_fired(task, target)

    def _on_fired(self, task: Task, fired_at: float) -> float | None:
        """
        Fired -> next state.

        Once: back to UNSCHEDULED. Weekly: arm the occurrence after `fired_at`;
        the chain ends when end_date leaves no further occurrence.
        """
        if task.mode == ReminderMode.WEEKLY:
            following = self._schedule(task, after=fired_at)
            if following is None:
                logger.info("Weekly reminder %s finished (window exhausted)", task.id)
            return following

        self._phases.pop(task.id, None)
        return None
