# src/taskbell/tasks/timer_registry.py

"""
Timer registry: live wait handles keyed by reminder identity.

Each key owns at most one pending timer. Keys are task ids for the primary
wait and "<id>_exact" for the secondary wait, so one task can have two
independently cancellable timers.

The registry does not keep time itself; it delegates to an injected
scheduler with the asyncio `loop.call_later(delay, callback, *args)` shape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ..core.ports import Cancellable, TimerScheduler

logger = logging.getLogger(__name__)

TimerKey = int | str


def exact_key(task_id: int) -> str:
    return f"{task_id}_exact"


@dataclass(slots=True, eq=False)
class _ArmedTimer:
    key: TimerKey
    callback: Callable[[], None]
    handle: Cancellable | None = None


class TimerRegistry:
    def __init__(self, scheduler: TimerScheduler) -> None:
        self._scheduler = scheduler
        self._timers: dict[TimerKey, _ArmedTimer] = {}

    def __len__(self) -> int:
        return len(self._timers)

    def keys(self) -> Iterator[TimerKey]:
        return iter(list(self._timers))

    def is_armed(self, key: TimerKey) -> bool:
        return key in self._timers

    def arm(self, key: TimerKey, delay: float, callback: Callable[[], None]) -> Cancellable:
        """Run `callback` once after `delay` seconds, replacing any timer under `key`."""
        if delay < 0:
            raise ValueError("delay must be >= 0")

        self.cancel(key)

        timer = _ArmedTimer(key=key, callback=callback)
        handle = self._scheduler.call_later(delay, self._fire, timer)
        timer.handle = handle
        self._timers[key] = timer
        logger.debug("Timer armed key=%s delay=%.3fs", key, delay)
        return handle

    def cancel(self, key: TimerKey) -> bool:
        """Stop and forget the timer under `key`. Returns False if none was live."""
        timer = self._timers.pop(key, None)
        if timer is None:
            return False
        if timer.handle is not None:
            timer.handle.cancel()
        logger.debug("Timer cancelled key=%s", key)
        return True

    def cancel_all(self) -> int:
        keys = list(self._timers)
        for key in keys:
            self.cancel(key)
        return len(keys)

    def _fire(self, timer: _ArmedTimer) -> None:
        # A superseded timer whose handle was already queued must not run.
        if self._timers.get(timer.key) is not timer:
            return
        del self._timers[timer.key]
        logger.debug("Timer fired key=%s", timer.key)
        timer.callback()
