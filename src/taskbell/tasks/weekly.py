# src/taskbell/tasks/weekly.py

"""
Weekly occurrence resolver.

Finds the next concrete instant of a weekly reminder: a day in the reminder's
weekday set, inside its inclusive [start_date, end_date] window, at due_time.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta

from .task_models import Task
from .time_model import local_timestamp, parse_date, parse_time_of_day, sunday_weekday

logger = logging.getLogger(__name__)

# Safety cap on the day walk; running past it means "no occurrence".
MAX_SEARCH_DAYS = 500

_END_OF_DAY = time(23, 59, 59)


def next_weekly_occurrence(task: Task, now: float) -> float | None:
    """
    Return the earliest occurrence strictly after `now`, or None.

    None covers every "nothing to schedule" outcome:
    - a required weekly field is missing or the day set is empty
    - start/end dates or due_time do not parse
    - the window is exhausted (or the search horizon is exceeded)
    """
    days = set(task.days_of_week or ())
    if not task.start_date or not task.end_date or not task.due_time or not days:
        return None

    start = parse_date(task.start_date)
    end = parse_date(task.end_date)
    if start is None or end is None:
        return None

    # A malformed due_time invalidates the reminder instead of defaulting to midnight.
    at = parse_time_of_day(task.due_time)
    if at is None:
        logger.debug("Weekly task %s has unparsable due_time=%r", task.id, task.due_time)
        return None

    try:
        window_start = local_timestamp(start, time.min)
        window_end = local_timestamp(end, _END_OF_DAY)
        cursor = datetime.fromtimestamp(max(now, window_start)).date()
    except (OverflowError, OSError, ValueError):
        return None

    for _ in range(MAX_SEARCH_DAYS):
        if cursor > end:
            return None
        if sunday_weekday(cursor) in days:
            candidate = local_timestamp(cursor, at)
            # Today's slot is skipped once now has reached it.
            if candidate > now and window_start <= candidate <= window_end:
                return candidate
        cursor += timedelta(days=1)

    return None
