"""
Reset interval helpers: next scheduled reset and matching cron expressions.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import Enum
from typing import Optional


class ResetInterval(str, Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


CRON_EXPRESSIONS = {
    ResetInterval.HOURLY: "0 * * * *",
    ResetInterval.DAILY: "0 0 * * *",
    ResetInterval.WEEKLY: "0 0 * * 0",
}


def parse_interval(value: str) -> Optional[ResetInterval]:
    try:
        return ResetInterval((value or "").strip().lower())
    except ValueError:
        return None


def next_reset_time(interval: ResetInterval, now: datetime) -> datetime:
    """
    Return the next reset boundary strictly after ``now``.

    hourly: top of the next hour. daily: midnight of the next day.
    weekly: midnight of the next Sunday (a Sunday rolls to the one after).
    """
    if interval == ResetInterval.HOURLY:
        return now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if interval == ResetInterval.DAILY:
        return midnight + timedelta(days=1)
    # datetime.weekday() counts from Monday; shift so Sunday is 0.
    days_since_sunday = (now.weekday() + 1) % 7
    return midnight + timedelta(days=7 - days_since_sunday)


def cron_expression(interval: Optional[ResetInterval]) -> str:
    return CRON_EXPRESSIONS.get(interval, CRON_EXPRESSIONS[ResetInterval.DAILY])
