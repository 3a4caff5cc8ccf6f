"""
streak.py — Calendar-based streak counting and history windowing.

Streak logic:
- Walk logged dates from newest to oldest
- The i-th newest date must be exactly i days before the reference day
- The first date that doesn't match ends the streak
- No log on the reference day means no streak at all
"""

from datetime import date, timedelta
from typing import List, Sequence, TypeVar

from logbot.models import LogEntry, LogReport

T = TypeVar("T")


def compute_streak(dates: Sequence[date], reference_day: date) -> int:
    """
    Count consecutive logged days ending on reference_day.

    Examples:
        >>> today = date(2024, 3, 10)
        >>> compute_streak([date(2024, 3, 8), date(2024, 3, 9), today], today)
        3
        >>> compute_streak([date(2024, 3, 7), date(2024, 3, 9), today], today)
        2
        >>> compute_streak([date(2024, 3, 9)], today)
        0
    """
    count = 0
    for i, logged in enumerate(reversed(dates)):
        if logged != reference_day - timedelta(days=i):
            break
        count += 1
    return count


def select_window(history: Sequence[T], limit: int) -> List[T]:
    """Most recent `limit` items, oldest first. 0 means everything."""
    if limit < 0:
        raise ValueError(f"limit must be >= 0, got {limit}")
    if limit == 0 or limit >= len(history):
        return list(history)
    return list(history[-limit:])


def build_report(history: Sequence[LogEntry], limit: int, reference_day: date) -> LogReport:
    """Window the history for display; the streak always uses all of it."""
    entries = select_window(history, limit)
    return LogReport(
        entries=entries,
        total=len(history),
        streak=compute_streak([entry.log_date for entry in history], reference_day),
        first_day_number=len(history) - len(entries) + 1,
    )
