"""
recorder.py — Daily log recording and history lookup.

Everything here returns an Outcome instead of raising, so the bot and the
dashboard only have to map results to text.
"""

import logging
from datetime import date, datetime
from typing import Callable, List, Sequence

import pytz

from logbot import db
from logbot.models import CountArgument, LogEntry, Outcome, RecordResult, ReportResult
from logbot.streak import build_report

logger = logging.getLogger(__name__)

DEFAULT_LOG_COUNT = 10


def load_timezone(name: str):
    """Reference timezone for day boundaries; unknown names fall back to UTC."""
    try:
        return pytz.timezone(name)
    except pytz.exceptions.UnknownTimeZoneError:
        logger.error(f"Unknown timezone: {name}. Using UTC.")
        return pytz.UTC


def day_of(moment: datetime, tz) -> date:
    """
    Calendar day of an aware timestamp in the reference timezone.

    This is the single day-boundary rule: every log date and every
    "today" used for streaks goes through here.
    """
    return moment.astimezone(tz).date()


def record(
    user_id: str,
    message: str,
    today: date,
    insert_log: Callable[[str, date, str], bool] = db.insert_log,
) -> RecordResult:
    """Save today's log for a user, at most once per day."""
    if not user_id or not message or not message.strip():
        return RecordResult(Outcome.INVALID_ARGUMENT)

    try:
        inserted = insert_log(user_id, today, message)
    except db.StoreError as e:
        logger.exception(f"Could not save log for user {user_id}: {e}")
        return RecordResult(Outcome.STORE_ERROR)

    if not inserted:
        return RecordResult(Outcome.ALREADY_LOGGED, today)
    return RecordResult(Outcome.SAVED, today)


def load_report(
    user_id: str,
    limit: int,
    today: date,
    fetch_history: Callable[[str], List[LogEntry]] = db.fetch_history,
) -> ReportResult:
    """Fetch a user's full history and turn it into a report."""
    try:
        history = fetch_history(user_id)
    except db.StoreError as e:
        logger.exception(f"Could not load history for user {user_id}: {e}")
        return ReportResult(Outcome.STORE_ERROR)

    if not history:
        return ReportResult(Outcome.EMPTY_HISTORY)

    report = build_report(history, limit, today)
    logger.debug(f"User {user_id}: {report.total} logs, streak {report.streak}")
    return ReportResult(Outcome.OK, report)


def parse_count(tokens: Sequence[str], default: int = DEFAULT_LOG_COUNT) -> CountArgument:
    """
    Parse the optional count argument of `$getlogs`.

    Examples:
        >>> parse_count([]).count
        10
        >>> parse_count(["0"]).count
        0
        >>> parse_count(["abc"]).error
        'Please input a number'
    """
    if len(tokens) > 1:
        return CountArgument(Outcome.INVALID_ARGUMENT, error="I received more arguments that I can handle!")
    if not tokens:
        return CountArgument(count=default)

    try:
        count = int(tokens[0])
    except ValueError:
        return CountArgument(Outcome.INVALID_ARGUMENT, error="Please input a number")

    if count < 0:
        return CountArgument(
            Outcome.INVALID_ARGUMENT,
            error="Please, enter either a positive number or 0 if you want to look at all your logs!"
        )
    return CountArgument(count=count)
