"""
models.py — Data types shared by the recorder, the bot and the dashboard.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional


class Outcome(Enum):
    SAVED = "saved"
    ALREADY_LOGGED = "already_logged"
    INVALID_ARGUMENT = "invalid_argument"
    STORE_ERROR = "store_error"
    EMPTY_HISTORY = "empty_history"
    OK = "ok"


@dataclass
class LogEntry:
    user_id: str
    log_date: date
    message: str


@dataclass
class LogReport:
    """What the presentation layer gets for a `$getlogs` request."""
    entries: List[LogEntry] = field(default_factory=list)
    total: int = 0
    streak: int = 0
    first_day_number: int = 1

    @property
    def shown(self) -> int:
        return len(self.entries)


@dataclass
class RecordResult:
    outcome: Outcome
    log_date: Optional[date] = None


@dataclass
class ReportResult:
    outcome: Outcome
    report: Optional[LogReport] = None


@dataclass
class CountArgument:
    outcome: Outcome = Outcome.OK
    count: Optional[int] = None
    error: Optional[str] = None
