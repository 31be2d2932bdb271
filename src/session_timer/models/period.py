"""Derived summary models built from saved session sets."""

from datetime import date, datetime
from enum import Enum
from typing import NamedTuple, Tuple

from pydantic import BaseModel

from .session import SavedSessionSet


class PeriodHalf(str, Enum):
    """Which half of the month a period covers."""

    FIRST = "first"  # days 1-15
    SECOND = "second"  # day 16 to end of month


class SessionSummaryPeriod(BaseModel):
    """Half-month bucket of saved session sets. Never persisted."""

    start_date: datetime
    end_date: datetime
    half: PeriodHalf
    sessions: Tuple[SavedSessionSet, ...] = ()
    total_time: int = 0
    session_count: int = 0

    model_config = {"frozen": True}

    @property
    def set_count(self) -> int:
        """Number of saved sets in the period."""
        return len(self.sessions)

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``March 1-15, 2026``."""
        from session_timer.core.periods import format_period_label

        return format_period_label(self)


class DayTotal(NamedTuple):
    """Total recorded milliseconds for one calendar day."""

    day: date
    total_ms: int
