"""Data models for Session Timer."""

from .period import DayTotal, PeriodHalf, SessionSummaryPeriod
from .session import SavedSessionSet, Session

__all__ = [
    "DayTotal",
    "PeriodHalf",
    "SavedSessionSet",
    "Session",
    "SessionSummaryPeriod",
]
