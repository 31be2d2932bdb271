"""Session Timer - stopwatch sessions, saved sets and bi-weekly summaries."""

__version__ = "0.1.0"

from session_timer.core.breakdown import breakdown
from session_timer.core.clock import (
    AsyncioTickScheduler,
    ClockState,
    ManualTickScheduler,
    TimerClock,
    format_time,
)
from session_timer.core.errors import (
    SessionTimerError,
    StorageReadError,
    StorageWriteError,
)
from session_timer.core.periods import format_period_label, summarize
from session_timer.core.recorder import SessionRecorder
from session_timer.core.storage import JsonFileKeyValueStore, MemoryKeyValueStore
from session_timer.core.store import SessionSetStore
from session_timer.models import (
    DayTotal,
    SavedSessionSet,
    Session,
    SessionSummaryPeriod,
)

__all__ = [
    "AsyncioTickScheduler",
    "ClockState",
    "DayTotal",
    "JsonFileKeyValueStore",
    "ManualTickScheduler",
    "MemoryKeyValueStore",
    "SavedSessionSet",
    "Session",
    "SessionRecorder",
    "SessionSetStore",
    "SessionSummaryPeriod",
    "SessionTimerError",
    "StorageReadError",
    "StorageWriteError",
    "TimerClock",
    "breakdown",
    "format_period_label",
    "format_time",
    "summarize",
]
