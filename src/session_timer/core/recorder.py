"""Turns clock stops into sessions of the current batch."""

import logging
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from session_timer.core.clock import TimerClock
from session_timer.core.ids import TimeBasedIdGenerator, next_id
from session_timer.models.session import Session

logger = logging.getLogger(__name__)


class SessionRecorder:
    """Holds the current, not yet saved, batch of sessions."""

    def __init__(
        self,
        now: Callable[[], datetime] = datetime.now,
        id_generator: Optional[TimeBasedIdGenerator] = None,
    ):
        self._now = now
        self._ids = id_generator or next_id
        self._batch: List[Session] = []

    @property
    def batch(self) -> Tuple[Session, ...]:
        """Sessions recorded since the last reset, oldest first."""
        return tuple(self._batch)

    def __len__(self) -> int:
        return len(self._batch)

    def record_stop(self, elapsed_ms: int) -> Optional[Session]:
        """Record a stop; zero elapsed time records nothing."""
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms cannot be negative, got {elapsed_ms}")
        if elapsed_ms == 0:
            return None

        stopped_at = self._now()
        session = Session(
            id=self._ids(stopped_at), duration=elapsed_ms, timestamp=stopped_at
        )
        self._batch.append(session)
        logger.debug("Recorded session %d (%d ms)", session.id, elapsed_ms)
        return session

    def stop_clock(self, clock: TimerClock) -> Optional[Session]:
        """Stop ``clock`` and record its elapsed value."""
        return self.record_stop(clock.stop())

    def reset(self) -> None:
        """Discard the current batch."""
        self._batch = []

    def total_time(self) -> int:
        """Sum of durations in the current batch."""
        return sum(session.duration for session in self._batch)
