"""Time-based identifiers for sessions and saved sets."""

from datetime import datetime


class TimeBasedIdGenerator:
    """Hands out millisecond timestamps that never repeat within a process.

    Two ids requested in the same millisecond (or after the wall clock moved
    backwards) are bumped past the last id handed out.
    """

    def __init__(self) -> None:
        self._last = 0

    def __call__(self, when: datetime) -> int:
        candidate = int(when.timestamp() * 1000)
        if candidate <= self._last:
            candidate = self._last + 1
        self._last = candidate
        return candidate

    def observe(self, existing_id: int) -> None:
        """Make sure future ids sort after an id that already exists."""
        if existing_id > self._last:
            self._last = existing_id


next_id = TimeBasedIdGenerator()
