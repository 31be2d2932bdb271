"""Stopwatch clock driven by a periodic tick."""

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_TICK_MS = 10


class ClockState(str, Enum):
    """Lifecycle state of a TimerClock."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class TickHandle(ABC):
    """A repeating tick registration that can be cancelled."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop delivering ticks for this registration."""


class TickScheduler(ABC):
    """Registers repeating tick callbacks."""

    @abstractmethod
    def schedule(self, interval_ms: int, callback: Callable[[], None]) -> TickHandle:
        """Call ``callback`` every ``interval_ms`` until the handle is cancelled."""


class _AsyncioTickHandle(TickHandle):
    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ):
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._timer = loop.call_later(interval, self._fire)

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._timer = self._loop.call_later(self._interval, self._fire)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()


class AsyncioTickScheduler(TickScheduler):
    """Delivers ticks with ``loop.call_later`` on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def schedule(self, interval_ms: int, callback: Callable[[], None]) -> TickHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTickHandle(loop, interval_ms / 1000, callback)


class ManualTickHandle(TickHandle):
    """Registration held by a ManualTickScheduler."""

    def __init__(self, scheduler: "ManualTickScheduler", callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False
        self._scheduler = scheduler

    def cancel(self) -> None:
        self.cancelled = True
        self._scheduler._discard(self)


class ManualTickScheduler(TickScheduler):
    """Fires ticks only when ``advance`` is called."""

    def __init__(self) -> None:
        self.handles: List[ManualTickHandle] = []

    def schedule(self, interval_ms: int, callback: Callable[[], None]) -> TickHandle:
        handle = ManualTickHandle(self, callback)
        self.handles.append(handle)
        return handle

    def advance(self, ticks: int = 1) -> None:
        """Fire every active registration ``ticks`` times."""
        for _ in range(ticks):
            for handle in list(self.handles):
                handle.callback()

    @property
    def pending(self) -> int:
        """Number of registrations that have not been cancelled."""
        return len(self.handles)

    def _discard(self, handle: ManualTickHandle) -> None:
        if handle in self.handles:
            self.handles.remove(handle)


class TimerClock:
    """Accumulates elapsed milliseconds one tick at a time while running.

    Each tick adds exactly ``tick_ms``. Ticks are bound to the registration
    that produced them, so a callback that fires after ``stop`` or ``reset``
    is ignored.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        tick_ms: int = DEFAULT_TICK_MS,
        on_tick: Optional[Callable[[int], None]] = None,
    ):
        if tick_ms <= 0:
            raise ValueError(f"tick_ms must be positive, got {tick_ms}")
        self.tick_ms = tick_ms
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._state = ClockState.IDLE
        self._elapsed_ms = 0
        self._handle: Optional[TickHandle] = None
        self._generation = 0

    @property
    def state(self) -> ClockState:
        return self._state

    @property
    def elapsed_ms(self) -> int:
        return self._elapsed_ms

    @property
    def is_running(self) -> bool:
        return self._state is ClockState.RUNNING

    def start(self) -> None:
        """Start or resume accumulating from the current elapsed value."""
        if self.is_running:
            return
        self._generation += 1
        generation = self._generation
        self._handle = self._scheduler.schedule(
            self.tick_ms, lambda: self._tick(generation)
        )
        self._state = ClockState.RUNNING
        logger.debug("Clock started at %d ms", self._elapsed_ms)

    def stop(self) -> int:
        """Freeze the elapsed value and return it."""
        if self.is_running:
            self._cancel_ticks()
            self._state = ClockState.STOPPED
            logger.debug("Clock stopped at %d ms", self._elapsed_ms)
        return self._elapsed_ms

    def reset(self) -> None:
        """Zero the elapsed value and halt."""
        self._cancel_ticks()
        self._elapsed_ms = 0
        self._state = ClockState.IDLE

    def _cancel_ticks(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._generation += 1

    def _tick(self, generation: int) -> None:
        if not self.is_running or generation != self._generation:
            logger.debug("Ignoring stale tick from registration %d", generation)
            return
        self._elapsed_ms += self.tick_ms
        if self._on_tick is not None:
            self._on_tick(self._elapsed_ms)


def format_time(time_ms: int) -> str:
    """Render milliseconds as MM:SS.CC with unbounded minutes."""
    minutes = time_ms // 60000
    seconds = (time_ms % 60000) // 1000
    centiseconds = (time_ms % 1000) // 10
    return f"{minutes:02d}:{seconds:02d}.{centiseconds:02d}"
