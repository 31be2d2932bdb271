"""Tests for SessionRecorder."""

from datetime import datetime, timedelta

import pytest

from session_timer.core.clock import ManualTickScheduler, TimerClock
from session_timer.core.ids import TimeBasedIdGenerator
from session_timer.core.recorder import SessionRecorder


class FakeNow:
    """Wall clock that advances one second per call."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def recorder():
    """Create a recorder with a deterministic wall clock."""
    return SessionRecorder(
        now=FakeNow(datetime(2026, 3, 10, 9, 0)),
        id_generator=TimeBasedIdGenerator(),
    )


def test_record_stop_appends_session(recorder):
    """Test that a positive stop becomes a session in the batch."""
    session = recorder.record_stop(1500)

    assert session is not None
    assert session.duration == 1500
    assert session.timestamp == datetime(2026, 3, 10, 9, 0)
    assert recorder.batch == (session,)


def test_record_stop_zero_is_noop(recorder):
    """Test that zero elapsed time records nothing."""
    recorder.record_stop(1000)

    assert recorder.record_stop(0) is None
    assert len(recorder) == 1


def test_record_stop_rejects_negative(recorder):
    """Test that negative durations are refused."""
    with pytest.raises(ValueError):
        recorder.record_stop(-5)
    assert len(recorder) == 0


def test_total_time_sums_batch(recorder):
    """Test that the batch total is the sum of durations."""
    durations = [1500, 2500, 10, 999]
    for duration in durations:
        recorder.record_stop(duration)

    assert recorder.total_time() == sum(durations)


def test_total_time_empty_batch(recorder):
    """Test that an empty batch totals zero."""
    assert recorder.total_time() == 0


def test_ids_increase_in_insertion_order():
    """Test that sessions stopped in the same instant still get increasing ids."""
    instant = datetime(2026, 3, 10, 9, 0)
    recorder = SessionRecorder(now=lambda: instant, id_generator=TimeBasedIdGenerator())
    sessions = [recorder.record_stop(100) for _ in range(3)]

    ids = [session.id for session in sessions]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3


def test_reset_discards_batch(recorder):
    """Test that reset empties the batch."""
    recorder.record_stop(100)
    recorder.record_stop(200)
    recorder.reset()

    assert recorder.batch == ()
    assert recorder.total_time() == 0


def test_batch_is_a_snapshot(recorder):
    """Test that the batch view does not change after later recordings."""
    recorder.record_stop(100)
    snapshot = recorder.batch
    recorder.record_stop(200)

    assert len(snapshot) == 1
    assert len(recorder.batch) == 2


def test_stop_clock_records_elapsed(recorder):
    """Test stopping a running clock records its elapsed value."""
    scheduler = ManualTickScheduler()
    clock = TimerClock(scheduler)
    clock.start()
    scheduler.advance(150)

    session = recorder.stop_clock(clock)

    assert not clock.is_running
    assert session.duration == 1500


def test_stop_clock_never_started(recorder):
    """Test stopping an idle clock records nothing."""
    clock = TimerClock(ManualTickScheduler())

    assert recorder.stop_clock(clock) is None
    assert len(recorder) == 0
