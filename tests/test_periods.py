"""Tests for half-month period summaries."""

from datetime import datetime, timedelta, timezone

import pytest

from session_timer.core.periods import (
    format_period_label,
    period_bounds,
    period_half,
    summarize,
)
from session_timer.models.period import PeriodHalf
from session_timer.models.session import SavedSessionSet, Session

_next_id = iter(range(1, 10_000))


def make_set(created_at: datetime, *durations: int) -> SavedSessionSet:
    """Build a saved set whose sessions end shortly before ``created_at``."""
    sessions = [
        Session(
            id=next(_next_id),
            duration=duration,
            timestamp=created_at - timedelta(minutes=len(durations) - i),
        )
        for i, duration in enumerate(durations)
    ]
    return SavedSessionSet.from_batch(
        set_id=next(_next_id),
        name=f"Session {created_at}",
        batch=sessions,
        created_at=created_at,
    )


@pytest.fixture
def collection():
    """Saved sets spread over several half-month periods."""
    return [
        make_set(datetime(2026, 1, 3, 10, 0), 1000),
        make_set(datetime(2026, 1, 10, 10, 0), 1500, 2500),
        make_set(datetime(2026, 1, 20, 10, 0), 700, 300, 1000),
        make_set(datetime(2026, 2, 15, 23, 59, 59), 60_000),
        make_set(datetime(2026, 2, 16, 0, 0), 42),
        make_set(datetime(2025, 12, 31, 18, 0), 5000),
    ]


def test_tenth_and_twentieth_land_in_different_halves():
    """Test first-half vs second-half bucketing with session counts."""
    early = make_set(datetime(2026, 3, 10, 9, 0), 100, 200)
    late = make_set(datetime(2026, 3, 20, 9, 0), 300, 400, 500)

    second, first = summarize([early, late])

    assert first.half is PeriodHalf.FIRST
    assert second.half is PeriodHalf.SECOND
    assert first.sessions == (early,)
    assert second.sessions == (late,)
    assert first.session_count == 2
    assert second.session_count == 3
    assert first.set_count == 1


def test_each_set_in_exactly_one_period(collection):
    """Test that summarize partitions the collection."""
    periods = summarize(collection)

    members = [saved.id for period in periods for saved in period.sessions]
    assert sorted(members) == sorted(saved.id for saved in collection)


def test_total_time_is_conserved(collection):
    """Test that period totals add up to the collection total."""
    periods = summarize(collection)

    assert sum(p.total_time for p in periods) == sum(s.total_time for s in collection)
    assert sum(p.session_count for p in periods) == sum(
        s.session_count for s in collection
    )


def test_sorted_most_recent_first(collection):
    """Test that periods come out in descending start order."""
    starts = [period.start_date for period in summarize(collection)]

    assert starts == sorted(starts, reverse=True)
    assert starts[0] == datetime(2026, 2, 16)
    assert starts[-1] == datetime(2025, 12, 16)


def test_day_fifteen_and_sixteen_boundary(collection):
    """Test that the 15th late at night and the 16th at midnight split."""
    periods = {p.start_date: p for p in summarize(collection)}

    assert periods[datetime(2026, 2, 1)].total_time == 60_000
    assert periods[datetime(2026, 2, 16)].total_time == 42


def test_sets_in_same_period_accumulate(collection):
    """Test that sets sharing a period are summed together."""
    january_first_half = next(
        p for p in summarize(collection) if p.start_date == datetime(2026, 1, 1)
    )

    assert january_first_half.set_count == 2
    assert january_first_half.total_time == 5000
    assert january_first_half.session_count == 3


def test_summarize_is_idempotent(collection):
    """Test that two calls on the same collection give equal results."""
    assert summarize(collection) == summarize(collection)


def test_summarize_empty():
    """Test that no sets produce no periods."""
    assert summarize([]) == []


@pytest.mark.parametrize(
    "year, month, half, start, end",
    [
        (2026, 3, PeriodHalf.FIRST, datetime(2026, 3, 1), datetime(2026, 3, 15, 23, 59, 59, 999000)),
        (2026, 3, PeriodHalf.SECOND, datetime(2026, 3, 16), datetime(2026, 3, 31, 23, 59, 59, 999000)),
        (2026, 4, PeriodHalf.SECOND, datetime(2026, 4, 16), datetime(2026, 4, 30, 23, 59, 59, 999000)),
        (2026, 2, PeriodHalf.SECOND, datetime(2026, 2, 16), datetime(2026, 2, 28, 23, 59, 59, 999000)),
        (2024, 2, PeriodHalf.SECOND, datetime(2024, 2, 16), datetime(2024, 2, 29, 23, 59, 59, 999000)),
        (2025, 12, PeriodHalf.SECOND, datetime(2025, 12, 16), datetime(2025, 12, 31, 23, 59, 59, 999000)),
    ],
)
def test_period_bounds(year, month, half, start, end):
    """Test inclusive period bounds, including month lengths and leap years."""
    assert period_bounds(year, month, half) == (start, end)


@pytest.mark.parametrize(
    "day, half",
    [(1, PeriodHalf.FIRST), (15, PeriodHalf.FIRST), (16, PeriodHalf.SECOND), (31, PeriodHalf.SECOND)],
)
def test_period_half(day, half):
    """Test the day-of-month split."""
    assert period_half(day) is half


def test_labels():
    """Test period labels for both halves."""
    first, second = sorted(
        summarize(
            [
                make_set(datetime(2024, 2, 3), 10),
                make_set(datetime(2024, 2, 28), 10),
            ]
        ),
        key=lambda p: p.start_date,
    )

    assert format_period_label(first) == "February 1-15, 2024"
    assert format_period_label(second) == "February 16-29, 2024"


def test_aware_timestamps_use_stored_date():
    """Test that timezone-aware creation times bucket by their own date."""
    saved = make_set(datetime(2026, 5, 15, 23, 30, tzinfo=timezone.utc), 100)

    (period,) = summarize([saved])

    assert period.start_date == datetime(2026, 5, 1)
    assert period.half is PeriodHalf.FIRST


def test_label_property_matches_formatter():
    """Test that a period exposes its own label."""
    (period,) = summarize([make_set(datetime(2026, 4, 20), 10)])

    assert period.label == format_period_label(period) == "April 16-30, 2026"
