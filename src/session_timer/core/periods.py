"""Half-month summaries of saved session sets."""

import calendar
from datetime import date, datetime, time
from typing import Dict, Iterable, List, Tuple

from session_timer.models.period import PeriodHalf, SessionSummaryPeriod
from session_timer.models.session import SavedSessionSet

END_OF_DAY = time(23, 59, 59, 999000)
FIRST_HALF_LAST_DAY = 15


def period_half(day: int) -> PeriodHalf:
    """Return the half of the month a day of the month falls in."""
    return PeriodHalf.FIRST if day <= FIRST_HALF_LAST_DAY else PeriodHalf.SECOND


def period_bounds(year: int, month: int, half: PeriodHalf) -> Tuple[datetime, datetime]:
    """Inclusive start and end instants of a half-month period."""
    if half is PeriodHalf.FIRST:
        first_day, last_day = 1, FIRST_HALF_LAST_DAY
    else:
        first_day = FIRST_HALF_LAST_DAY + 1
        last_day = calendar.monthrange(year, month)[1]
    start = datetime(year, month, first_day)
    end = datetime.combine(date(year, month, last_day), END_OF_DAY)
    return start, end


def summarize(all_sets: Iterable[SavedSessionSet]) -> List[SessionSummaryPeriod]:
    """Group saved sets into half-month periods, most recent first.

    Each set lands in exactly one period, chosen by the date of its
    ``created_at``. Nothing is cached: call again after every change.
    """
    groups: Dict[Tuple[int, int, PeriodHalf], List[SavedSessionSet]] = {}
    for saved in all_sets:
        created = saved.created_at
        key = (created.year, created.month, period_half(created.day))
        groups.setdefault(key, []).append(saved)

    periods = []
    for (year, month, half), members in groups.items():
        start_date, end_date = period_bounds(year, month, half)
        total_time = 0
        session_count = 0
        for saved in members:
            total_time += saved.total_time
            session_count += saved.session_count

        periods.append(
            SessionSummaryPeriod(
                start_date=start_date,
                end_date=end_date,
                half=half,
                sessions=tuple(members),
                total_time=total_time,
                session_count=session_count,
            )
        )

    periods.sort(key=lambda period: period.start_date, reverse=True)
    return periods


def format_period_label(period: SessionSummaryPeriod) -> str:
    """Human-readable label, e.g. ``March 1-15, 2026``."""
    month_name = calendar.month_name[period.start_date.month]
    year = period.start_date.year
    if period.half is PeriodHalf.FIRST:
        return f"{month_name} 1-{FIRST_HALF_LAST_DAY}, {year}"
    return f"{month_name} {FIRST_HALF_LAST_DAY + 1}-{period.end_date.day}, {year}"
