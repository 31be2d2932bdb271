"""Per-day totals for a summary period."""

import logging
from datetime import date, timedelta
from typing import Dict, List

from session_timer.models.period import DayTotal, SessionSummaryPeriod

logger = logging.getLogger(__name__)


def breakdown(period: SessionSummaryPeriod) -> List[DayTotal]:
    """Sum session durations per calendar day of ``period``.

    Every day from start to end is present, in ascending order, including
    days with nothing recorded. Days come from the stored timestamps as is.
    """
    totals: Dict[date, int] = {}
    day = period.start_date.date()
    last_day = period.end_date.date()
    while day <= last_day:
        totals[day] = 0
        day += timedelta(days=1)

    for saved in period.sessions:
        for session in saved.sessions:
            session_day = session.timestamp.date()
            if session_day in totals:
                totals[session_day] += session.duration
            else:
                logger.debug(
                    "Session %d on %s falls outside %s..%s",
                    session.id,
                    session_day,
                    period.start_date.date(),
                    last_day,
                )

    return [DayTotal(day, total_ms) for day, total_ms in totals.items()]
