"""
Reporting window resolution.

Maps a coarse period token plus a fixed `now` to the window every dashboard
query is restricted to. Unknown tokens never fail: they fall back to an
unbounded window so a bad query string still shows all data.
"""

from datetime import datetime
from typing import Optional, Union

import structlog

from models.dashboard import Period, TimeWindow

logger = structlog.get_logger(__name__)


def parse_period(value: Optional[Union[str, Period]]) -> Period:
    """Map a period token to a Period. Matching is exact; anything else becomes Period.ALL."""
    if isinstance(value, Period):
        return value
    try:
        return Period(value or "")
    except ValueError:
        if value:
            logger.debug("unknown_period_token", period=value)
        return Period.ALL


def resolve_start(period: Period, now: datetime) -> datetime:
    """
    First instant of the window for `period`, in now's timezone.

    - MONTH: first day of now's month
    - QUARTER: first day of the 3-month block containing now
    - YEAR: January 1st of now's year
    - ALL: datetime.min
    """
    midnight = dict(hour=0, minute=0, second=0, microsecond=0)

    if period == Period.MONTH:
        return now.replace(day=1, **midnight)
    if period == Period.QUARTER:
        quarter = (now.month - 1) // 3
        return now.replace(month=quarter * 3 + 1, day=1, **midnight)
    if period == Period.YEAR:
        return now.replace(month=1, day=1, **midnight)
    return datetime.min.replace(tzinfo=now.tzinfo)


def resolve_window(period: Optional[Union[str, Period]], now: datetime) -> TimeWindow:
    """
    Resolve the reporting window for a period token.

    Args:
        period: 'all', 'month', 'quarter', 'year' (anything else means 'all')
        now: The snapshot's single reference instant

    Returns:
        TimeWindow with start <= end == now
    """
    resolved = parse_period(period)
    return TimeWindow(period=resolved, start=resolve_start(resolved, now), end=now)
