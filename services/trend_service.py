"""
Trend series for the dashboard charts.

- Yearly trend (admin view): customers, vendors and completed orders created
  per calendar year.
- Monthly progress (scoped view): completed vs pending orders per calendar
  month over a trailing window.
"""

import calendar
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List

import structlog

from models.dashboard import MonthlyProgressPoint, YearlyTrendPoint
from models.entities import (
    Customer,
    IN_FLIGHT_STATUSES,
    OrderStatus,
    Vendor,
    WorkOrder,
)

logger = structlog.get_logger(__name__)


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    Same wall-clock time `months` calendar months earlier.

    The day is clamped to the target month's length (Aug 31 - 6 months
    gives Feb 28/29).
    """
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def yearly_trend(
    customers: Iterable[Customer],
    vendors: Iterable[Vendor],
    orders: Iterable[WorkOrder],
) -> List[YearlyTrendPoint]:
    """
    One row per creation year seen in any of the three collections.

    Inactive customers and vendors are ignored. Every order makes its year
    appear, but only COMPLETED orders are counted in the `orders` column.

    Returns:
        Rows sorted by year ascending
    """
    rows: Dict[int, Dict[str, int]] = defaultdict(
        lambda: {"customers": 0, "vendors": 0, "orders": 0}
    )

    for customer in customers:
        if customer.is_active:
            rows[customer.created_at.year]["customers"] += 1

    for vendor in vendors:
        if vendor.is_active:
            rows[vendor.created_at.year]["vendors"] += 1

    for order in orders:
        row = rows[order.created_at.year]
        if order.status == OrderStatus.COMPLETED:
            row["orders"] += 1

    return [
        YearlyTrendPoint(year=year, **counts)
        for year, counts in sorted(rows.items())
    ]


def monthly_trend(
    orders: Iterable[WorkOrder],
    now: datetime,
    months_back: int = 6,
) -> List[MonthlyProgressPoint]:
    """
    Completed vs pending orders per calendar month.

    Only orders created on or after `now - months_back months` count.
    Rows are ordered by month of year (Jan..Dec), not chronologically, so a
    window crossing New Year lists January before November.

    Args:
        orders: One operator's assigned orders
        now: Snapshot reference instant
        months_back: Trailing window length in calendar months

    Returns:
        One row per month that has at least one order in the window
    """
    cutoff = subtract_months(now, months_back)
    months: Dict[int, Dict[str, int]] = {}

    for order in orders:
        if order.created_at < cutoff:
            continue
        row = months.setdefault(order.created_at.month, {"completed": 0, "pending": 0})
        if order.status == OrderStatus.COMPLETED:
            row["completed"] += 1
        elif order.status in IN_FLIGHT_STATUSES:
            row["pending"] += 1

    logger.debug(
        "monthly_trend_calculated",
        cutoff=cutoff.isoformat(),
        months=len(months)
    )

    return [
        MonthlyProgressPoint(month=calendar.month_abbr[month], **counts)
        for month, counts in sorted(months.items())
    ]
