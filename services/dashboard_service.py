"""
Dashboard aggregation service.

Builds one consistent snapshot of business state per request:

1. Capture a single `now` and resolve the reporting window from it
2. Pick the query set for the operator's role (admin vs scoped), once
3. Run every sub-query concurrently and wait for all of them
4. Assemble the snapshot from the joined results

A failing sub-query fails the whole snapshot. Nothing is retried and no
partial dashboard is returned.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Union

import structlog

from config import settings
from exceptions import DashboardAggregationError
from models.dashboard import (
    DashboardSnapshot,
    GlobalSnapshot,
    IdentityContext,
    Period,
    ScopedSnapshot,
    TimeWindow,
)
from models.entities import (
    IN_FLIGHT_STATUSES,
    INVOICE_STATUS_PENDING,
    OrderStatus,
    as_utc,
)
from services.entity_service import EntityReader, get_entity_reader
from services.ranking_service import count_where, group_count, top_n
from services.snapshot_service import (
    GlobalAggregates,
    PendingPayments,
    ScopedAggregates,
    assemble_global,
    assemble_scoped,
)
from services.time_window_service import resolve_window
from services.trend_service import monthly_trend, subtract_months, yearly_trend

logger = structlog.get_logger(__name__)


class DashboardService:
    """
    Role-aware dashboard aggregation.

    Every sub-query is a synchronous read-and-reduce step; they are run on
    worker threads and joined with asyncio.gather.
    """

    def __init__(self, reader: Optional[EntityReader] = None):
        self.reader = reader or get_entity_reader()
        self.group_limit = settings.dashboard_group_limit
        self.ranked_limit = settings.dashboard_ranked_limit
        self.activity_limit = settings.dashboard_activity_limit
        self.trend_months = settings.dashboard_trend_months

    # ===================
    # ENTRY POINT
    # ===================

    async def build_snapshot(
        self,
        identity: IdentityContext,
        period: Optional[Union[str, Period]] = None,
        now: Optional[datetime] = None,
    ) -> DashboardSnapshot:
        """
        Build the dashboard snapshot for an operator.

        Args:
            identity: Verified operator identity
            period: 'all', 'month', 'quarter' or 'year'; anything else means 'all'
            now: Reference instant (defaults to current UTC time)

        Returns:
            GlobalSnapshot for admins, ScopedSnapshot for everyone else

        Raises:
            DashboardAggregationError: If any sub-query fails
        """
        now = as_utc(now) or datetime.now(timezone.utc)
        window = resolve_window(period, now)
        view = "admin" if identity.is_admin else "sub_admin"

        logger.info(
            "building_dashboard_snapshot",
            operator_id=identity.operator_id,
            view=view,
            period=window.period.value,
            window_start=None if window.is_unbounded else window.start.isoformat()
        )

        started = time.perf_counter()
        if identity.is_admin:
            snapshot = await self._build_global(window)
        else:
            snapshot = await self._build_scoped(identity.operator_id, window)

        logger.info(
            "dashboard_snapshot_built",
            operator_id=identity.operator_id,
            view=view,
            elapsed_ms=round((time.perf_counter() - started) * 1000, 1)
        )
        return snapshot

    # ===================
    # FAN-OUT / JOIN
    # ===================

    async def _gather(self, view: str, queries: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        """
        Run all queries concurrently and return their results by name.

        Waits for every query to settle before inspecting results.

        Raises:
            DashboardAggregationError: Wrapping the first failed query
        """
        names = list(queries)
        results = await asyncio.gather(
            *(asyncio.to_thread(queries[name]) for name in names),
            return_exceptions=True,
        )

        failures = [
            (name, result)
            for name, result in zip(names, results)
            if isinstance(result, Exception)
        ]
        if failures:
            name, error = failures[0]
            logger.error(
                "dashboard_aggregation_failed",
                view=view,
                failed_queries=[n for n, _ in failures],
                error=str(error),
                error_type=type(error).__name__
            )
            raise DashboardAggregationError(view, failed_query=name) from error

        # Cancellations and other BaseExceptions are not swallowed
        for result in results:
            if isinstance(result, BaseException):
                raise result

        return dict(zip(names, results))

    # ===================
    # ADMIN VIEW
    # ===================

    async def _build_global(self, window: TimeWindow) -> GlobalSnapshot:
        reader = self.reader
        since = window.start

        def active_in_window(entity) -> bool:
            return entity.is_active and window.contains(entity.created_at)

        def in_window(entity) -> bool:
            return window.contains(entity.created_at)

        def pending_work():
            orders = reader.get_orders(
                statuses=IN_FLIGHT_STATUSES, order_by="due_date", limit=self.ranked_limit
            )
            return top_n(
                orders,
                lambda o: o.due_date is not None and o.is_in_flight,
                lambda o: o.due_date,
                self.ranked_limit,
            )

        def pending_payments() -> PendingPayments:
            invoices = top_n(
                reader.get_invoices(
                    statuses=[INVOICE_STATUS_PENDING],
                    order_by="due_date",
                    limit=self.ranked_limit,
                ),
                lambda i: i.due_date is not None and i.status == INVOICE_STATUS_PENDING,
                lambda i: i.due_date,
                self.ranked_limit,
            )
            orders = reader.get_orders_by_ids(i.order_id for i in invoices)
            customers = reader.get_customers_by_ids(o.customer_id for o in orders)
            return PendingPayments(
                invoices=invoices,
                orders={o.id: o for o in orders},
                customers={c.id: c for c in customers},
            )

        def yearly_trends():
            return yearly_trend(
                reader.get_customers(),
                reader.get_vendors(),
                reader.get_orders(),
            )

        results = await self._gather("admin", {
            "total_customers": lambda: count_where(
                reader.get_customers(since=since), active_in_window
            ),
            "total_vendors": lambda: count_where(
                reader.get_vendors(since=since), active_in_window
            ),
            "total_orders_completed": lambda: count_where(
                reader.get_orders(since=since, statuses=[OrderStatus.COMPLETED]),
                lambda o: in_window(o) and o.status == OrderStatus.COMPLETED,
            ),
            "total_orders_closed": lambda: count_where(
                reader.get_orders(since=since, statuses=[OrderStatus.CLOSED]),
                lambda o: in_window(o) and o.status == OrderStatus.CLOSED,
            ),
            "customers_by_country": lambda: group_count(
                reader.get_customers(since=since),
                active_in_window,
                lambda c: c.country,
                self.group_limit,
            ),
            "vendors_by_country": lambda: group_count(
                reader.get_vendors(since=since),
                active_in_window,
                lambda v: v.country,
                self.group_limit,
            ),
            "work_distribution": lambda: group_count(
                reader.get_orders(since=since),
                in_window,
                lambda o: o.country,
                self.group_limit,
            ),
            "pending_work": pending_work,
            "pending_payments": pending_payments,
            "yearly_trends": yearly_trends,
        })

        return assemble_global(GlobalAggregates(**results), window)

    # ===================
    # SCOPED VIEW
    # ===================

    async def _build_scoped(self, operator_id: str, window: TimeWindow) -> ScopedSnapshot:
        reader = self.reader
        now = window.end

        def status_count(status: OrderStatus) -> Callable[[], int]:
            return lambda: count_where(
                reader.get_orders(assigned_to_id=operator_id, statuses=[status]),
                lambda o: o.status == status,
            )

        def assigned_pending_orders():
            return top_n(
                reader.get_orders(
                    assigned_to_id=operator_id,
                    statuses=IN_FLIGHT_STATUSES,
                    order_by="due_date",
                    limit=self.ranked_limit,
                ),
                lambda o: o.due_date is not None and o.is_in_flight,
                lambda o: o.due_date,
                self.ranked_limit,
            )

        def recent_activities():
            return top_n(
                reader.get_activity_logs(operator_id, limit=self.activity_limit),
                lambda e: e.user_id == operator_id,
                lambda e: e.created_at,
                self.activity_limit,
                reverse=True,
            )

        def monthly_progress():
            orders = reader.get_orders(
                since=subtract_months(now, self.trend_months),
                assigned_to_id=operator_id,
            )
            return monthly_trend(orders, now, self.trend_months)

        results = await self._gather("sub_admin", {
            "assigned_customers": lambda: count_where(
                reader.get_customers(created_by_id=operator_id),
                lambda c: c.is_active and c.created_by_id == operator_id,
            ),
            "assigned_vendors": lambda: count_where(
                reader.get_vendors(created_by_id=operator_id),
                lambda v: v.is_active and v.created_by_id == operator_id,
            ),
            "total_orders": lambda: len(reader.get_orders(assigned_to_id=operator_id)),
            "orders_yet_to_start": status_count(OrderStatus.YET_TO_START),
            "orders_in_progress": status_count(OrderStatus.IN_PROGRESS),
            "orders_pending_with_client": status_count(OrderStatus.PENDING_WITH_CLIENT),
            "orders_completed": status_count(OrderStatus.COMPLETED),
            "orders_closed": status_count(OrderStatus.CLOSED),
            "assigned_pending_orders": assigned_pending_orders,
            "recent_activities": recent_activities,
            "monthly_progress": monthly_progress,
        })

        return assemble_scoped(ScopedAggregates(**results), window)


# Singleton instance
_dashboard_service: Optional[DashboardService] = None


def get_dashboard_service() -> DashboardService:
    """Get or create DashboardService instance."""
    global _dashboard_service
    if _dashboard_service is None:
        _dashboard_service = DashboardService()
    return _dashboard_service
