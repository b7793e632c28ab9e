"""
Read-only access to the entities the dashboard summarizes.

Wraps the Supabase tables owned by the CRUD side of the application and
returns typed models. Nothing here writes.
"""

from datetime import datetime
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, Type, TypeVar

import structlog

from config import get_supabase_client
from models.entities import (
    ActivityLogEntry,
    Customer,
    Invoice,
    OrderStatus,
    Vendor,
    WorkOrder,
)
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)

M = TypeVar("M")

# Supabase caps a single select at 1000 rows
PAGE_SIZE = 1000


class EntityReader:
    """
    Entity reads for dashboard aggregation.

    Every method returns parsed models and raises DatabaseError on failure.
    """

    def __init__(self):
        self.db = get_supabase_client()

    # ===================
    # INTERNAL
    # ===================

    def _fetch_all(
        self,
        table: str,
        model: Type[M],
        build: Callable[[Any], Any],
        operation: str,
        order: Sequence[Tuple[str, bool]] = (),
        limit: Optional[int] = None,
    ) -> List[M]:
        """
        Page through a filtered select until the table is exhausted.

        Rows are always ordered, with id as the final key, so consecutive
        ranges neither overlap nor skip rows.

        Args:
            table: Table name
            model: Row model
            build: Applies filters to a fresh select query
            operation: Name used in logs and errors
            order: (column, descending) sort keys, applied before id
            limit: Read at most this many rows with a single select
        """
        ordering = list(order)
        if "id" not in [column for column, _ in ordering]:
            ordering.append(("id", False))

        def select():
            query = build(self.db.table(table).select("*"))
            for column, desc in ordering:
                query = query.order(column, desc=desc)
            return query

        try:
            if limit is not None:
                rows = select().limit(limit).execute().data or []
            else:
                rows = []
                offset = 0
                while True:
                    result = select().range(offset, offset + PAGE_SIZE - 1).execute()
                    batch = result.data or []
                    rows.extend(batch)
                    if len(batch) < PAGE_SIZE:
                        break
                    offset += PAGE_SIZE

        except Exception as e:
            logger.error(f"{operation}_failed", error=str(e), error_type=type(e).__name__)
            raise DatabaseError("select", str(e), details={"table": table}) from e

        logger.debug("entities_fetched", operation=operation, count=len(rows))
        return [model(**row) for row in rows]

    @staticmethod
    def _since(query, since: Optional[datetime]):
        if since is not None and since.year > datetime.min.year:
            query = query.gte("created_at", since.isoformat())
        return query

    # ===================
    # CUSTOMERS / VENDORS
    # ===================

    def get_customers(
        self,
        since: Optional[datetime] = None,
        created_by_id: Optional[str] = None,
        active_only: bool = True,
    ) -> List[Customer]:
        """
        Customers, optionally restricted to a creation window and creator.

        Args:
            since: Only customers created at or after this instant
            created_by_id: Only customers created by this operator
            active_only: Skip deactivated customers
        """
        def build(query):
            query = self._since(query, since)
            if active_only:
                query = query.eq("is_active", True)
            if created_by_id:
                query = query.eq("created_by_id", created_by_id)
            return query

        return self._fetch_all("customers", Customer, build, "get_customers")

    def get_vendors(
        self,
        since: Optional[datetime] = None,
        created_by_id: Optional[str] = None,
        active_only: bool = True,
    ) -> List[Vendor]:
        """Vendors, filtered like get_customers."""
        def build(query):
            query = self._since(query, since)
            if active_only:
                query = query.eq("is_active", True)
            if created_by_id:
                query = query.eq("created_by_id", created_by_id)
            return query

        return self._fetch_all("vendors", Vendor, build, "get_vendors")

    def get_customers_by_ids(self, ids: Iterable[str]) -> List[Customer]:
        """Customers by id, active or not (used to label invoices)."""
        id_list = sorted(set(i for i in ids if i))
        if not id_list:
            return []
        return self._fetch_all(
            "customers", Customer, lambda q: q.in_("id", id_list), "get_customers_by_ids"
        )

    # ===================
    # ORDERS
    # ===================

    def get_orders(
        self,
        since: Optional[datetime] = None,
        assigned_to_id: Optional[str] = None,
        statuses: Optional[Iterable[OrderStatus]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[WorkOrder]:
        """
        Work orders.

        Args:
            since: Only orders created at or after this instant
            assigned_to_id: Only orders assigned to this operator
            statuses: Only orders in one of these statuses
            order_by: Ascending sort column (nulls last)
            limit: Return at most this many orders
        """
        status_values = sorted(s.value for s in statuses) if statuses else None

        def build(query):
            query = self._since(query, since)
            if assigned_to_id:
                query = query.eq("assigned_to_id", assigned_to_id)
            if status_values:
                query = query.in_("status", status_values)
            return query

        order = [(order_by, False)] if order_by else []
        return self._fetch_all("orders", WorkOrder, build, "get_orders", order=order, limit=limit)

    def get_orders_by_ids(self, ids: Iterable[str]) -> List[WorkOrder]:
        """Orders by id (parents of invoices)."""
        id_list = sorted(set(i for i in ids if i))
        if not id_list:
            return []
        return self._fetch_all(
            "orders", WorkOrder, lambda q: q.in_("id", id_list), "get_orders_by_ids"
        )

    # ===================
    # INVOICES
    # ===================

    def get_invoices(
        self,
        statuses: Optional[Iterable[str]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Invoice]:
        """Invoices, optionally restricted to some statuses. Sorted and limited like get_orders."""
        status_values = sorted(statuses) if statuses else None

        def build(query):
            if status_values:
                query = query.in_("status", status_values)
            return query

        order = [(order_by, False)] if order_by else []
        return self._fetch_all("invoices", Invoice, build, "get_invoices", order=order, limit=limit)

    # ===================
    # ACTIVITY
    # ===================

    def get_activity_logs(self, user_id: str, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        """
        Activity entries for one operator, newest first.

        Args:
            user_id: Operator whose entries to read
            limit: Read only the newest `limit` entries
        """
        return self._fetch_all(
            "activity_logs",
            ActivityLogEntry,
            lambda q: q.eq("user_id", user_id),
            "get_activity_logs",
            order=[("created_at", True)],
            limit=limit,
        )


# Singleton instance
_entity_reader: Optional[EntityReader] = None


def get_entity_reader() -> EntityReader:
    """Get or create EntityReader instance."""
    global _entity_reader
    if _entity_reader is None:
        _entity_reader = EntityReader()
    return _entity_reader
