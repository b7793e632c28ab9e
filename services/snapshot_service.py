"""
Snapshot assembly.

Turns raw aggregate results into GlobalSnapshot / ScopedSnapshot, adding
days remaining, country coordinates, and the customer/order labels shown
next to each pending invoice. Pure: no reads, no clock access.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from models.dashboard import (
    ActivityItem,
    CountryCount,
    GlobalSnapshot,
    MonthlyProgressPoint,
    PendingPaymentItem,
    PendingWorkItem,
    ScopedSnapshot,
    TimeWindow,
    YearlyTrendPoint,
)
from models.entities import ActivityLogEntry, Customer, Invoice, WorkOrder
from services.geo_service import get_country_coordinates

SECONDS_PER_DAY = 86_400


def days_remaining(due_date: Optional[datetime], now: datetime) -> Optional[int]:
    """
    Whole days until `due_date`, rounded up. Negative when overdue.

    Returns None when there is no due date.
    """
    if due_date is None:
        return None
    return math.ceil((due_date - now).total_seconds() / SECONDS_PER_DAY)


def country_rows(groups: Sequence[Tuple[str, int]]) -> List[CountryCount]:
    """Attach coordinates to (country, count) pairs."""
    return [
        CountryCount(country=country, count=count, coordinates=get_country_coordinates(country))
        for country, count in groups
    ]


def pending_work_item(order: WorkOrder, now: datetime) -> PendingWorkItem:
    return PendingWorkItem(
        id=order.id,
        reference_number=order.reference_number,
        title=order.title,
        days_left=days_remaining(order.due_date, now),
        status=order.status,
        priority=order.priority,
        due_date=order.due_date,
    )


def pending_payment_item(
    invoice: Invoice,
    now: datetime,
    orders: Dict[str, WorkOrder],
    customers: Dict[str, Customer],
) -> PendingPaymentItem:
    """
    Invoice row labelled with its parent order and that order's customer.

    Missing parents leave the labels empty.
    """
    order = orders.get(invoice.order_id)
    customer = customers.get(order.customer_id) if order and order.customer_id else None

    return PendingPaymentItem(
        id=invoice.id,
        invoice_number=invoice.invoice_number,
        order_reference_number=order.reference_number if order else None,
        image_url=invoice.image_url,
        days_left=days_remaining(invoice.due_date, now),
        amount=invoice.amount,
        currency=invoice.currency,
        customer_name=customer.name if customer else None,
        due_date=invoice.due_date,
    )


def activity_item(entry: ActivityLogEntry) -> ActivityItem:
    return ActivityItem(
        id=entry.id,
        action=entry.action,
        description=entry.description,
        created_at=entry.created_at,
    )


@dataclass
class PendingPayments:
    """Soonest-due invoices plus the parents needed to label them."""

    invoices: List[Invoice] = field(default_factory=list)
    orders: Dict[str, WorkOrder] = field(default_factory=dict)
    customers: Dict[str, Customer] = field(default_factory=dict)


@dataclass
class GlobalAggregates:
    """Raw results of the admin query set."""

    total_customers: int
    total_vendors: int
    total_orders_completed: int
    total_orders_closed: int
    customers_by_country: List[Tuple[str, int]]
    vendors_by_country: List[Tuple[str, int]]
    work_distribution: List[Tuple[str, int]]
    pending_work: List[WorkOrder]
    pending_payments: PendingPayments
    yearly_trends: List[YearlyTrendPoint]


@dataclass
class ScopedAggregates:
    """Raw results of the scoped query set."""

    assigned_customers: int
    assigned_vendors: int
    total_orders: int
    orders_yet_to_start: int
    orders_in_progress: int
    orders_pending_with_client: int
    orders_completed: int
    orders_closed: int
    assigned_pending_orders: List[WorkOrder]
    recent_activities: List[ActivityLogEntry]
    monthly_progress: List[MonthlyProgressPoint]


def assemble_global(aggregates: GlobalAggregates, window: TimeWindow) -> GlobalSnapshot:
    """Build the admin snapshot. `window.end` is the shared `now`."""
    now = window.end
    payments = aggregates.pending_payments

    return GlobalSnapshot(
        period=window.period,
        generated_at=now,
        total_customers=aggregates.total_customers,
        total_vendors=aggregates.total_vendors,
        total_orders_completed=aggregates.total_orders_completed,
        total_orders_closed=aggregates.total_orders_closed,
        customers_by_country=country_rows(aggregates.customers_by_country),
        vendors_by_country=country_rows(aggregates.vendors_by_country),
        work_distribution=country_rows(aggregates.work_distribution),
        pending_work=[pending_work_item(o, now) for o in aggregates.pending_work],
        pending_payments=[
            pending_payment_item(inv, now, payments.orders, payments.customers)
            for inv in payments.invoices
        ],
        yearly_trends=aggregates.yearly_trends,
    )


def assemble_scoped(aggregates: ScopedAggregates, window: TimeWindow) -> ScopedSnapshot:
    """Build the scoped snapshot. `window.end` is the shared `now`."""
    now = window.end

    return ScopedSnapshot(
        period=window.period,
        generated_at=now,
        assigned_customers=aggregates.assigned_customers,
        assigned_vendors=aggregates.assigned_vendors,
        total_orders=aggregates.total_orders,
        orders_yet_to_start=aggregates.orders_yet_to_start,
        orders_in_progress=aggregates.orders_in_progress,
        orders_pending_with_client=aggregates.orders_pending_with_client,
        orders_completed=aggregates.orders_completed,
        orders_closed=aggregates.orders_closed,
        assigned_pending_orders=[pending_work_item(o, now) for o in aggregates.assigned_pending_orders],
        recent_activities=[activity_item(e) for e in aggregates.recent_activities],
        monthly_progress=aggregates.monthly_progress,
    )
