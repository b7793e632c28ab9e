"""
Read models for the entities the dashboard summarizes.

Rows are owned by the CRUD side of the application; these schemas only
parse what the dashboard needs out of the Supabase tables.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from models.base import BaseSchema, TimestampMixin


class OrderStatus(str, Enum):
    """Work order lifecycle status."""

    YET_TO_START = "YET_TO_START"
    IN_PROGRESS = "IN_PROGRESS"
    PENDING_WITH_CLIENT = "PENDING_WITH_CLIENT"
    COMPLETED = "COMPLETED"
    CLOSED = "CLOSED"


class OrderPriority(str, Enum):
    """Work order priority."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


# Orders still being worked on
IN_FLIGHT_STATUSES = frozenset({
    OrderStatus.YET_TO_START,
    OrderStatus.IN_PROGRESS,
    OrderStatus.PENDING_WITH_CLIENT,
})

INVOICE_STATUS_PENDING = "PENDING"


def as_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class Customer(BaseSchema, TimestampMixin):
    """Customer row (table: customers)."""

    id: str
    name: str = ""
    country: Optional[str] = None
    is_active: bool = True
    created_by_id: Optional[str] = None


class Vendor(BaseSchema, TimestampMixin):
    """Vendor row (table: vendors)."""

    id: str
    name: str = ""
    country: Optional[str] = None
    is_active: bool = True
    created_by_id: Optional[str] = None


class WorkOrder(BaseSchema, TimestampMixin):
    """Work order row (table: orders)."""

    id: str
    reference_number: str
    title: str = ""
    status: OrderStatus
    priority: OrderPriority = OrderPriority.MEDIUM
    country: Optional[str] = None
    due_date: Optional[datetime] = None
    assigned_to_id: Optional[str] = None
    customer_id: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @property
    def is_in_flight(self) -> bool:
        return self.status in IN_FLIGHT_STATUSES


class Invoice(BaseSchema, TimestampMixin):
    """Invoice row (table: invoices). Always belongs to one order."""

    id: str
    invoice_number: str
    status: str = Field(..., description="PENDING, PAID, ...")
    due_date: Optional[datetime] = None
    amount: Decimal = Decimal("0")
    currency: str = "USD"
    order_id: str
    image_url: Optional[str] = None

    @field_validator("due_date")
    @classmethod
    def due_date_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class ActivityLogEntry(BaseSchema, TimestampMixin):
    """Append-only operator activity (table: activity_logs)."""

    id: str
    user_id: str
    action: str = ""
    description: str = ""
