"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema, TimestampMixin
from models.entities import (
    OrderStatus,
    OrderPriority,
    IN_FLIGHT_STATUSES,
    Customer,
    Vendor,
    WorkOrder,
    Invoice,
    ActivityLogEntry,
)
from models.dashboard import (
    OperatorRole,
    Period,
    IdentityContext,
    TimeWindow,
    Coordinates,
    CountryCount,
    PendingWorkItem,
    PendingPaymentItem,
    ActivityItem,
    YearlyTrendPoint,
    MonthlyProgressPoint,
    GlobalSnapshot,
    ScopedSnapshot,
    DashboardSnapshot,
)

__all__ = [
    # Base
    "BaseSchema",
    "TimestampMixin",

    # Entities
    "OrderStatus",
    "OrderPriority",
    "IN_FLIGHT_STATUSES",
    "Customer",
    "Vendor",
    "WorkOrder",
    "Invoice",
    "ActivityLogEntry",

    # Dashboard
    "OperatorRole",
    "Period",
    "IdentityContext",
    "TimeWindow",
    "Coordinates",
    "CountryCount",
    "PendingWorkItem",
    "PendingPaymentItem",
    "ActivityItem",
    "YearlyTrendPoint",
    "MonthlyProgressPoint",
    "GlobalSnapshot",
    "ScopedSnapshot",
    "DashboardSnapshot",
]
