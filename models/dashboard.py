"""
Dashboard schemas.

Defines the operator identity handed to the dashboard, the reporting window,
and the two snapshot variants returned by GET /api/dashboard:

- GlobalSnapshot (view="admin"): business-wide totals, country groupings,
  soonest-due work and payments, yearly trends.
- ScopedSnapshot (view="sub_admin"): one operator's workload, their
  soonest-due orders, recent activity and monthly progress.

The variants share nothing beyond BaseSchema. DashboardSnapshot is the
tagged union discriminated on `view`.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import ConfigDict, Field

from models.base import BaseSchema
from models.entities import OrderPriority, OrderStatus


class OperatorRole(str, Enum):
    """Operator role. Anything other than ADMIN is ownership-scoped."""

    ADMIN = "ADMIN"
    SUB_ADMIN = "SUB_ADMIN"


class Period(str, Enum):
    """Coarse reporting period selector."""

    ALL = "all"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class IdentityContext(BaseSchema):
    """Already-verified operator identity supplied by the auth gateway."""

    operator_id: str = Field(..., min_length=1)
    role: OperatorRole
    permissions: frozenset[str] = Field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return self.role == OperatorRole.ADMIN


class TimeWindow(BaseSchema):
    """Reporting window [start, end). `end` is the snapshot's `now`."""

    model_config = ConfigDict(frozen=True)

    period: Period
    start: datetime
    end: datetime

    @property
    def is_unbounded(self) -> bool:
        return self.start.year == datetime.min.year

    def contains(self, instant: datetime) -> bool:
        """Lower bound only; rows created after `now` still count."""
        return instant >= self.start


# ===================
# LIST ITEMS
# ===================

class Coordinates(BaseSchema):
    """Display coordinates for a country."""

    latitude: float
    longitude: float


class CountryCount(BaseSchema):
    """One row of a per-country grouping."""

    country: str
    count: int
    coordinates: Coordinates


class PendingWorkItem(BaseSchema):
    """Work order close to its due date."""

    id: str
    reference_number: str
    title: str
    days_left: Optional[int] = Field(None, description="Whole days until due; negative when overdue")
    status: OrderStatus
    priority: OrderPriority
    due_date: Optional[datetime] = None


class PendingPaymentItem(BaseSchema):
    """Pending invoice close to its payment due date."""

    id: str
    invoice_number: str
    order_reference_number: Optional[str] = None
    image_url: Optional[str] = None
    days_left: Optional[int] = None
    amount: Decimal
    currency: str
    customer_name: Optional[str] = None
    due_date: Optional[datetime] = None


class ActivityItem(BaseSchema):
    """Recent activity entry for a scoped operator."""

    id: str
    action: str
    description: str
    created_at: datetime


class YearlyTrendPoint(BaseSchema):
    """Yearly creation counts across customers, vendors and completed orders."""

    year: int
    customers: int = 0
    vendors: int = 0
    orders: int = 0


class MonthlyProgressPoint(BaseSchema):
    """Completed vs pending orders created in one calendar month."""

    month: str = Field(..., description="Abbreviated month name, e.g. 'Jan'")
    completed: int = 0
    pending: int = 0


# ===================
# SNAPSHOTS
# ===================

class GlobalSnapshot(BaseSchema):
    """Business-wide dashboard for administrators."""

    model_config = ConfigDict(frozen=True)

    view: Literal["admin"] = "admin"
    period: Period
    generated_at: datetime

    total_customers: int
    total_vendors: int
    total_orders_completed: int
    total_orders_closed: int

    customers_by_country: List[CountryCount] = Field(default_factory=list)
    vendors_by_country: List[CountryCount] = Field(default_factory=list)
    work_distribution: List[CountryCount] = Field(default_factory=list)

    pending_work: List[PendingWorkItem] = Field(default_factory=list)
    pending_payments: List[PendingPaymentItem] = Field(default_factory=list)

    yearly_trends: List[YearlyTrendPoint] = Field(default_factory=list)


class ScopedSnapshot(BaseSchema):
    """Dashboard restricted to what one operator owns or is assigned."""

    model_config = ConfigDict(frozen=True)

    view: Literal["sub_admin"] = "sub_admin"
    period: Period
    generated_at: datetime

    assigned_customers: int
    assigned_vendors: int
    total_orders: int
    orders_yet_to_start: int
    orders_in_progress: int
    orders_pending_with_client: int
    orders_completed: int
    orders_closed: int

    assigned_pending_orders: List[PendingWorkItem] = Field(default_factory=list)
    recent_activities: List[ActivityItem] = Field(default_factory=list)
    monthly_progress: List[MonthlyProgressPoint] = Field(default_factory=list)


DashboardSnapshot = Annotated[
    Union[GlobalSnapshot, ScopedSnapshot],
    Field(discriminator="view"),
]
