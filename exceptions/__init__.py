"""
Custom exceptions module.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    UnauthorizedError,
    DatabaseError,

    # Dashboard
    DashboardAggregationError,
)

__all__ = [
    # Base
    "AppError",
    "UnauthorizedError",
    "DatabaseError",

    # Dashboard
    "DashboardAggregationError",
]
