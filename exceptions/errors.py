"""
Custom exception classes for the application.

Every error rendered by the API goes through AppError.to_dict().
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "DATABASE_ERROR")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class UnauthorizedError(AppError):
    """Missing or unusable operator identity (401)."""

    def __init__(
        self,
        message: str = "Unauthorized",
        details: Optional[dict] = None
    ):
        super().__init__(
            code="UNAUTHORIZED",
            message=message,
            status_code=401,
            details=details
        )


class DatabaseError(AppError):
    """Database operation failed (500)."""

    def __init__(
        self,
        operation: str,
        message: str,
        details: Optional[dict] = None
    ):
        super().__init__(
            code="DATABASE_ERROR",
            message=f"Database {operation} failed: {message}",
            status_code=500,
            details={"operation": operation, **(details or {})}
        )


# ===================
# DASHBOARD ERRORS
# ===================

class DashboardAggregationError(AppError):
    """
    A dashboard sub-query failed (500).

    Raised instead of returning a snapshot with missing sections.
    Details are kept generic so no partial data leaks to the client.
    """

    def __init__(self, view: str, failed_query: Optional[str] = None):
        details = {"view": view}
        if failed_query:
            details["query"] = failed_query
        super().__init__(
            code="DASHBOARD_AGGREGATION_FAILED",
            message="Dashboard data could not be loaded",
            status_code=500,
            details=details
        )
