"""
Dashboard API routes.

One read endpoint returning the role-specific dashboard snapshot.
"""

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse
from typing import Optional
import structlog

from models.dashboard import DashboardSnapshot, IdentityContext, OperatorRole
from services.dashboard_service import get_dashboard_service
from exceptions import AppError, UnauthorizedError

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# IDENTITY
# ===================

def get_identity_context(
    x_operator_id: Optional[str] = Header(None),
    x_operator_role: Optional[str] = Header(None),
    x_operator_permissions: Optional[str] = Header(None),
) -> Optional[IdentityContext]:
    """
    Read the operator identity forwarded by the auth gateway.

    The gateway has already verified the caller; this only parses headers.
    Any role other than ADMIN is treated as scoped.

    Returns:
        IdentityContext, or None when the headers are missing
    """
    operator_id = (x_operator_id or "").strip()
    role = (x_operator_role or "").strip().upper()
    if not operator_id or not role:
        return None

    permissions = frozenset(
        p.strip() for p in (x_operator_permissions or "").split(",") if p.strip()
    )
    return IdentityContext(
        operator_id=operator_id,
        role=OperatorRole.ADMIN if role == OperatorRole.ADMIN.value else OperatorRole.SUB_ADMIN,
        permissions=permissions,
    )


# ===================
# DASHBOARD ROUTES
# ===================

@router.get("", response_model=DashboardSnapshot)
async def get_dashboard(
    period: Optional[str] = Query(None, description="all, month, quarter or year"),
    timeframe: Optional[str] = Query(None, description="Alias of period"),
    identity: Optional[IdentityContext] = Depends(get_identity_context),
):
    """
    Get the dashboard snapshot for the calling operator.

    Admins get business-wide totals, country groupings, soonest-due work and
    payments, and yearly trends. Other operators get their own workload,
    soonest-due assigned orders, recent activity and monthly progress.

    Unknown periods fall back to all time.
    """
    try:
        if identity is None:
            raise UnauthorizedError()

        service = get_dashboard_service()
        return await service.build_snapshot(identity, period or timeframe)

    except Exception as e:
        return handle_error(e)
