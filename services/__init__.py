"""
Business logic services.

Each service handles one step of dashboard aggregation.
"""

from services.entity_service import EntityReader, get_entity_reader
from services.dashboard_service import DashboardService, get_dashboard_service
from services.time_window_service import resolve_window, parse_period
from services.geo_service import get_country_coordinates, COUNTRY_COORDINATES

__all__ = [
    "EntityReader",
    "get_entity_reader",
    "DashboardService",
    "get_dashboard_service",
    "resolve_window",
    "parse_period",
    "get_country_coordinates",
    "COUNTRY_COORDINATES",
]
