"""
Country coordinate lookup for the dashboard map widgets.

Unknown or misspelled countries map to (0, 0) so a new country never breaks
the dashboard.
"""

from typing import Dict, Optional, Tuple

import structlog

from models.dashboard import Coordinates

logger = structlog.get_logger(__name__)

# (latitude, longitude) of each country's geographic center
COUNTRY_COORDINATES: Dict[str, Tuple[float, float]] = {
    "United States": (39.8283, -98.5795),
    "United Kingdom": (55.3781, -3.4360),
    "Germany": (51.1657, 10.4515),
    "Canada": (56.1304, -106.3468),
    "Australia": (-25.2744, 133.7751),
    "India": (20.5937, 78.9629),
    "Japan": (36.2048, 138.2529),
    "France": (46.6034, 1.8883),
    "Italy": (41.8719, 12.5674),
    "Spain": (40.4637, -3.7492),
}

DEFAULT_COORDINATES: Tuple[float, float] = (0.0, 0.0)

_BY_LOWER_NAME = {name.lower(): coords for name, coords in COUNTRY_COORDINATES.items()}


def lookup_coordinates(country: Optional[str]) -> Tuple[float, float]:
    """
    Return (latitude, longitude) for a country display name.

    Exact match first, then a trimmed case-insensitive match.
    Falls back to DEFAULT_COORDINATES.
    """
    if not country:
        return DEFAULT_COORDINATES

    coords = COUNTRY_COORDINATES.get(country)
    if coords is None:
        coords = _BY_LOWER_NAME.get(country.strip().lower())
    if coords is None:
        logger.debug("country_coordinates_missing", country=country)
        return DEFAULT_COORDINATES
    return coords


def get_country_coordinates(country: Optional[str]) -> Coordinates:
    """Coordinates model for a grouped country row."""
    latitude, longitude = lookup_coordinates(country)
    return Coordinates(latitude=latitude, longitude=longitude)
