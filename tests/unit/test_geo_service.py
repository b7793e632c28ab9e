"""
Unit tests for country coordinate lookup.
"""

import pytest

from services.geo_service import (
    COUNTRY_COORDINATES,
    DEFAULT_COORDINATES,
    get_country_coordinates,
    lookup_coordinates,
)


class TestLookupCoordinates:

    def test_known_country(self):
        assert lookup_coordinates("France") == (46.6034, 1.8883)

    def test_every_mapped_country_resolves(self):
        for name, coords in COUNTRY_COORDINATES.items():
            assert lookup_coordinates(name) == coords

    def test_case_and_whitespace_insensitive(self):
        assert lookup_coordinates("  spain ") == COUNTRY_COORDINATES["Spain"]
        assert lookup_coordinates("UNITED KINGDOM") == COUNTRY_COORDINATES["United Kingdom"]

    @pytest.mark.parametrize("country", ["Wakanda", "Atlantis", "", None])
    def test_unknown_country_defaults_to_origin(self, country):
        assert lookup_coordinates(country) == DEFAULT_COORDINATES == (0.0, 0.0)


class TestGetCountryCoordinates:

    def test_returns_model(self):
        coords = get_country_coordinates("Japan")
        assert coords.latitude == 36.2048
        assert coords.longitude == 138.2529

    def test_unknown_country_does_not_raise(self):
        coords = get_country_coordinates("Wakanda")
        assert (coords.latitude, coords.longitude) == (0.0, 0.0)
