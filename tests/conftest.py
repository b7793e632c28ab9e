"""
Shared test fixtures.
"""

import sys
from pathlib import Path

# Add project root to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Generator

# Fixed reference instant for every date computation in tests
NOW = datetime(2025, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


# ===================
# MOCK SUPABASE CLIENT
# ===================

def _comparable(value):
    """Parse ISO timestamps so gte() compares instants, not strings."""
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def _null_last(value):
    return (value is None, _comparable(value))


class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Filters, ordering and ranges are applied to the in-memory rows, so
    services see the same rows a real select would return.
    """

    def __init__(self, client: "MockSupabaseClient", table: str, data: list = None):
        self._client = client
        self._table = table
        self._data = data or []
        self._filters = []
        self._orders = []
        self._range = None
        self._limit = None

    def select(self, *args, **kwargs):
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def gte(self, column, value):
        bound = _comparable(value)
        self._filters.append(
            lambda row: row.get(column) is not None and _comparable(row.get(column)) >= bound
        )
        return self

    def in_(self, column, values):
        allowed = set(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._orders.append((column, desc))
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self) -> MockSupabaseResponse:
        self._client.executed.append(self._table)
        self._client.queries.append({
            "table": self._table,
            "order": list(self._orders),
            "range": self._range,
            "limit": self._limit,
        })
        error = self._client._errors.get(self._table)
        if error is not None:
            raise error

        rows = [row for row in self._data if all(f(row) for f in self._filters)]
        # Later keys first so the first order() call is the primary key.
        # Nulls sort last ascending and first descending, as in Postgres.
        for column, desc in reversed(self._orders):
            rows.sort(key=lambda row: _null_last(row.get(column)), reverse=desc)
        if self._range:
            start, end = self._range
            rows = rows[start:end + 1]
        if self._limit is not None:
            rows = rows[:self._limit]
        return MockSupabaseResponse(data=[dict(row) for row in rows])


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, client: "MockSupabaseClient", name: str, data: list = None):
        self._client = client
        self._name = name
        self._data = data or []

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self._client, self._name, list(self._data))


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}
        self._errors = {}
        self.executed = []
        self.queries = []

    def set_table_data(self, table_name: str, data: list):
        """Configure mock data for a table."""
        self._tables[table_name] = data

    def set_table_error(self, table_name: str, error: Exception):
        """Make every query against a table raise `error`."""
        self._errors[table_name] = error

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        return MockSupabaseTable(self, name, self._tables.get(name, []))


# ===================
# FIXTURES
# ===================

@pytest.fixture
def now() -> datetime:
    """Shared reference instant."""
    return NOW


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("customers", [
                {"id": "1", "country": "France", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("orders", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.entity_service.get_supabase_client", return_value=mock_supabase):
            yield mock_supabase


@pytest.fixture
def entity_reader(mock_db):
    """EntityReader backed by the mock client."""
    from services.entity_service import EntityReader
    return EntityReader()


@pytest.fixture
def dashboard_service(entity_reader):
    """DashboardService reading from the mock client."""
    from services.dashboard_service import DashboardService
    return DashboardService(reader=entity_reader)


@pytest.fixture
def admin_identity():
    from models.dashboard import IdentityContext, OperatorRole
    return IdentityContext(operator_id="admin-1", role=OperatorRole.ADMIN)


@pytest.fixture
def operator_identity():
    from models.dashboard import IdentityContext, OperatorRole
    return IdentityContext(operator_id="operator-1", role=OperatorRole.SUB_ADMIN)


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(dashboard_service):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("customers", [...])
            response = test_client_with_mock_db.get("/api/dashboard", headers=...)
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("routes.dashboard.get_dashboard_service", return_value=dashboard_service):
        yield TestClient(app)
