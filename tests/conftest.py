"""
Pytest configuration for PG Community backend tests.

Sets up test environment and global fixtures.
"""
import os
import pytest
from unittest.mock import MagicMock

# Disable config validation during tests
# This allows tests to run without requiring real environment variables
os.environ["VALIDATE_CONFIG"] = "false"

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-at-least-32-bytes!")
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-supabase-key")
os.environ.setdefault("FRONTEND_URL", "http://localhost:5173")

QUERY_METHODS = (
    "select", "eq", "neq", "in_", "order", "insert", "update", "upsert", "delete",
)


def make_query(data=None, count=None):
    """
    Mock a Supabase query builder.

    Every builder method returns the same mock, and execute() returns a
    response carrying `data` and `count`.
    """
    query = MagicMock()
    for method in QUERY_METHODS:
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=data if data is not None else [], count=count)
    return query


class TableRouter:
    """
    Route client.table(name) calls to queued query mocks.

    Each table name maps to a list of queries consumed in call order; the
    last one is reused once the list runs out.
    """

    def __init__(self, **tables):
        self.tables = {name: list(queries) for name, queries in tables.items()}
        self.calls = []

    def __call__(self, name):
        self.calls.append(name)
        queue = self.tables.get(name)
        if not queue:
            return make_query()
        return queue.pop(0) if len(queue) > 1 else queue[0]


@pytest.fixture
def supabase_client():
    """
    Mock Supabase client for service tests.
    Returns a MagicMock that simulates Supabase client behavior.
    """
    mock_client = MagicMock()
    return mock_client


@pytest.fixture
def route_tables(supabase_client):
    """Install a TableRouter on the mock client and return a setter."""
    def install(**tables):
        router = TableRouter(**tables)
        supabase_client.table.side_effect = router
        return router
    return install


@pytest.fixture
def query():
    """Expose make_query to tests."""
    return make_query
