# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - FakeSupabaseClient: in-memory stand-in for the supabase query builder
#   (table().select().eq().limit().execute(), insert, update)
# - Sample record payloads and ready-made stores
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import copy
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import uuid4

import pytest
from postgrest.exceptions import APIError

from core.services import PaymentStore, UserSupplementStore


# =============================================================================
# Fake Supabase backend
# =============================================================================

class FakeResponse:
    """Mimics postgrest's APIResponse (data + count)."""

    def __init__(self, data: list[dict[str, Any]], count: int | None = None):
        self.data = data
        self.count = count


class FakeQuery:
    """One chained query against a FakeSupabaseClient table."""

    def __init__(self, backend: "FakeSupabaseClient", table: str):
        self._backend = backend
        self._table = table
        self._action = "select"
        self._payload: dict[str, Any] | None = None
        self._filters: list[tuple[str, str, Any]] = []
        self._limit: int | None = None

    def select(self, *columns, count=None):
        self._action = "select"
        return self

    def insert(self, row):
        self._action = "insert"
        self._payload = row
        return self

    def update(self, row):
        self._action = "update"
        self._payload = row
        return self

    def eq(self, column, value):
        self._filters.append((column, "eq", value))
        return self

    def is_(self, column, value):
        self._filters.append((column, "is", value))
        return self

    def limit(self, size):
        self._limit = size
        return self

    def execute(self) -> FakeResponse:
        self._backend.executed.append((self._table, self._action))
        if self._backend.outage is not None:
            raise self._backend.outage

        rows = self._backend.tables[self._table]

        if self._action == "insert":
            row = copy.deepcopy(self._payload)
            if row["id"] in rows:
                raise APIError({
                    "message": f'duplicate key value violates unique constraint "{self._table}_pkey"',
                    "code": "23505",
                    "hint": None,
                    "details": f"Key (id)=({row['id']}) already exists.",
                })
            rows[row["id"]] = row
            return FakeResponse([copy.deepcopy(row)])

        matches = [row for row in rows.values() if self._matches(row)]

        if self._action == "update":
            for row in matches:
                row.update(copy.deepcopy(self._payload))
            return FakeResponse([copy.deepcopy(row) for row in matches])

        if self._limit is not None:
            matches = matches[: self._limit]
        return FakeResponse([copy.deepcopy(row) for row in matches], count=len(matches))

    def _matches(self, row: dict[str, Any]) -> bool:
        for column, operator, value in self._filters:
            stored = row.get(column)
            if operator == "is":
                if value == "null" and stored is not None:
                    return False
            elif not _same_value(stored, value):
                return False
        return True


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _same_value(stored: Any, value: str) -> bool:
    """Compare like Postgres would for numeric and timestamptz columns."""
    text = _as_text(stored)
    if text is None:
        return False
    if text == value:
        return True
    try:
        return Decimal(text) == Decimal(value)
    except InvalidOperation:
        pass
    try:
        return _parse_timestamp(text) == _parse_timestamp(value)
    except ValueError:
        return False


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"not a timestamptz: {value}")
    return parsed


class FakeSupabaseClient:
    """
    In-memory backend with the slice of the supabase Client API the stores use.

    Rows are kept as JSON dicts keyed by id, in insertion order.
    Set `outage` to an exception to make every query raise it.
    """

    def __init__(self):
        self.tables: dict[str, dict[str, dict[str, Any]]] = defaultdict(dict)
        self.executed: list[tuple[str, str]] = []
        self.outage: Exception | None = None

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def fake_client():
    """Empty in-memory Supabase backend."""
    return FakeSupabaseClient()


@pytest.fixture
def payment_store(fake_client):
    """Payment store in the default (lenient) validation mode."""
    return PaymentStore(fake_client)


@pytest.fixture
def supplement_store(fake_client):
    """User supplement store in the default (lenient) validation mode."""
    return UserSupplementStore(fake_client)


@pytest.fixture
def make_payment_data():
    """Factory for valid payment payloads with fresh ids."""

    def _make(**overrides) -> dict[str, Any]:
        data = {
            "id": uuid4(),
            "user_id": uuid4(),
            "amount": Decimal("29.99"),
            "currency": "USD",
            "payment_method": "card",
            "status": "completed",
            "stripe_payment_intent_id": "pi_1234567890",
            "stripe_charge_id": "ch_1234567890",
            "subscription_plan": "pro",
            "subscription_duration": 30,
            "completed_at": datetime(2025, 11, 1, 10, 30, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return data

    return _make


@pytest.fixture
def make_supplement_data():
    """Factory for valid user supplement payloads with fresh ids."""

    def _make(**overrides) -> dict[str, Any]:
        data = {
            "id": uuid4(),
            "user_id": uuid4(),
            "supplement_id": uuid4(),
            "quantity": 2,
            "usage": "2 capsules",
            "frequency": "daily",
            "timing": "morning",
            "goals": ["energy", "immunity"],
            "start_date": datetime(2025, 11, 1, tzinfo=timezone.utc),
            "is_active": True,
        }
        data.update(overrides)
        return data

    return _make
