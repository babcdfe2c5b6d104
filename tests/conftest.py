"""
Pytest fixtures for the stock kernel test suite.

Provides:
- Structured logging capture
- Record stores: in-process and SQLite (in-memory), parametrized so that
  ledger and service tests run against both
- A deterministic clock and a fully wired InventoryApp

Environment Variables:
- DATABASE_URL: when set to a PostgreSQL URL, the ``pg_store`` fixture
  runs the store parity tests against it as well.
"""

import json
import logging
import os
from datetime import datetime, timezone
from io import StringIO
from types import SimpleNamespace

import pytest

from stock_kernel.app import create_app
from stock_kernel.db.engine import create_tables, drop_tables, init_engine_from_url, reset_engine
from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from stock_kernel.services.auth_gateway import hash_password
from stock_kernel.store.memory_store import MemoryRecordStore
from stock_kernel.store.sql_store import SqlRecordStore

TEST_OPERATOR_EMAIL = "operator@example.com"
TEST_OPERATOR_PASSWORD = "correct horse"

# One low-cost hash for the whole suite
TEST_OPERATOR_HASH = hash_password(TEST_OPERATOR_PASSWORD, method="pbkdf2:sha256:1000")


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "postgres: mark test as requiring PostgreSQL"
    )
    config.addinivalue_line(
        "markers", "slow_locks: mark test as potentially waiting for locks"
    )


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture stock_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, app):
            app.checkout.checkout("HSA0001")
            logs = captured_logs()
            assert any(r["message"] == "checkout_completed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("stock_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store():
    return MemoryRecordStore()


@pytest.fixture
def sqlite_store():
    """Fresh in-memory SQLite database per test."""
    init_engine_from_url("sqlite://")
    create_tables()
    yield SqlRecordStore()
    reset_engine()


@pytest.fixture
def pg_store():
    url = os.environ.get("DATABASE_URL", "")
    if not url.startswith("postgresql"):
        pytest.skip("DATABASE_URL does not point at PostgreSQL")
    init_engine_from_url(url)
    drop_tables()
    create_tables()
    yield SqlRecordStore()
    drop_tables()
    reset_engine()


@pytest.fixture(params=["memory", "sqlite"])
def store(request):
    """Every store-backed test runs once per store implementation."""
    return request.getfixturevalue(f"{request.param}_store")


# =============================================================================
# Kernel wiring
# =============================================================================


@pytest.fixture
def operator():
    """Credentials of the single operator every InventoryApp fixture knows."""
    return SimpleNamespace(
        email=TEST_OPERATOR_EMAIL,
        password=TEST_OPERATOR_PASSWORD,
        password_hash=TEST_OPERATOR_HASH,
    )


@pytest.fixture
def deterministic_clock():
    return DeterministicClock(datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def confirm_answers():
    """
    Scripted checkout confirmations.

    Append booleans to steer the next confirm() calls; when the list is
    empty every checkout is confirmed.  Units asked about are recorded in
    ``confirm_answers.asked``.
    """

    class _Answers(list):
        asked: list

        def __call__(self, unit):
            self.asked.append(unit)
            return self.pop(0) if self else True

    answers = _Answers()
    answers.asked = []
    return answers


@pytest.fixture
def app(store, deterministic_clock, confirm_answers):
    app = create_app(
        store,
        confirm=confirm_answers,
        clock=deterministic_clock,
        operators={TEST_OPERATOR_EMAIL: TEST_OPERATOR_HASH},
    )
    app.registry.ensure_seeded([("Handphone", "H"), ("Laptop", "L"), ("Tablet", "T")])
    return app


@pytest.fixture
def receive(app, deterministic_clock):
    """Receive a unit, advancing the clock so created_at is strictly increasing."""

    def _receive(brand_model="Samsung S24", category="Handphone", price="5000000", grade="A"):
        deterministic_clock.advance(60)
        return app.intake.receive(category, brand_model, grade, price, "")

    return _receive
