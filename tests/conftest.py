"""
Pytest fixtures for the payroll core test suite.

Provides:
- Structured logging configured once per session, plus ``captured_logs``
- An in-memory SQLite database (tables created once per test)
- Principals for each role and a deterministic clock
- Builders for test data live in ``tests/builders.py``
"""

import json
import logging
from datetime import datetime, timezone
from io import StringIO

import pytest

from payroll_kernel.cache import EntityCache
from payroll_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from payroll_kernel.domain.clock import DeterministicClock
from payroll_kernel.domain.principal import Principal, Role
from payroll_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

TEST_DATABASE_URL = "sqlite+pysqlite:///:memory:"


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
    Capture payroll_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            compute_payroll(...)
            logs = captured_logs()
            assert any(r["message"] == "payroll_computed" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("payroll_kernel")
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
# Database fixtures
# =============================================================================


@pytest.fixture
def session():
    """A session on a fresh in-memory SQLite database with every table."""
    init_engine_from_url(TEST_DATABASE_URL)
    create_tables()
    sess = get_session()
    yield sess
    sess.close()
    drop_tables()
    reset_engine()


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def clock():
    return DeterministicClock(datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc))


@pytest.fixture
def cache(clock):
    return EntityCache(clock=clock)


@pytest.fixture
def admin():
    return Principal(actor_id="U-ADMIN", name="Admin User", role=Role.ADMIN)


@pytest.fixture
def manager():
    return Principal(actor_id="U-MANAGER", name="Manager User", role=Role.MANAGER)


@pytest.fixture
def staff():
    return Principal(actor_id="U-STAFF", name="Staff User", role=Role.STAFF)
