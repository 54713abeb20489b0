"""
Pytest fixtures for the bookkeeping test suite.

Provides:
- Structured logging setup and log capture
- Books seeded with the units and accounts used across scenarios
"""

import json
import logging
from dataclasses import dataclass
from io import StringIO

import pytest

from bookkeeping.domain import AccountKey, Book, UnitKey
from bookkeeping.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
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
    Capture bookkeeping logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, book):
            book.insert_account("cash")
            logs = captured_logs()
            assert any(r["message"] == "account_inserted" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("bookkeeping")
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
# Book fixtures
# =============================================================================


@dataclass
class Chart:
    """A book with two units and three accounts."""

    book: Book
    thb: UnitKey
    ils: UnitKey
    bank: AccountKey
    wallet: AccountKey
    store: AccountKey


@pytest.fixture
def book() -> Book:
    return Book("test book")


@pytest.fixture
def chart(book) -> Chart:
    return Chart(
        book=book,
        thb=book.insert_unit("THB"),
        ils=book.insert_unit("ILS"),
        bank=book.insert_account("bank"),
        wallet=book.insert_account("wallet"),
        store=book.insert_account("store"),
    )

