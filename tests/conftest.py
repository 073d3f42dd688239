"""Shared pytest fixtures for bucketsort tests."""

import asyncio
import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from bucketsort.config import Settings
from bucketsort.database.factories import create_sqlite_store
from bucketsort.database.memory import MemoryDocumentStore
from bucketsort.domain.category import CategoryService
from bucketsort.domain.entities import CandidateTransaction
from bucketsort.domain.summary import SummaryService
from bucketsort.domain.transaction import TransactionService

USER_ID = "user-1"
THIS_YEAR = date.today().year


def run(awaitable):
    """Run a coroutine from a synchronous test."""
    return asyncio.run(awaitable)


def candidate(txn_date, description, amount, raw_description=None, original_data=None):
    """Build a candidate transaction from plain values."""
    return CandidateTransaction(
        date=txn_date,
        description=description,
        amount=Decimal(amount),
        raw_description=raw_description,
        original_data=original_data or {},
    )


@pytest.fixture
def user_id():
    """Return the user the tests work on."""
    return USER_ID


@pytest.fixture
def settings():
    """Settings whose lookback window reaches back to 2024."""
    return Settings(lookback_years=max(5, THIS_YEAR - 2024 + 1), fetch_concurrency=3)


@pytest.fixture
def memory_store():
    """Create an in-memory document store."""
    return MemoryDocumentStore()


@pytest.fixture
def temp_store():
    """Create a temporary SQLite document store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path

    yield store

    # Cleanup
    run(store.disconnect())
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def transaction_service(memory_store, settings):
    """Create a TransactionService over the memory store."""
    return TransactionService(memory_store, settings)


@pytest.fixture
def category_service(memory_store):
    """Create a CategoryService over the memory store."""
    return CategoryService(memory_store)


@pytest.fixture
def summary_service(transaction_service, category_service):
    """Create a SummaryService over the memory store."""
    return SummaryService(transaction_service, category_service)


@pytest.fixture
def sample_categories(category_service, user_id):
    """Seed the default buckets and return them by name."""
    categories = run(category_service.ensure_default_categories(user_id))
    return {category.name: category for category in categories}


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def write_statement(tmp_path):
    """Write statement text to a file in tmp_path and return its path."""

    def _write(text: str, name: str = "statement.csv") -> str:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def sample_csv(write_statement):
    """Bank of America style statement with three rows."""
    return write_statement(
        "Date,Description,Amount\n"
        "2024-01-01,Rent,-1200.00\n"
        "2024-01-02,Paycheck,2500.00\n"
        "2024-01-05,Coffee,-4.50\n"
    )
