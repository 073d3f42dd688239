"""Tests for the transaction service."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from bucketsort.database.memory import MemoryDocumentStore
from bucketsort.domain.entities import CandidateTransaction, Transaction
from bucketsort.domain.errors import (
    InvalidDateError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from bucketsort.domain.identifier import derive_transaction_id
from bucketsort.domain.transaction import UNCATEGORIZED, TransactionService

from conftest import candidate, run


class DroppingStore(MemoryDocumentStore):
    """Memory store that acknowledges writes without keeping them."""

    async def set_document(self, path, data):
        return None


def test_create_transaction(transaction_service, user_id, sample_categories):
    """A created transaction is stored under its derived ID."""
    personal = sample_categories["Personal"]
    txn = candidate(
        date(2024, 1, 5), "Coffee", "-4.50", raw_description="COFFEE #1", original_data={"a": "b"}
    )

    txn_id = run(transaction_service.create_transaction(user_id, txn, category_id=personal.id))

    assert txn_id == derive_transaction_id(date(2024, 1, 5), "Coffee", Decimal("-4.50"))
    stored = run(transaction_service.get_transaction(user_id, txn_id, date(2024, 1, 5)))
    assert isinstance(stored, Transaction)
    assert stored.description == "Coffee"
    assert stored.amount == Decimal("-4.50")
    assert stored.category_id == personal.id
    assert stored.raw_description == "COFFEE #1"
    assert stored.original_data == {"a": "b"}
    assert isinstance(stored.created_at, datetime)


def test_create_is_idempotent(transaction_service, user_id):
    """Saving the same transaction twice leaves one document."""
    txn = candidate(date(2024, 1, 5), "Coffee", "-4.50")

    first = run(transaction_service.create_transaction(user_id, txn, category_id="a"))
    second = run(transaction_service.create_transaction(user_id, txn, category_id="b"))

    assert first == second
    stored = run(transaction_service.list_transactions(user_id))
    assert len(stored) == 1
    assert stored[0].category_id == "b"


@pytest.mark.parametrize(
    "bad, message",
    [
        (CandidateTransaction(date=None, description="Coffee", amount=Decimal("1")), "date"),
        (CandidateTransaction(date=date(2024, 1, 5), description="", amount=Decimal("1")), "description"),
        (CandidateTransaction(date=date(2024, 1, 5), description="Coffee", amount="1"), "amount"),
        (
            CandidateTransaction(date=date(2024, 1, 5), description="Coffee", amount=Decimal("NaN")),
            "amount",
        ),
    ],
)
def test_create_rejects_invalid_fields(transaction_service, user_id, bad, message):
    """Transactions without valid required fields are not stored."""
    with pytest.raises(ValidationError, match=message):
        run(transaction_service.create_transaction(user_id, bad))


def test_create_verifies_write(settings, user_id):
    """A write that cannot be read back raises StoreError."""
    service = TransactionService(DroppingStore(), settings)

    with pytest.raises(StoreError, match="verification failed"):
        run(service.create_transaction(user_id, candidate(date(2024, 1, 5), "Coffee", "-4.50")))


def test_get_missing_transaction(transaction_service, user_id):
    """Unknown IDs return None."""
    assert run(transaction_service.get_transaction(user_id, "nope", date(2024, 1, 5))) is None


def test_get_transaction_with_invalid_date(transaction_service, user_id):
    """The partition cannot be chosen without a date."""
    with pytest.raises(InvalidDateError):
        run(transaction_service.get_transaction(user_id, "abc", "2024-01-05"))


def test_update_transaction(transaction_service, user_id):
    """Category and description can be changed."""
    txn = candidate(date(2024, 1, 5), "Coffee", "-4.50")
    txn_id = run(transaction_service.create_transaction(user_id, txn))
    stored = run(transaction_service.get_transaction(user_id, txn_id, txn.date))

    run(transaction_service.update_transaction(
        user_id, stored, category_id="cat-1", description="Morning coffee"
    ))

    updated = run(transaction_service.get_transaction(user_id, txn_id, txn.date))
    assert updated.category_id == "cat-1"
    assert updated.description == "Morning coffee"
    assert updated.amount == Decimal("-4.50")


def test_update_rejects_unknown_fields(transaction_service, user_id):
    """Only category and descriptions may change."""
    txn_id = run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 5), "Coffee", "-4.50")
    ))
    stored = run(transaction_service.get_transaction(user_id, txn_id, date(2024, 1, 5)))

    with pytest.raises(ValidationError, match="amount"):
        run(transaction_service.update_transaction(user_id, stored, amount=Decimal("1")))


def test_update_missing_transaction(transaction_service, user_id):
    """Updating a deleted transaction raises NotFoundError."""
    txn_id = run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 5), "Coffee", "-4.50")
    ))
    stored = run(transaction_service.get_transaction(user_id, txn_id, date(2024, 1, 5)))
    run(transaction_service.delete_transaction(user_id, stored))

    with pytest.raises(NotFoundError, match=f"Transaction {txn_id} not found"):
        run(transaction_service.update_transaction(user_id, stored, category_id="x"))


def test_delete_transaction(transaction_service, user_id):
    """Deleted transactions are no longer listed."""
    txn_id = run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 5), "Coffee", "-4.50")
    ))
    stored = run(transaction_service.get_transaction(user_id, txn_id, date(2024, 1, 5)))

    run(transaction_service.delete_transaction(user_id, stored))

    assert run(transaction_service.list_transactions(user_id)) == []


def test_recent_transactions_newest_first(transaction_service, user_id):
    """Recent transactions are sorted by date descending and limited."""
    for day in (3, 1, 7, 5):
        run(transaction_service.create_transaction(
            user_id, candidate(date(2024, 2, day), f"Day {day}", "-1")
        ))

    recent = run(transaction_service.get_recent_transactions(user_id, limit=3))

    assert [t.date.day for t in recent] == [7, 5, 3]


def test_transactions_by_category(transaction_service, user_id):
    """Only the requested bucket's transactions are returned."""
    run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 1), "Rent", "-1200"), category_id="home"
    ))
    run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 5), "Coffee", "-4.50"), category_id="fun"
    ))

    home = run(transaction_service.get_transactions_by_category(user_id, "home"))

    assert [t.description for t in home] == ["Rent"]


def test_grouped_by_category(transaction_service, user_id):
    """Transactions without a bucket are grouped as uncategorized."""
    run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 1), "Rent", "-1200"), category_id="home"
    ))
    run(transaction_service.create_transaction(
        user_id, candidate(date(2024, 1, 2), "Paycheck", "2500")
    ))

    grouped = run(transaction_service.get_transactions_grouped_by_category(user_id))

    assert set(grouped) == {"home", UNCATEGORIZED}
    assert grouped[UNCATEGORIZED][0].description == "Paycheck"


def test_move_transactions(transaction_service, user_id):
    """Every transaction of one bucket moves to another."""
    for day in (1, 2):
        run(transaction_service.create_transaction(
            user_id, candidate(date(2024, 1, day), f"Item {day}", "-1"), category_id="old"
        ))

    moved = run(transaction_service.move_transactions(user_id, "old", "new"))

    assert moved == 2
    assert run(transaction_service.get_transactions_by_category(user_id, "old")) == []
    assert len(run(transaction_service.get_transactions_by_category(user_id, "new"))) == 2


def test_service_on_sqlite_store(temp_store, settings, user_id):
    """The service works the same on the SQLite store."""
    service = TransactionService(temp_store, settings)
    txn = candidate(date(2024, 1, 5), "Coffee", "-4.50")

    txn_id = run(service.create_transaction(user_id, txn, category_id="fun"))

    stored = run(service.get_transaction(user_id, txn_id, txn.date))
    assert stored.date == date(2024, 1, 5)
    assert stored.amount == Decimal("-4.50")
    result = run(service.get_uncategorized_transactions(user_id, [txn]))
    assert result.existing_count == 1
