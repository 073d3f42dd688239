"""Transaction domain service."""

from collections import defaultdict
from decimal import Decimal
from typing import Any, Optional, Sequence
from datetime import date

from bucketsort.config import Settings
from bucketsort.database.base import SERVER_TIMESTAMP, DocumentStore
from bucketsort.database.mappers import document_to_transaction, transaction_to_document
from bucketsort.domain.dedup import DuplicateFilter
from bucketsort.domain.entities import (
    CandidateTransaction,
    DuplicateCheckResult,
    Transaction as TransactionEntity,
)
from bucketsort.domain.errors import (
    NotFoundError,
    StoreError,
    ValidationError,
    transaction_not_found,
)
from bucketsort.domain.identifier import derive_transaction_id
from bucketsort.domain.partitions import PartitionScanner, transaction_document_path
from bucketsort.logging_setup import get_logger

logger = get_logger(__name__)

UNCATEGORIZED = "uncategorized"

# Fields that may be changed through update_transaction
_UPDATABLE_FIELDS = {
    "category_id": "categoryId",
    "description": "description",
    "raw_description": "rawDescription",
}


class TransactionService:
    """Service for storing and reading a user's transactions."""

    def __init__(self, store: DocumentStore, settings: Optional[Settings] = None):
        """Initialize transaction service.

        Args:
            store: Document store instance
            settings: Lookback window and concurrency cap for partition scans
        """
        self.store = store
        self.settings = settings or Settings()
        self.scanner = PartitionScanner(store, self.settings)
        self.duplicate_filter = DuplicateFilter(self.scanner)

    async def create_transaction(
        self, user_id: str, candidate: CandidateTransaction, category_id: Optional[str] = None
    ) -> str:
        """Store a categorized transaction.

        The document is keyed by the transaction identifier, so storing the
        same transaction twice overwrites one document instead of adding a
        second one.

        Args:
            user_id: Owner of the transaction
            candidate: Parsed transaction
            category_id: Bucket the transaction was sorted into

        Returns:
            Transaction ID

        Raises:
            ValidationError: If date, description or amount is invalid
            InvalidDateError: If no identifier can be derived from the date
            StoreError: If the write cannot be verified
        """
        if not isinstance(candidate.date, date):
            raise ValidationError("Transaction must have a valid date")
        if not isinstance(candidate.description, str) or not candidate.description:
            raise ValidationError("Transaction must have a valid description")
        if not isinstance(candidate.amount, Decimal) or not candidate.amount.is_finite():
            raise ValidationError("Transaction must have a valid amount")

        transaction_id = derive_transaction_id(
            candidate.date, candidate.description, candidate.amount
        )
        path = transaction_document_path(user_id, candidate.date, transaction_id)

        await self.store.set_document(path, transaction_to_document(candidate, category_id))

        # Read back so a silently dropped write surfaces as an error
        if await self.store.get_document(path) is None:
            raise StoreError(f"Transaction save verification failed: '{path}' not found")

        logger.debug("Saved transaction %s at %s", transaction_id, path)
        return transaction_id

    async def get_transaction(
        self, user_id: str, transaction_id: str, when: date
    ) -> Optional[TransactionEntity]:
        """Get a transaction by ID.

        Args:
            user_id: Owner of the transaction
            transaction_id: Transaction ID
            when: Transaction date, which selects the partition

        Returns:
            Transaction entity or None if not found
        """
        document = await self.store.get_document(
            transaction_document_path(user_id, when, transaction_id)
        )
        if document is None:
            return None
        return document_to_transaction(document)

    async def update_transaction(
        self, user_id: str, transaction: TransactionEntity, **updates: Any
    ) -> None:
        """Update fields of a stored transaction.

        Args:
            user_id: Owner of the transaction
            transaction: Stored transaction
            **updates: New values for category_id, description or raw_description

        Raises:
            ValidationError: If an unknown field is given
            NotFoundError: If the transaction doesn't exist
        """
        unknown = set(updates) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Cannot update transaction fields: {', '.join(sorted(unknown))}"
            )

        data = {_UPDATABLE_FIELDS[key]: value for key, value in updates.items()}
        data["updatedAt"] = SERVER_TIMESTAMP
        path = transaction_document_path(user_id, transaction.date, transaction.id)
        try:
            await self.store.update_document(path, data)
        except NotFoundError:
            raise NotFoundError(transaction_not_found(transaction.id))

    async def delete_transaction(self, user_id: str, transaction: TransactionEntity) -> None:
        """Delete a stored transaction."""
        await self.store.delete_document(
            transaction_document_path(user_id, transaction.date, transaction.id)
        )

    async def list_transactions(self, user_id: str) -> list[TransactionEntity]:
        """List all transactions in the lookback window, newest first."""
        scan = await self.scanner.scan(user_id)
        return sorted(scan.transactions, key=lambda t: (t.date, t.id), reverse=True)

    async def get_recent_transactions(
        self, user_id: str, limit: int = 50
    ) -> list[TransactionEntity]:
        """Return the most recent transactions.

        Args:
            user_id: Owner of the transactions
            limit: Maximum number of transactions

        Returns:
            Transactions sorted by date descending
        """
        transactions = await self.list_transactions(user_id)
        return transactions[:limit]

    async def get_transactions_by_category(
        self, user_id: str, category_id: str
    ) -> list[TransactionEntity]:
        """Return the transactions sorted into one bucket, newest first."""
        transactions = await self.list_transactions(user_id)
        return [t for t in transactions if t.category_id == category_id]

    async def get_transactions_grouped_by_category(
        self, user_id: str
    ) -> dict[str, list[TransactionEntity]]:
        """Group transactions by bucket.

        Returns:
            Mapping of category ID to transactions; transactions without a
            bucket are grouped under "uncategorized"
        """
        grouped: dict[str, list[TransactionEntity]] = defaultdict(list)
        for transaction in await self.list_transactions(user_id):
            grouped[transaction.category_id or UNCATEGORIZED].append(transaction)
        return dict(grouped)

    async def get_uncategorized_transactions(
        self, user_id: str, candidates: Sequence[CandidateTransaction]
    ) -> DuplicateCheckResult:
        """Return the uploaded transactions that are not stored yet.

        Args:
            user_id: Owner of the stored transactions
            candidates: Transactions parsed from an upload

        Returns:
            DuplicateCheckResult with new transactions in upload order
        """
        return await self.duplicate_filter.partition_new_vs_existing(candidates, user_id)

    async def move_transactions(
        self, user_id: str, from_category_id: str, to_category_id: Optional[str]
    ) -> int:
        """Move every transaction of one bucket into another.

        Returns:
            Number of transactions moved
        """
        moved = 0
        for transaction in await self.get_transactions_by_category(user_id, from_category_id):
            await self.update_transaction(user_id, transaction, category_id=to_category_id)
            moved += 1
        return moved
