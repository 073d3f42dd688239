"""Year/month partition layout of stored transactions and its scanner.

Transactions are stored at
``users/{user_id}/transactions/{YYYY}/months/{MM}/items/{transaction_id}``.
There is no index across partitions, so reading a user's history means
querying every month of the lookback window.
"""

import asyncio
from datetime import date
from typing import Optional

from bucketsort.config import Settings
from bucketsort.database.base import DocumentStore, document_path, join_path
from bucketsort.database.mappers import document_to_transaction
from bucketsort.domain.entities import PartitionFailure, PartitionScan, Transaction
from bucketsort.domain.errors import StoreError
from bucketsort.domain.identifier import calendar_date
from bucketsort.logging_setup import get_logger

logger = get_logger(__name__)


def transaction_partition_path(user_id: str, year: int, month: int) -> str:
    """Return the collection path holding one month of a user's transactions."""
    return join_path("users", user_id, "transactions", f"{year:04d}", "months", f"{month:02d}", "items")


def transaction_document_path(user_id: str, when: date, transaction_id: str) -> str:
    """Return the document path of a transaction dated ``when``."""
    day = calendar_date(when)
    return document_path(transaction_partition_path(user_id, day.year, day.month), transaction_id)


class PartitionScanner:
    """Reads a user's transactions across the year/month partitions."""

    def __init__(self, store: DocumentStore, settings: Optional[Settings] = None):
        """Initialize partition scanner.

        Args:
            store: Document store instance
            settings: Lookback window and concurrency cap
        """
        self.store = store
        self.settings = settings or Settings()

    def partitions(self, today: Optional[date] = None) -> list[tuple[int, int]]:
        """Return (year, month) pairs of the lookback window, newest first.

        Args:
            today: Reference date, defaults to today

        Returns:
            Every month of the current year and the preceding
            ``lookback_years - 1`` years
        """
        today = today or date.today()
        years = range(today.year, today.year - self.settings.lookback_years, -1)
        return [(year, month) for year in years for month in range(12, 0, -1)]

    async def _read_partition(
        self, semaphore: asyncio.Semaphore, user_id: str, year: int, month: int
    ) -> list[Transaction]:
        path = transaction_partition_path(user_id, year, month)
        async with semaphore:
            documents = await self.store.list_documents(path, order_by="date", descending=True)

        transactions = []
        for document in documents:
            try:
                transactions.append(document_to_transaction(document))
            except ValueError as e:
                logger.warning("Skipping unreadable transaction %s: %s", document.path, e)
        if transactions:
            logger.debug("Found %d transactions in %04d/%02d", len(transactions), year, month)
        return transactions

    async def scan(self, user_id: str, today: Optional[date] = None) -> PartitionScan:
        """Gather all stored transactions of a user.

        Partitions are queried concurrently, at most ``fetch_concurrency`` at a
        time. A partition whose query fails is recorded and treated as empty
        so the rest of the scan still completes.

        Args:
            user_id: Owner of the partitions
            today: Reference date for the lookback window

        Returns:
            PartitionScan with transactions (newest partition first) and the
            partitions that failed
        """
        grid = self.partitions(today)
        semaphore = asyncio.Semaphore(self.settings.fetch_concurrency)
        results = await asyncio.gather(
            *(self._read_partition(semaphore, user_id, year, month) for year, month in grid),
            return_exceptions=True,
        )

        scan = PartitionScan()
        for (year, month), result in zip(grid, results):
            if isinstance(result, StoreError):
                logger.warning("Skipping partition %04d/%02d: %s", year, month, result)
                scan.failed_partitions.append(PartitionFailure(year, month, str(result)))
                continue
            if isinstance(result, BaseException):
                raise result
            scan.transactions.extend(result)

        logger.info(
            "Scanned %d partitions for user %s: %d transactions, %d failed partitions",
            len(grid),
            user_id,
            len(scan.transactions),
            len(scan.failed_partitions),
        )
        return scan
