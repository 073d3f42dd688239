"""Bucket summary domain service."""

from decimal import Decimal
from typing import Optional

from bucketsort.domain.category import CategoryService
from bucketsort.domain.entities import BucketSummary, Transaction
from bucketsort.domain.transaction import UNCATEGORIZED, TransactionService

UNCATEGORIZED_NAME = "Uncategorized"
UNKNOWN_NAME = "Unknown"


def summarize(
    category_id: Optional[str], name: str, color: Optional[str], transactions: list[Transaction]
) -> BucketSummary:
    """Aggregate the transactions of one bucket."""
    expenses = sum((t.amount for t in transactions if t.amount < 0), Decimal("0"))
    income = sum((t.amount for t in transactions if t.amount > 0), Decimal("0"))
    return BucketSummary(
        category_id=category_id,
        category_name=name,
        color=color,
        count=len(transactions),
        total=expenses + income,
        expenses=expenses,
        income=income,
    )


class SummaryService:
    """Service for building the per-bucket dashboard."""

    def __init__(self, transaction_service: TransactionService, category_service: CategoryService):
        """Initialize summary service.

        Args:
            transaction_service: Source of stored transactions
            category_service: Source of the user's buckets
        """
        self.transaction_service = transaction_service
        self.category_service = category_service

    async def build_bucket_summary(self, user_id: str) -> list[BucketSummary]:
        """Aggregate stored transactions by bucket.

        Buckets appear in creation order, including empty ones. Transactions
        pointing at a deleted bucket are reported under "Unknown", and
        transactions without a bucket under "Uncategorized", last.
        """
        grouped = await self.transaction_service.get_transactions_grouped_by_category(user_id)
        categories = await self.category_service.get_categories(user_id)

        summaries = [
            summarize(category.id, category.name, category.color, grouped.pop(category.id, []))
            for category in categories
        ]

        uncategorized = grouped.pop(UNCATEGORIZED, [])
        orphaned = [t for transactions in grouped.values() for t in transactions]
        if orphaned:
            summaries.append(summarize(None, UNKNOWN_NAME, None, orphaned))
        if uncategorized:
            summaries.append(summarize(None, UNCATEGORIZED_NAME, None, uncategorized))
        return summaries
