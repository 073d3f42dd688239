"""Exclusion of already stored transactions from an uploaded batch."""

from typing import Iterable, Sequence

from bucketsort.domain.entities import CandidateTransaction, DuplicateCheckResult
from bucketsort.domain.errors import DomainError
from bucketsort.domain.identifier import derive_transaction_id
from bucketsort.domain.partitions import PartitionScanner
from bucketsort.logging_setup import get_logger

logger = get_logger(__name__)


def partition_candidates(
    candidates: Sequence[CandidateTransaction], existing_ids: Iterable[str]
) -> DuplicateCheckResult:
    """Split candidates into new ones and a count of already stored ones.

    A candidate whose identifier cannot be derived is kept as new rather
    than dropped.

    Args:
        candidates: Parsed transactions in upload order
        existing_ids: Identifiers of stored transactions

    Returns:
        DuplicateCheckResult with new transactions in input order
    """
    known = set(existing_ids)
    new_transactions = []

    for candidate in candidates:
        try:
            candidate_id = derive_transaction_id(
                candidate.date, candidate.description, candidate.amount
            )
        except DomainError as e:
            logger.error("Could not derive ID for %r, keeping it as new: %s", candidate, e)
            new_transactions.append(candidate)
            continue

        if candidate_id in known:
            logger.debug(
                "Skipping duplicate transaction: %s %s %s",
                candidate.description,
                candidate.amount,
                candidate.date,
            )
            continue
        new_transactions.append(candidate)

    return DuplicateCheckResult(
        new_transactions=new_transactions,
        existing_count=len(candidates) - len(new_transactions),
        new_count=len(new_transactions),
    )


class DuplicateFilter:
    """Checks uploaded transactions against a user's stored transactions."""

    def __init__(self, scanner: PartitionScanner):
        """Initialize duplicate filter.

        Args:
            scanner: Scanner over the user's transaction partitions
        """
        self.scanner = scanner

    async def partition_new_vs_existing(
        self, candidates: Sequence[CandidateTransaction], user_id: str
    ) -> DuplicateCheckResult:
        """Split candidates into new and already stored transactions.

        Stored transaction documents are keyed by their identifier, so the
        document IDs are compared directly with each candidate's derived ID.

        Args:
            candidates: Parsed transactions in upload order
            user_id: Owner of the stored transactions

        Returns:
            DuplicateCheckResult with exact complementary counts
        """
        candidates = list(candidates)
        scan = await self.scanner.scan(user_id)
        result = partition_candidates(candidates, (txn.id for txn in scan.transactions))

        logger.info(
            "Checked %d transactions: %d already stored, %d new",
            len(candidates),
            result.existing_count,
            result.new_count,
        )
        return result
