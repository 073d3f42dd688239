"""Abstract document store interface.

Documents live in collections addressed by slash separated paths that
alternate collection and document segments, e.g.
``users/u1/transactions/2024/months/01/items/abc``. The store is reached
through async calls only.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


class _ServerTimestamp:
    """Placeholder replaced by the store's clock when a document is written."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = _ServerTimestamp()


@dataclass(frozen=True)
class Document:
    """Snapshot of a stored document."""

    id: str
    path: str
    data: dict[str, Any] = field(default_factory=dict)


def join_path(*segments: Any) -> str:
    """Join path segments, rejecting empty ones and embedded separators."""
    parts = []
    for segment in segments:
        text = str(segment)
        if not text or "/" in text:
            raise ValueError(f"Invalid path segment: {segment!r}")
        parts.append(text)
    return "/".join(parts)


def document_path(collection_path: str, document_id: Any) -> str:
    """Return the path of a document inside an already joined collection path."""
    return f"{collection_path}/{join_path(document_id)}"


def split_document_path(path: str) -> tuple[str, str]:
    """Split a document path into its collection path and document ID.

    Raises:
        ValueError: If path does not address a document
    """
    parts = path.split("/")
    if len(parts) < 2 or len(parts) % 2 != 0 or not all(parts):
        raise ValueError(f"Not a document path: '{path}'")
    return "/".join(parts[:-1]), parts[-1]


def resolve_server_timestamps(data: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Return a copy of data with SERVER_TIMESTAMP values set to now."""
    return {key: (now if value is SERVER_TIMESTAMP else value) for key, value in data.items()}


def _sort_key(value: Any) -> tuple[int, Any]:
    # Missing values sort first, matching an ascending index scan
    return (0, 0) if value is None else (1, value)


def sort_documents(
    documents: list[Document], order_by: Optional[str], descending: bool = False
) -> list[Document]:
    """Order documents by a data field; unordered input is returned by ID."""
    if order_by is None:
        return sorted(documents, key=lambda d: d.id)
    return sorted(documents, key=lambda d: _sort_key(d.data.get(order_by)), reverse=descending)


class DocumentStore(ABC):
    """Abstract async document store for bucketsort."""

    async def connect(self) -> None:
        """Connect to the store."""

    async def disconnect(self) -> None:
        """Release store resources."""

    def new_document_id(self) -> str:
        """Return a fresh store-generated document ID."""
        return uuid.uuid4().hex[:20]

    @abstractmethod
    async def set_document(self, path: str, data: dict[str, Any]) -> None:
        """Create or overwrite the document at path."""
        pass

    @abstractmethod
    async def get_document(self, path: str) -> Optional[Document]:
        """Get the document at path, or None if it does not exist."""
        pass

    @abstractmethod
    async def update_document(self, path: str, updates: dict[str, Any]) -> None:
        """Merge updates into an existing document.

        Raises:
            NotFoundError: If the document does not exist
        """
        pass

    @abstractmethod
    async def delete_document(self, path: str) -> None:
        """Delete the document at path. Missing documents are ignored."""
        pass

    @abstractmethod
    async def list_documents(
        self, collection_path: str, order_by: Optional[str] = None, descending: bool = False
    ) -> list[Document]:
        """List the documents of a collection.

        Args:
            collection_path: Path of the collection
            order_by: Optional data field to order by
            descending: Reverse the order_by ordering

        Returns:
            Documents in the collection; empty if the collection does not exist
        """
        pass
