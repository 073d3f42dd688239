"""In-memory document store."""

import copy
from datetime import datetime, UTC
from typing import Any, Optional

from bucketsort.database.base import (
    Document,
    DocumentStore,
    resolve_server_timestamps,
    sort_documents,
    split_document_path,
)
from bucketsort.domain.errors import NotFoundError, document_not_found


class MemoryDocumentStore(DocumentStore):
    """Dict-backed store used for tests and dry runs."""

    def __init__(self):
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    async def set_document(self, path: str, data: dict[str, Any]) -> None:
        """Create or overwrite the document at path."""
        collection_path, document_id = split_document_path(path)
        resolved = resolve_server_timestamps(data, self._now())
        self._collections.setdefault(collection_path, {})[document_id] = copy.deepcopy(resolved)

    async def get_document(self, path: str) -> Optional[Document]:
        """Get the document at path."""
        collection_path, document_id = split_document_path(path)
        data = self._collections.get(collection_path, {}).get(document_id)
        if data is None:
            return None
        return Document(id=document_id, path=path, data=copy.deepcopy(data))

    async def update_document(self, path: str, updates: dict[str, Any]) -> None:
        """Merge updates into an existing document."""
        collection_path, document_id = split_document_path(path)
        data = self._collections.get(collection_path, {}).get(document_id)
        if data is None:
            raise NotFoundError(document_not_found(path))
        data.update(copy.deepcopy(resolve_server_timestamps(updates, self._now())))

    async def delete_document(self, path: str) -> None:
        """Delete the document at path."""
        collection_path, document_id = split_document_path(path)
        self._collections.get(collection_path, {}).pop(document_id, None)

    async def list_documents(
        self, collection_path: str, order_by: Optional[str] = None, descending: bool = False
    ) -> list[Document]:
        """List the documents of a collection."""
        items = self._collections.get(collection_path, {})
        documents = [
            Document(id=doc_id, path=f"{collection_path}/{doc_id}", data=copy.deepcopy(data))
            for doc_id, data in items.items()
        ]
        return sort_documents(documents, order_by, descending)
