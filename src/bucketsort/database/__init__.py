"""Document store layer for bucketsort."""

from bucketsort.database.base import SERVER_TIMESTAMP, Document, DocumentStore
from bucketsort.database.memory import MemoryDocumentStore
from bucketsort.database.factories import create_sqlite_store

__all__ = [
    "SERVER_TIMESTAMP",
    "Document",
    "DocumentStore",
    "MemoryDocumentStore",
    "create_sqlite_store",
]
