"""Factory functions for creating document store instances."""

import os
from pathlib import Path
from typing import Optional

from bucketsort.database.sqlalchemy_store import SQLAlchemyDocumentStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyDocumentStore:
    """Create a SQLite-backed document store.

    Args:
        database_path: Path to SQLite database file. If None, checks
            BUCKETSORT_DB_PATH environment variable, then defaults to
            ~/.bucketsort/bucketsort.db

    Returns:
        SQLAlchemyDocumentStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("BUCKETSORT_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".bucketsort"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "bucketsort.db")

    return SQLAlchemyDocumentStore(f"sqlite:///{database_path}")
