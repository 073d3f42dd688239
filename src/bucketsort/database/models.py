"""SQLAlchemy models for the bucketsort document store."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    JSON,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


class StoredDocument(Base):
    """One document of a collection, with its fields as a JSON object."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    collection_path = Column(String, nullable=False, index=True)
    document_id = Column(String, nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("collection_path", "document_id", name="uq_collection_document"),
    )


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
