"""SQLAlchemy model for documents kept by the document store."""

from sqlalchemy import JSON, Column, DateTime, Integer, String, UniqueConstraint

from cargomatch.infrastructure.database import Base
from cargomatch.utils import now_utc


class DocumentModel(Base):
    """Schemaless document addressed by collection name and document id."""

    __tablename__ = "document"
    __table_args__ = (
        UniqueConstraint("collection", "document_id", name="uq_document_collection_id"),
    )

    seq = Column(Integer, primary_key=True, autoincrement=True)
    collection = Column(String(80), nullable=False, index=True)
    document_id = Column(String(64), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["DocumentModel"]
