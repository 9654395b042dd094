"""
SQLAlchemy ORM models for persistent storage.

The store is a plain key/value table: each key holds one JSON document
(the whole collection, the whole deck list, the settings object).
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Integer, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StoredObjectDB(Base):
    """
    One persisted JSON document.

    Readers fetch the full value and writers replace it; there is no
    partial update.
    """

    __tablename__ = "stored_objects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        return f"<StoredObjectDB(key={self.key})>"
