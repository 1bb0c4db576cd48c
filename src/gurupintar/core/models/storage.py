"""
Key-Value Storage Model

One row per storage key. The application keeps its whole snapshot as a single
JSON document under ``settings.STORAGE_KEY``.
"""

from __future__ import annotations

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class StorageEntry(Base, TimestampMixin):
    """A stored document."""

    __tablename__ = "storage_entries"

    key: Mapped[str] = mapped_column(String(100), primary_key=True, comment="Storage key")
    value: Mapped[str] = mapped_column(Text, nullable=False, comment="Serialized JSON document")
    size_bytes: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, comment="UTF-8 size of value"
    )

    def __repr__(self) -> str:
        return f"StorageEntry(key={self.key!r}, size_bytes={self.size_bytes})"
