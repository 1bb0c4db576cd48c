"""
Snapshot Persistence

Reads and writes the application snapshot as one JSON document in the
key-value table, and handles backup export / restore import.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticSerializationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gurupintar.core.models import StorageEntry
from gurupintar.core.schemas import AppState

from .migrations import SnapshotMigrationError, migrate_snapshot
from .seed import empty_state

logger = logging.getLogger(__name__)

# Keys a backup must contain to be accepted
REQUIRED_IMPORT_KEYS = ("classes", "students", "settings")

EXPORT_FILENAME_TEMPLATE = "backup_gurupintar_{day}.json"


class StorageError(Exception):
    """Snapshot could not be serialized or written."""

    pass


class StorageQuotaError(StorageError):
    """Serialized snapshot exceeds the storage quota."""

    def __init__(self, size_bytes: int, quota_bytes: int):
        self.size_bytes = size_bytes
        self.quota_bytes = quota_bytes
        super().__init__(
            f"Snapshot is {size_bytes} bytes, storage quota is {quota_bytes} bytes"
        )


class ImportFormatError(Exception):
    """Backup file is not valid JSON or not a GuruPintar snapshot."""

    pass


def serialize_snapshot(state: AppState, *, indent: int | None = None) -> str:
    """Serialize a snapshot to its JSON document.

    Raises:
        StorageError: If the snapshot cannot be serialized
    """
    try:
        return json.dumps(state.to_document(), ensure_ascii=False, indent=indent)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise StorageError(f"Snapshot could not be serialized: {e}") from e


class SnapshotRepository:
    """Stores one snapshot document under a fixed key."""

    def __init__(self, session_factory: sessionmaker[Session], *, key: str, quota_bytes: int):
        """Initialize repository.

        Args:
            session_factory: SQLAlchemy session factory bound to the storage database
            key: Storage key of the snapshot document
            quota_bytes: Largest document (UTF-8 bytes) that may be written
        """
        self.session_factory = session_factory
        self.key = key
        self.quota_bytes = quota_bytes

    def load(self) -> dict[str, Any] | None:
        """Read the stored document.

        Returns:
            Parsed JSON document, or None if nothing is stored or it is unreadable
        """
        try:
            with self.session_factory() as session:
                entry = session.execute(
                    select(StorageEntry).where(StorageEntry.key == self.key)
                ).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read snapshot {self.key!r}: {e}")
            return None

        if entry is None:
            return None

        try:
            document = json.loads(entry.value)
        except json.JSONDecodeError as e:
            logger.error(f"Stored snapshot {self.key!r} is not valid JSON: {e}")
            return None

        if not isinstance(document, dict):
            logger.error(f"Stored snapshot {self.key!r} is not a JSON object")
            return None

        return document

    def save(self, state: AppState) -> int:
        """Write the snapshot, replacing the previous document.

        Returns:
            Size of the written document in bytes

        Raises:
            StorageQuotaError: If the document exceeds the quota
            StorageError: If serialization or the database write fails
        """
        payload = serialize_snapshot(state)
        size_bytes = len(payload.encode("utf-8"))

        if size_bytes > self.quota_bytes:
            raise StorageQuotaError(size_bytes, self.quota_bytes)

        try:
            with self.session_factory() as session:
                entry = session.get(StorageEntry, self.key)
                if entry is None:
                    session.add(StorageEntry(key=self.key, value=payload, size_bytes=size_bytes))
                else:
                    entry.value = payload
                    entry.size_bytes = size_bytes
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write snapshot {self.key!r}: {e}") from e

        logger.debug("Saved snapshot %r (%d bytes)", self.key, size_bytes)
        return size_bytes

    def clear(self) -> None:
        """Delete the stored document."""
        try:
            with self.session_factory() as session:
                entry = session.get(StorageEntry, self.key)
                if entry is not None:
                    session.delete(entry)
                    session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to clear snapshot {self.key!r}: {e}") from e


# ============================================================================
# Backup export / import
# ============================================================================


def export_snapshot(state: AppState, today: date | None = None) -> tuple[str, str]:
    """Render a snapshot as a downloadable backup.

    Returns:
        Tuple of (file name, pretty-printed JSON document)
    """
    day = (today or date.today()).isoformat()
    return EXPORT_FILENAME_TEMPLATE.format(day=day), serialize_snapshot(state, indent=2)


def import_snapshot(raw: str | bytes | dict[str, Any]) -> AppState:
    """Parse a backup into a full replacement snapshot.

    Only the presence of ``classes``, ``students`` and ``settings`` is checked
    before the document is migrated; the result replaces the current state
    entirely (no merge).

    Raises:
        ImportFormatError: If the backup is not usable
    """
    if isinstance(raw, dict):
        document = raw
    else:
        try:
            document = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ImportFormatError("Failed to read the JSON file") from e

    if not isinstance(document, dict) or not all(key in document for key in REQUIRED_IMPORT_KEYS):
        raise ImportFormatError(
            "Invalid file format. Make sure the file is a GuruPintar backup "
            f"(required keys: {', '.join(REQUIRED_IMPORT_KEYS)})"
        )

    try:
        migrated = migrate_snapshot(document, empty_state())
        return AppState.from_document(migrated)
    except SnapshotMigrationError as e:
        raise ImportFormatError(str(e)) from e
    except PydanticValidationError as e:
        raise ImportFormatError(
            f"Backup contains invalid records ({e.error_count()} errors)"
        ) from e
