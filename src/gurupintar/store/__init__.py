"""Application snapshot store: mutations, persistence and migrations."""

from .container import AcademicStateStore
from .migrations import SnapshotMigrationError, migrate_snapshot
from .persistence import (
    ImportFormatError,
    SnapshotRepository,
    StorageError,
    StorageQuotaError,
    export_snapshot,
    import_snapshot,
)
from .seed import default_state, empty_state

__all__ = [
    "AcademicStateStore",
    "SnapshotRepository",
    "StorageError",
    "StorageQuotaError",
    "ImportFormatError",
    "SnapshotMigrationError",
    "migrate_snapshot",
    "export_snapshot",
    "import_snapshot",
    "default_state",
    "empty_state",
]
