"""
Snapshot Migrations

Brings any older persisted document up to ``SNAPSHOT_VERSION``.

Version history:
- 1: browser edition documents (no ``version`` key). Later features added
  top-level arrays, so old documents may lack journals, attendance,
  questionnaires, responses, exam packages or forum posts.
- 2: adds the ``version`` key; every top-level key is present.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from gurupintar.core.schemas import SNAPSHOT_VERSION, AppState

logger = logging.getLogger(__name__)

LEGACY_VERSION = 1

# Arrays added after the first release; absent means "feature never used"
EMPTY_WHEN_MISSING = ("journals", "dailyAttendance", "questionnaireResponses", "examPackages")

COLLECTION_KEYS = (
    "classes",
    "students",
    "assessments",
    "grades",
    *EMPTY_WHEN_MISSING,
    "questionnaires",
    "forumPosts",
)


class SnapshotMigrationError(ValueError):
    """Raised when a document cannot be migrated to the current version."""

    pass


def document_version(document: dict[str, Any]) -> int:
    version = document.get("version", LEGACY_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version < LEGACY_VERSION:
        raise SnapshotMigrationError(f"Invalid snapshot version: {version!r}")
    return version


def check_document_shape(document: dict[str, Any]) -> None:
    """Reject documents whose collections or settings have the wrong JSON type."""
    for key in COLLECTION_KEYS:
        if document.get(key) is not None and not isinstance(document[key], list):
            raise SnapshotMigrationError(f"'{key}' must be a list")

    if document.get("settings") is not None and not isinstance(document["settings"], dict):
        raise SnapshotMigrationError("'settings' must be an object")


def _migrate_v1_to_v2(document: dict[str, Any], defaults: dict[str, Any]) -> dict[str, Any]:
    """Fill the keys a browser-edition document may lack."""
    migrated = {**defaults, **document}

    for key in EMPTY_WHEN_MISSING:
        if key not in document:
            migrated[key] = []

    if "questionnaires" not in document:
        migrated["questionnaires"] = defaults["questionnaires"]

    # The forum used to start empty; restore the welcome posts
    if not document.get("forumPosts"):
        migrated["forumPosts"] = defaults["forumPosts"]

    migrated["settings"] = {**defaults["settings"], **(document.get("settings") or {})}
    migrated["version"] = 2
    return migrated


MIGRATIONS: dict[int, Callable[[dict[str, Any], dict[str, Any]], dict[str, Any]]] = {
    1: _migrate_v1_to_v2,
}


def migrate_snapshot(document: dict[str, Any], defaults: AppState) -> dict[str, Any]:
    """
    Migrate a persisted document to the current snapshot version.

    Args:
        document: Raw JSON document (camelCase keys)
        defaults: Skeleton snapshot supplying values for missing keys

    Returns:
        Document in the current shape (not yet validated into ``AppState``)

    Raises:
        SnapshotMigrationError: If the version is unknown or newer than supported,
            or the document has collections or settings of the wrong type
    """
    version = document_version(document)
    check_document_shape(document)

    if version > SNAPSHOT_VERSION:
        raise SnapshotMigrationError(
            f"Snapshot version {version} is newer than supported version {SNAPSHOT_VERSION}"
        )

    default_document = defaults.to_document()
    migrated = dict(document)

    while version < SNAPSHOT_VERSION:
        step = MIGRATIONS.get(version)
        if step is None:
            raise SnapshotMigrationError(f"No migration from snapshot version {version}")
        migrated = step(migrated, default_document)
        logger.info("Migrated snapshot from version %d to %d", version, migrated["version"])
        version = migrated["version"]

    return migrated
