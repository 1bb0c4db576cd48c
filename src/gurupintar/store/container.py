"""
Academic State Store

Holds the current application snapshot and funnels every change through
``dispatch``: apply a pure mutation, swap the snapshot, persist it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session, sessionmaker

from gurupintar.config import Settings
from gurupintar.core.schemas import AppState

from .migrations import SnapshotMigrationError, migrate_snapshot
from .persistence import SnapshotRepository, StorageError
from .seed import default_state, empty_state

logger = logging.getLogger(__name__)

Mutation = Callable[..., AppState]


class AcademicStateStore:
    """Single-writer container for the application snapshot.

    The in-memory snapshot is authoritative: when persisting fails the new
    snapshot is kept and the failure is reported through ``last_warning``.
    """

    def __init__(self, repository: SnapshotRepository, *, seed_demo_data: bool = True):
        self.repository = repository
        self.seed_demo_data = seed_demo_data
        self.last_warning: str | None = None
        self._state = self._skeleton()

    @classmethod
    def from_settings(
        cls, settings: Settings, session_factory: sessionmaker[Session]
    ) -> AcademicStateStore:
        repository = SnapshotRepository(
            session_factory,
            key=settings.STORAGE_KEY,
            quota_bytes=settings.STORAGE_QUOTA_BYTES,
        )
        return cls(repository, seed_demo_data=settings.SEED_DEMO_DATA)

    @property
    def state(self) -> AppState:
        return self._state

    def _skeleton(self) -> AppState:
        return default_state() if self.seed_demo_data else empty_state()

    def load(self) -> AppState:
        """Load the persisted snapshot, migrating older documents.

        Falls back to the seed snapshot when nothing is stored or the stored
        document cannot be used.
        """
        skeleton = self._skeleton()
        document = self.repository.load()

        if document is None:
            logger.info("No saved snapshot found, starting from seed data")
            self._state = skeleton
            return self._state

        try:
            self._state = AppState.from_document(migrate_snapshot(document, skeleton))
        except (SnapshotMigrationError, PydanticValidationError) as e:
            logger.error(f"Saved snapshot is unusable, starting from seed data: {e}")
            self._state = skeleton

        return self._state

    def dispatch(self, mutation: Mutation, *args: Any, **kwargs: Any) -> AppState:
        """Apply a mutation to the current snapshot and persist the result.

        Raises:
            ValidationError: From the mutation; the snapshot is left unchanged
        """
        new_state = mutation(self._state, *args, **kwargs)
        self._commit(new_state)
        return new_state

    def replace(self, state: AppState) -> AppState:
        """Swap in a full snapshot (backup import) and persist it."""
        self._commit(state)
        return state

    def _commit(self, state: AppState) -> None:
        self._state = state
        self.last_warning = None

        try:
            self.repository.save(state)
        except StorageError as e:
            logger.warning(f"Snapshot kept in memory only: {e}")
            self.last_warning = str(e)
