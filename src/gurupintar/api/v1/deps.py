"""
Shared API Dependencies
"""

from __future__ import annotations

from typing import Any

from fastapi import Request

from gurupintar.ai import AcademicAIService, get_ai_service
from gurupintar.core.schemas import MutationResponse
from gurupintar.store import AcademicStateStore


def get_store(request: Request) -> AcademicStateStore:
    """The application's state store, created in the lifespan handler."""
    store: AcademicStateStore = request.app.state.store
    return store


def get_ai() -> AcademicAIService:
    return get_ai_service()


def mutation_result(store: AcademicStateStore, data: Any = None) -> MutationResponse[Any]:
    """Wrap a change result with the store's persistence warning, if any."""
    return MutationResponse(data=data, warning=store.last_warning)
