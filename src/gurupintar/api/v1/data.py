"""
Data API Endpoints

Backup export / import, school settings and the demo login.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from gurupintar.api.v1.deps import get_store, mutation_result
from gurupintar.config import settings
from gurupintar.core.auth import LoginResult, authenticate
from gurupintar.core.schemas import AppState, MutationResponse, SchoolSettings
from gurupintar.core.schemas.requests import LoginRequest, SettingsUpdate
from gurupintar.store import AcademicStateStore, export_snapshot, import_snapshot
from gurupintar.store import mutations as m

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================================
# Backup
# ============================================================================


@router.get("/data/export", response_class=Response)
async def export_data(store: AcademicStateStore = Depends(get_store)) -> Response:
    """Download the full snapshot as ``backup_gurupintar_YYYY-MM-DD.json``."""
    filename, content = export_snapshot(store.state)
    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/data/import", response_model=MutationResponse[AppState])
async def import_data(
    request: Request, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Replace all data with an uploaded backup.

    The body is the raw backup JSON. A backup without ``classes``,
    ``students`` and ``settings`` is rejected with 400 and nothing changes.
    """
    state = import_snapshot(await request.body())
    store.replace(state)
    logger.info(
        f"Imported backup: {len(state.classes)} classes, {len(state.students)} students"
    )
    return mutation_result(store, state)


# ============================================================================
# Settings
# ============================================================================


@router.get("/settings", response_model=SchoolSettings)
async def get_settings(store: AcademicStateStore = Depends(get_store)) -> SchoolSettings:
    return store.state.settings


@router.put("/settings", response_model=MutationResponse[SchoolSettings])
async def update_settings(
    settings_update: SettingsUpdate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    state = store.dispatch(m.update_settings, **settings_update.model_dump(exclude_unset=True))
    return mutation_result(store, state.settings)


# ============================================================================
# Login
# ============================================================================


@router.post("/auth/login", response_model=LoginResult)
async def login(
    credentials: LoginRequest, store: AcademicStateStore = Depends(get_store)
) -> LoginResult:
    result = authenticate(credentials.identifier, credentials.password, store.state, settings)
    if result is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email/NIS or password",
        )
    return result
