"""
GuruPintar FastAPI Application

Academic administration for a boarding school: classes, grading, attendance,
report cards, questionnaires, exam bank and forum.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from gurupintar import __version__
from gurupintar.ai import AIServiceError, get_ai_client, get_prompt_library
from gurupintar.config import settings
from gurupintar.core.database import SessionLocal, close_db, engine, init_db
from gurupintar.core.validation import RecordNotFoundError, ValidationError
from gurupintar.store import AcademicStateStore, ImportFormatError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events.

    Startup:
    - Load prompt library into memory
    - Create the storage table
    - Load (or seed) the application snapshot

    Shutdown:
    - Close database connections
    """
    logger.info("GuruPintar starting...")

    prompt_lib = get_prompt_library()
    logger.info(f"Loaded {len(prompt_lib)} prompts (v{prompt_lib.metadata['version']})")

    init_db()

    store = AcademicStateStore.from_settings(settings, SessionLocal)
    state = store.load()
    app.state.store = store
    logger.info(
        f"Snapshot ready: {len(state.classes)} classes, {len(state.students)} students, "
        f"{len(state.grades)} grades"
    )

    yield

    logger.info("GuruPintar shutting down...")
    close_db()


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RecordNotFoundError)
    async def not_found_handler(request: Request, exc: RecordNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @app.exception_handler(ImportFormatError)
    async def import_error_handler(request: Request, exc: ImportFormatError) -> JSONResponse:
        logger.warning(f"Rejected backup import: {exc}")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})

    @app.exception_handler(AIServiceError)
    async def ai_error_handler(request: Request, exc: AIServiceError) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


def create_app() -> FastAPI:
    """Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="GuruPintar",
        description="Academic administration and AI teaching assistant",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_local else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    @app.get("/", tags=["Health"])
    async def root() -> dict[str, str]:
        return {
            "service": "GuruPintar",
            "status": "operational",
            "version": __version__,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health", tags=["Health"], response_model=None)
    async def health_check(request: Request) -> JSONResponse:
        """Health check endpoint for load balancers.

        Returns:
            - status: healthy/unhealthy
            - checks: Individual health checks
        """
        checks: dict[str, dict[str, Any]] = {}

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            checks["database"] = {"status": "healthy"}
        except Exception as e:
            checks["database"] = {"status": "unhealthy", "error": str(e)}

        try:
            prompt_lib = get_prompt_library()
            checks["prompt_library"] = {
                "status": "healthy",
                "prompts": len(prompt_lib),
                "version": prompt_lib.metadata["version"],
            }
        except Exception as e:
            checks["prompt_library"] = {"status": "unhealthy", "error": str(e)}

        # Text features fall back to fixed messages without a provider
        providers = get_ai_client().providers
        checks["ai"] = {"status": "healthy" if providers else "degraded", "providers": providers}

        store: AcademicStateStore | None = getattr(request.app.state, "store", None)
        if store is None:
            checks["store"] = {"status": "unhealthy", "error": "not loaded"}
        elif store.last_warning:
            checks["store"] = {"status": "degraded", "warning": store.last_warning}
        else:
            checks["store"] = {"status": "healthy"}

        all_healthy = all(check["status"] != "unhealthy" for check in checks.values())
        status_code = 200 if all_healthy else 503

        return JSONResponse(
            status_code=status_code,
            content={
                "status": "healthy" if all_healthy else "unhealthy",
                "environment": settings.ENVIRONMENT,
                "checks": checks,
            },
        )

    @app.get("/health/ready", tags=["Health"], response_model=None)
    async def readiness_check(request: Request) -> dict[str, str] | JSONResponse:
        """Ready once the snapshot has been loaded."""
        if getattr(request.app.state, "store", None) is None:
            return JSONResponse(status_code=503, content={"status": "not_ready"})
        return {"status": "ready"}

    @app.get("/health/live", tags=["Health"])
    async def liveness_check() -> dict[str, str]:
        return {"status": "alive"}

    from gurupintar.api.v1 import (
        assessments,
        attendance,
        classes,
        data,
        exams,
        forum,
        questionnaires,
        reports,
        students,
    )

    app.include_router(classes.router, prefix="/api/v1/classes", tags=["Classes"])
    app.include_router(students.router, prefix="/api/v1/students", tags=["Students"])
    app.include_router(assessments.router, prefix="/api/v1/assessments", tags=["Assessments"])
    app.include_router(attendance.router, prefix="/api/v1/attendance", tags=["Attendance"])
    app.include_router(attendance.journals_router, prefix="/api/v1/journals", tags=["Journals"])
    app.include_router(
        questionnaires.router, prefix="/api/v1/questionnaires", tags=["Questionnaires"]
    )
    app.include_router(exams.router, prefix="/api/v1/exams", tags=["Exams"])
    app.include_router(forum.router, prefix="/api/v1/forum", tags=["Forum"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["Reports"])
    app.include_router(data.router, prefix="/api/v1", tags=["Data"])

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "gurupintar.main:app",
        host="0.0.0.0",  # nosec B104 - Intentional for containerized deployment
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
