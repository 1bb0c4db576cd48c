"""
Database Engine and Sessions

The snapshot is written synchronously, so a plain (non-async) engine is used.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from gurupintar.config import settings
from gurupintar.core.models import Base

logger = logging.getLogger(__name__)


def build_engine(database_url: str | None = None, *, echo: bool = False) -> Engine:
    """Create an engine for the given URL (defaults to settings.DATABASE_URL)."""
    url = database_url or settings.DATABASE_URL
    connect_args: dict[str, Any] = {}

    if url.startswith("sqlite"):
        # FastAPI may touch the engine from the threadpool
        connect_args["check_same_thread"] = False

    return create_engine(url, echo=echo, connect_args=connect_args, future=True)


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=bind, expire_on_commit=False)


engine = build_engine(echo=settings.DEBUG)
SessionLocal = build_session_factory(engine)


def init_db(bind: Engine | None = None) -> None:
    """Create storage tables if they do not exist."""
    target = bind or engine
    Base.metadata.create_all(target)
    logger.info("Storage tables ready (%s)", target.url.render_as_string(hide_password=True))


def close_db(bind: Engine | None = None) -> None:
    (bind or engine).dispose()

