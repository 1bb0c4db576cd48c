"""
Schema Base Classes

All persisted records serialize to camelCase JSON so that snapshots stay
compatible with backups exported by the browser edition.
"""

from __future__ import annotations

from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def new_id() -> str:
    """Generate an opaque record id."""
    return uuid4().hex


class RecordModel(BaseModel):
    """Immutable record stored inside the application snapshot.

    Records are never modified in place; use ``model_copy(update=...)`` to
    derive a changed copy.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        use_enum_values=False,
    )


class RequestModel(BaseModel):
    """Base for API request bodies (accepts camelCase or snake_case keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
