"""
API Response Schemas
"""

from __future__ import annotations

from typing import Generic, TypeVar

from .base import RecordModel

T = TypeVar("T")


class MutationResponse(RecordModel, Generic[T]):
    """Result of a state change.

    ``warning`` is set when the change is applied in memory but could not be
    saved to storage.
    """

    data: T | None = None
    warning: str | None = None


class FeedbackResponse(RecordModel):
    text: str
