"""
Forum Schemas
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from .base import RecordModel, new_id

ForumRole = Literal["TEACHER", "STUDENT"]


class ForumComment(RecordModel):
    id: str = Field(default_factory=new_id)
    author: str
    role: ForumRole
    content: str
    date: str


class ForumPost(RecordModel):
    id: str = Field(default_factory=new_id)
    author: str
    role: ForumRole
    content: str
    date: str
    likes: int = 0
    comments: list[ForumComment] = Field(default_factory=list)
