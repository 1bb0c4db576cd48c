"""
Forum API Endpoints

Public discussion board: posts, likes and comments.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, status

from gurupintar.api.v1.deps import get_store, mutation_result
from gurupintar.core.schemas import ForumComment, ForumPost, MutationResponse
from gurupintar.core.schemas.requests import ForumCommentCreate, ForumPostCreate
from gurupintar.store import AcademicStateStore
from gurupintar.store import mutations as m

router = APIRouter()

GUEST_AUTHOR = "Tamu (Guest)"
DEFAULT_TEACHER_AUTHOR = "Ustadzah"


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


def _find_post(store: AcademicStateStore, post_id: str) -> ForumPost | None:
    return next((p for p in store.state.forum_posts if p.id == post_id), None)


@router.get("/posts", response_model=list[ForumPost])
async def list_posts(store: AcademicStateStore = Depends(get_store)) -> list[ForumPost]:
    """List posts, newest first."""
    return store.state.forum_posts


@router.post(
    "/posts", response_model=MutationResponse[ForumPost], status_code=status.HTTP_201_CREATED
)
async def create_post(
    post_data: ForumPostCreate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    post = ForumPost(
        author=post_data.author or GUEST_AUTHOR,
        role=post_data.role,
        content=post_data.content,
        date=_now(),
    )
    store.dispatch(m.add_forum_post, post)
    return mutation_result(store, _find_post(store, post.id))


@router.post("/posts/{post_id}/like", response_model=MutationResponse[ForumPost])
async def like_post(
    post_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    store.dispatch(m.like_forum_post, post_id)
    return mutation_result(store, _find_post(store, post_id))


@router.post(
    "/posts/{post_id}/comments",
    response_model=MutationResponse[ForumPost],
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str, comment_data: ForumCommentCreate, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Reply to a post. Teacher replies default to the configured teacher name."""
    author = comment_data.author
    if not author:
        author = (
            store.state.settings.teacher_name or DEFAULT_TEACHER_AUTHOR
            if comment_data.role == "TEACHER"
            else GUEST_AUTHOR
        )

    comment = ForumComment(
        author=author, role=comment_data.role, content=comment_data.content, date=_now()
    )
    store.dispatch(m.add_forum_comment, post_id, comment)
    return mutation_result(store, _find_post(store, post_id))


@router.delete("/posts/{post_id}/comments/{comment_id}", response_model=MutationResponse[ForumPost])
async def delete_comment(
    post_id: str, comment_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    store.dispatch(m.delete_forum_comment, post_id, comment_id)
    return mutation_result(store, _find_post(store, post_id))


@router.delete("/posts/{post_id}", response_model=MutationResponse[None])
async def delete_post(
    post_id: str, store: AcademicStateStore = Depends(get_store)
) -> MutationResponse[Any]:
    """Delete a post with all of its comments."""
    store.dispatch(m.delete_forum_post, post_id)
    return mutation_result(store)
