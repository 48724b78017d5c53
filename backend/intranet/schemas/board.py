# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class PostPayload(BaseModel):
    """Request body for writing or editing a post."""

    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1, max_length=20000)


class NoticePayload(BaseModel):
    """Request body for pinning or unpinning a post."""

    is_notice: bool


class CommentPayload(BaseModel):
    """Request body for a comment."""

    content: str = Field(min_length=1, max_length=2000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class PostResponse(BaseModel):
    """A board post with its author, counters and the caller's like state."""

    id: uuid.UUID
    author_id: uuid.UUID
    author_name: str
    title: str
    content: str
    is_notice: bool
    is_best: bool
    likes_count: int
    views_count: int
    comment_count: int
    liked_by_me: bool
    created_at: datetime
    updated_at: datetime


class PostListResponse(BaseModel):
    """Paginated posts, notices first."""

    items: list[PostResponse]
    total: int
    best_threshold: int


class CommentResponse(BaseModel):
    """A single comment."""

    id: uuid.UUID
    post_id: uuid.UUID
    author_id: uuid.UUID
    author_name: str
    content: str
    created_at: datetime


class CommentListResponse(BaseModel):
    """Comments of a post, oldest first."""

    items: list[CommentResponse]
    total: int


class LikeResponse(BaseModel):
    """Like state after a toggle."""

    post_id: uuid.UUID
    liked: bool
    likes_count: int
