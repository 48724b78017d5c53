# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from intranet.api.deps import AdminDep, AuthDep
from intranet.db import SessionDep
from intranet.models.enums import BoardTab
from intranet.schemas.board import (
    CommentListResponse,
    CommentPayload,
    CommentResponse,
    LikeResponse,
    NoticePayload,
    PostListResponse,
    PostPayload,
    PostResponse,
)
from intranet.services import board as board_service

board_router = APIRouter(
    prefix="/posts",
    tags=["board"],
)

comment_router = APIRouter(
    prefix="/comments",
    tags=["board"],
)


@board_router.get("", response_model=PostListResponse)
async def list_posts(
    session: SessionDep,
    auth: AuthDep,
    tab: BoardTab = Query(default=BoardTab.ALL),
    search: str | None = Query(default=None, max_length=100),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=20, ge=1, le=100),
) -> PostListResponse:
    """List posts with notices pinned on top."""
    return await board_service.list_posts(session, auth, tab, search, offset, limit)


@board_router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostPayload,
    session: SessionDep,
    auth: AuthDep,
) -> PostResponse:
    return await board_service.create_post(session, auth, payload)


@board_router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> PostResponse:
    """Read a post and count the view."""
    return await board_service.get_post(session, auth, post_id)


@board_router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: uuid.UUID,
    payload: PostPayload,
    session: SessionDep,
    auth: AuthDep,
) -> PostResponse:
    """Edit a post (author only)."""
    return await board_service.update_post(session, auth, post_id, payload)


@board_router.delete("/{post_id}", status_code=204)
async def delete_post(
    post_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Delete a post (author or admin)."""
    await board_service.delete_post(session, auth, post_id)


@board_router.put("/{post_id}/notice", response_model=PostResponse)
async def set_notice(
    post_id: uuid.UUID,
    payload: NoticePayload,
    session: SessionDep,
    auth: AdminDep,
) -> PostResponse:
    """Pin or unpin a post as a notice (admin only)."""
    return await board_service.set_notice(session, auth, post_id, payload.is_notice)


@board_router.post("/{post_id}/like", response_model=LikeResponse)
async def toggle_like(
    post_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LikeResponse:
    """Like a post, or undo an existing like."""
    return await board_service.toggle_like(session, auth, post_id)


@board_router.get("/{post_id}/comments", response_model=CommentListResponse)
async def list_comments(
    post_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> CommentListResponse:
    return await board_service.list_comments(session, post_id)


@board_router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    post_id: uuid.UUID,
    payload: CommentPayload,
    session: SessionDep,
    auth: AuthDep,
) -> CommentResponse:
    return await board_service.add_comment(session, auth, post_id, payload)


@comment_router.delete("/{comment_id}", status_code=204)
async def delete_comment(
    comment_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    """Delete a comment (author or admin)."""
    await board_service.delete_comment(session, auth, comment_id)
