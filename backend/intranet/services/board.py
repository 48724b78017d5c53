# ruff: noqa: TC003
"""Discussion board: posts with pinned notices, comments, likes and view counts."""

from __future__ import annotations

import logging
import math
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from intranet.exceptions import AppError
from intranet.models.board import Post, PostComment, PostLike
from intranet.models.employee import Employee
from intranet.models.enums import AuditAction, AuditEntityType, BoardTab
from intranet.schemas.board import (
    CommentListResponse,
    CommentResponse,
    LikeResponse,
    PostListResponse,
    PostResponse,
)
from intranet.services.audit import model_to_audit_dict, write_audit_log
from intranet.services.balance import get_employee_or_404

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from intranet.schemas.auth import AuthContext
    from intranet.schemas.board import CommentPayload, PostPayload

logger = logging.getLogger(__name__)

# A post is "best" once liked by this share of all employees.
BEST_RATIO = 0.7


def best_threshold(employee_count: int) -> int:
    """Likes needed for the best tab; never below one."""
    return max(1, math.floor(employee_count * BEST_RATIO))


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


async def _employee_count(session: AsyncSession) -> int:
    result = await session.execute(select(func.count()).select_from(Employee))
    return result.scalar_one()


async def _author_names(session: AsyncSession, author_ids: set[uuid.UUID]) -> dict[uuid.UUID, str]:
    if not author_ids:
        return {}
    result = await session.execute(
        select(col(Employee.id), col(Employee.display_name)).where(col(Employee.id).in_(author_ids))
    )
    return {row[0]: row[1] for row in result.all()}


async def _comment_counts(session: AsyncSession, post_ids: list[uuid.UUID]) -> dict[uuid.UUID, int]:
    if not post_ids:
        return {}
    result = await session.execute(
        select(col(PostComment.post_id), func.count())
        .where(col(PostComment.post_id).in_(post_ids))
        .group_by(col(PostComment.post_id))
    )
    return {row[0]: row[1] for row in result.all()}


async def _liked_post_ids(session: AsyncSession, employee_id: uuid.UUID, post_ids: list[uuid.UUID]) -> set[uuid.UUID]:
    if not post_ids:
        return set()
    result = await session.execute(
        select(col(PostLike.post_id)).where(
            col(PostLike.employee_id) == employee_id,
            col(PostLike.post_id).in_(post_ids),
        )
    )
    return set(result.scalars().all())


async def _build_post_responses(
    session: AsyncSession,
    auth: AuthContext,
    posts: list[Post],
    threshold: int,
) -> list[PostResponse]:
    """Map posts to responses, resolving authors, comment counts and likes in bulk."""
    post_ids = [p.id for p in posts]
    names = await _author_names(session, {p.author_id for p in posts})
    comments = await _comment_counts(session, post_ids)
    liked = await _liked_post_ids(session, auth.user_id, post_ids)
    return [
        PostResponse(
            id=p.id,
            author_id=p.author_id,
            author_name=names.get(p.author_id, ""),
            title=p.title,
            content=p.content,
            is_notice=p.is_notice,
            is_best=p.likes_count >= threshold,
            likes_count=p.likes_count,
            views_count=p.views_count,
            comment_count=comments.get(p.id, 0),
            liked_by_me=p.id in liked,
            created_at=p.created_at,
            updated_at=p.updated_at,
        )
        for p in posts
    ]


async def _build_post_response(session: AsyncSession, auth: AuthContext, post: Post) -> PostResponse:
    threshold = best_threshold(await _employee_count(session))
    return (await _build_post_responses(session, auth, [post], threshold))[0]


async def _get_post_or_404(session: AsyncSession, post_id: uuid.UUID) -> Post:
    post = await session.get(Post, post_id)
    if post is None:
        raise AppError("Post not found", status_code=404)
    return post


async def _bump_counter(session: AsyncSession, post_id: uuid.UUID, column: str, delta: int) -> None:
    """Increment a post counter in the database without a read-modify-write.

    updated_at is pinned so counters never read as an edit.
    """
    counter = getattr(Post, column)
    await session.execute(
        update(Post)
        .where(col(Post.id) == post_id)
        .values({column: counter + delta, "updated_at": col(Post.updated_at)})
        .execution_options(synchronize_session=False)
    )


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


async def list_posts(
    session: AsyncSession,
    auth: AuthContext,
    tab: BoardTab = BoardTab.ALL,
    search: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> PostListResponse:
    """List posts with notices pinned first, then newest first."""
    threshold = best_threshold(await _employee_count(session))

    filters = []
    if tab == BoardTab.NOTICE:
        filters.append(col(Post.is_notice).is_(True))
    elif tab == BoardTab.BEST:
        filters.append(col(Post.likes_count) >= threshold)
    if search:
        pattern = f"%{search.lower()}%"
        filters.append(
            or_(
                func.lower(col(Post.title)).like(pattern),
                func.lower(col(Post.content)).like(pattern),
            )
        )

    count_result = await session.execute(select(func.count()).select_from(Post).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Post)
        .where(*filters)
        .order_by(col(Post.is_notice).desc(), col(Post.created_at).desc())
        .offset(offset)
        .limit(limit)
    )
    posts = list(result.scalars().all())

    return PostListResponse(
        items=await _build_post_responses(session, auth, posts, threshold),
        total=total,
        best_threshold=threshold,
    )


async def create_post(session: AsyncSession, auth: AuthContext, payload: PostPayload) -> PostResponse:
    """Write a post as the calling employee."""
    await get_employee_or_404(session, auth.user_id)

    post = Post(author_id=auth.user_id, title=payload.title, content=payload.content)
    session.add(post)
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.POST,
        entity_id=post.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(post),
    )

    await session.commit()
    await session.refresh(post)
    logger.info("Post %s created by %s", post.id, auth.user_id)
    return await _build_post_response(session, auth, post)


async def get_post(session: AsyncSession, auth: AuthContext, post_id: uuid.UUID) -> PostResponse:
    """Read a post; every read counts as a view."""
    post = await _get_post_or_404(session, post_id)
    await _bump_counter(session, post.id, "views_count", 1)
    await session.commit()
    await session.refresh(post)
    return await _build_post_response(session, auth, post)


async def update_post(
    session: AsyncSession,
    auth: AuthContext,
    post_id: uuid.UUID,
    payload: PostPayload,
) -> PostResponse:
    """Edit a post. Only its author may edit."""
    post = await _get_post_or_404(session, post_id)
    if post.author_id != auth.user_id:
        raise AppError("Only the author can edit this post", status_code=403)

    before_dict = model_to_audit_dict(post)
    post.title = payload.title
    post.content = payload.content
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.POST,
        entity_id=post.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(post),
    )

    await session.commit()
    await session.refresh(post)
    return await _build_post_response(session, auth, post)


async def set_notice(
    session: AsyncSession,
    auth: AuthContext,
    post_id: uuid.UUID,
    is_notice: bool,
) -> PostResponse:
    """Pin or unpin a post as a notice (admin only, enforced by the router)."""
    post = await _get_post_or_404(session, post_id)
    before_dict = model_to_audit_dict(post)
    post.is_notice = is_notice
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.POST,
        entity_id=post.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(post),
    )

    await session.commit()
    await session.refresh(post)
    logger.info("Post %s %s by %s", post.id, "pinned" if is_notice else "unpinned", auth.user_id)
    return await _build_post_response(session, auth, post)


async def delete_post(session: AsyncSession, auth: AuthContext, post_id: uuid.UUID) -> None:
    """Delete a post with its comments and likes. Author or admin only."""
    post = await _get_post_or_404(session, post_id)
    if post.author_id != auth.user_id and not auth.is_admin:
        raise AppError("Not authorized to delete this post", status_code=403)

    before_dict = model_to_audit_dict(post)
    await session.execute(delete(PostComment).where(col(PostComment.post_id) == post.id))
    await session.execute(delete(PostLike).where(col(PostLike.post_id) == post.id))
    await session.delete(post)

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.POST,
        entity_id=post_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )

    await session.commit()
    logger.info("Post %s deleted by %s", post_id, auth.user_id)


# ---------------------------------------------------------------------------
# Likes
# ---------------------------------------------------------------------------


async def toggle_like(session: AsyncSession, auth: AuthContext, post_id: uuid.UUID) -> LikeResponse:
    """Like the post, or take the like back if the caller already liked it."""
    post = await _get_post_or_404(session, post_id)
    await get_employee_or_404(session, auth.user_id)

    result = await session.execute(
        select(PostLike).where(col(PostLike.post_id) == post.id, col(PostLike.employee_id) == auth.user_id)
    )
    existing = result.scalar_one_or_none()

    if existing is not None:
        await session.delete(existing)
        await _bump_counter(session, post.id, "likes_count", -1)
        liked = False
    else:
        session.add(PostLike(post_id=post.id, employee_id=auth.user_id))
        try:
            await session.flush()
        except IntegrityError:
            await session.rollback()
            raise AppError("Post is already liked", status_code=409) from None
        await _bump_counter(session, post.id, "likes_count", 1)
        liked = True

    await session.commit()
    await session.refresh(post)
    return LikeResponse(post_id=post.id, liked=liked, likes_count=post.likes_count)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def _build_comment_response(comment: PostComment, author_name: str) -> CommentResponse:
    return CommentResponse(
        id=comment.id,
        post_id=comment.post_id,
        author_id=comment.author_id,
        author_name=author_name,
        content=comment.content,
        created_at=comment.created_at,
    )


async def list_comments(session: AsyncSession, post_id: uuid.UUID) -> CommentListResponse:
    """Comments of a post, oldest first."""
    await _get_post_or_404(session, post_id)
    result = await session.execute(
        select(PostComment, col(Employee.display_name))
        .join(Employee, col(Employee.id) == col(PostComment.author_id))
        .where(col(PostComment.post_id) == post_id)
        .order_by(col(PostComment.created_at))
    )
    items = [_build_comment_response(comment, name) for comment, name in result.all()]
    return CommentListResponse(items=items, total=len(items))


async def add_comment(
    session: AsyncSession,
    auth: AuthContext,
    post_id: uuid.UUID,
    payload: CommentPayload,
) -> CommentResponse:
    """Comment on a post as the calling employee."""
    post = await _get_post_or_404(session, post_id)
    author = await get_employee_or_404(session, auth.user_id)

    comment = PostComment(post_id=post.id, author_id=author.id, content=payload.content)
    session.add(comment)
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.COMMENT,
        entity_id=comment.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(comment),
    )

    await session.commit()
    await session.refresh(comment)
    return _build_comment_response(comment, author.display_name)


async def delete_comment(session: AsyncSession, auth: AuthContext, comment_id: uuid.UUID) -> None:
    """Delete a comment. Author or admin only."""
    comment = await session.get(PostComment, comment_id)
    if comment is None:
        raise AppError("Comment not found", status_code=404)
    if comment.author_id != auth.user_id and not auth.is_admin:
        raise AppError("Not authorized to delete this comment", status_code=403)

    before_dict = model_to_audit_dict(comment)
    await session.delete(comment)

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.COMMENT,
        entity_id=comment_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )

    await session.commit()
