# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from intranet.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class Post(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Discussion board post. Notices are pinned above regular posts."""

    __tablename__ = "post"
    __table_args__ = (sa.Index("ix_post_notice_created", "is_notice", "created_at"),)

    author_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    title: str = Field(max_length=200)
    content: str = Field(sa_type=sa.Text)
    is_notice: bool = Field(default=False, sa_column_kwargs={"server_default": sa.text("false")})
    likes_count: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    views_count: int = Field(default=0, sa_column_kwargs={"server_default": "0"})


class PostComment(UUIDBase, TimestampMixin, table=True):
    """Comment on a board post."""

    __tablename__ = "post_comment"

    post_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    author_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
    )
    content: str = Field(max_length=2000)


class PostLike(UUIDBase, TimestampMixin, table=True):
    """One employee's like on a post; at most one per pair."""

    __tablename__ = "post_like"
    __table_args__ = (sa.UniqueConstraint("post_id", "employee_id", name="uq_post_like_post_employee"),)

    post_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
    )
