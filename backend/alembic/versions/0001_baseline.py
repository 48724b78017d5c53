"""baseline: directory, leave, attendance, audit, board and kpi tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps(*, updated: bool = False) -> list[sa.Column]:
    columns = [sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        columns.append(
            sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return columns


def upgrade() -> None:
    op.create_table(
        "employee",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(updated=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("display_name", sa.String(length=100), nullable=False),
        sa.Column("role", sa.String(length=20), server_default="user", nullable=False),
        sa.Column("team", sa.String(length=50), nullable=True),
        sa.Column("joined_at", sa.Date(), nullable=True),
        sa.Column("birthday", sa.Date(), nullable=True),
        sa.Column("leave_adjustment", sa.Float(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )
    op.create_index("ix_employee_team", "employee", ["team"])

    op.create_table(
        "leave_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category", sa.String(length=20), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("working_days", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="PENDING", nullable=False),
        sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.Uuid(), nullable=True),
        sa.Column("review_note", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leave_request_employee_id", "leave_request", ["employee_id"])
    op.create_index("ix_leave_request_status", "leave_request", ["status"])
    op.create_index("ix_leave_employee_status", "leave_request", ["employee_id", "status"])
    op.create_index("ix_leave_dates", "leave_request", ["start_date", "end_date"])

    op.create_table(
        "attendance_record",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("work_date", sa.Date(), nullable=False),
        sa.Column("check_in", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_in_ip", sa.String(length=64), nullable=True),
        sa.Column("check_out", sa.DateTime(timezone=True), nullable=True),
        sa.Column("check_out_ip", sa.String(length=64), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "work_date", name="uq_attendance_employee_date"),
    )
    op.create_index("ix_attendance_record_employee_id", "attendance_record", ["employee_id"])
    op.create_index("ix_attendance_record_work_date", "attendance_record", ["work_date"])

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("actor_id", sa.Uuid(), nullable=False),
        sa.Column("entity_type", sa.String(length=50), nullable=False),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("action", sa.String(length=50), nullable=False),
        sa.Column("before_json", sa.JSON(), nullable=True),
        sa.Column("after_json", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_actor_id", "audit_log", ["actor_id"])
    op.create_index("ix_audit_log_created_at", "audit_log", ["created_at"])
    op.create_index("ix_audit_entity", "audit_log", ["entity_type", "entity_id"])

    op.create_table(
        "post",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(updated=True),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("is_notice", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("likes_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("views_count", sa.Integer(), server_default="0", nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_author_id", "post", ["author_id"])
    op.create_index("ix_post_notice_created", "post", ["is_notice", "created_at"])

    op.create_table(
        "post_comment",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.String(length=2000), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_post_comment_post_id", "post_comment", ["post_id"])

    op.create_table(
        "post_like",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(),
        sa.Column("post_id", sa.Uuid(), sa.ForeignKey("post.id", ondelete="CASCADE"), nullable=False),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("post_id", "employee_id", name="uq_post_like_post_employee"),
    )
    op.create_index("ix_post_like_post_id", "post_like", ["post_id"])

    op.create_table(
        "kpi_metric",
        sa.Column("id", sa.Uuid(), nullable=False),
        *_timestamps(updated=True),
        sa.Column("employee_id", sa.Uuid(), sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False),
        sa.Column("team", sa.String(length=50), nullable=False),
        sa.Column("metric_name", sa.String(length=100), nullable=False),
        sa.Column("target_value", sa.Float(), nullable=False),
        sa.Column("current_value", sa.Float(), nullable=False),
        sa.Column("period", sa.String(length=7), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_kpi_metric_employee_id", "kpi_metric", ["employee_id"])
    op.create_index("ix_kpi_metric_period", "kpi_metric", ["period"])
    op.create_index("ix_kpi_team_period", "kpi_metric", ["team", "period"])


def downgrade() -> None:
    for table in (
        "kpi_metric",
        "post_like",
        "post_comment",
        "post",
        "audit_log",
        "attendance_record",
        "leave_request",
        "employee",
    ):
        op.drop_table(table)
