# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from intranet.models.base import TimestampMixin, UUIDBase
from intranet.models.enums import LeaveStatus


class LeaveRequest(UUIDBase, TimestampMixin, table=True):
    """An employee's leave request with approval workflow state."""

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_employee_status", "employee_id", "status"),
        sa.Index("ix_leave_dates", "start_date", "end_date"),
    )

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    category: str = Field(max_length=20)
    start_date: date
    end_date: date
    working_days: int
    amount: float  # working_days x category weight
    reason: str | None = None
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    reviewed_at: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    reviewed_by: uuid.UUID | None = None
    review_note: str | None = None
