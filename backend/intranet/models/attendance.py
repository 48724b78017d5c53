# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from intranet.models.base import TimestampMixin, UUIDBase
from intranet.models.enums import AttendanceStatus


class AttendanceRecord(UUIDBase, TimestampMixin, table=True):
    """One employee's check-in/check-out for a single local calendar day."""

    __tablename__ = "attendance_record"
    __table_args__ = (sa.UniqueConstraint("employee_id", "work_date", name="uq_attendance_employee_date"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    work_date: date = Field(index=True)
    check_in: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    check_in_ip: str | None = Field(default=None, max_length=64)
    check_out: datetime | None = Field(default=None, sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    check_out_ip: str | None = Field(default=None, max_length=64)
    status: str = Field(default=AttendanceStatus.CHECKED_IN, max_length=20)
