# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel

from intranet.models.enums import AttendanceAction, AttendanceStatus


class AttendancePayload(BaseModel):
    """Request body for check-in/check-out."""

    action: AttendanceAction


class AttendanceRecordResponse(BaseModel):
    """A single day's attendance record."""

    id: uuid.UUID
    employee_id: uuid.UUID
    work_date: date
    check_in: datetime | None
    check_in_ip: str | None
    check_out: datetime | None
    check_out_ip: str | None
    status: AttendanceStatus
    worked_minutes: int | None  # None until checked out


class AttendanceStatusResponse(BaseModel):
    """Whether the caller's network may record attendance, and today's record."""

    allowed: bool
    ip: str
    record: AttendanceRecordResponse | None


class AttendanceActionResponse(BaseModel):
    """Outcome of a check-in/check-out; message is set when nothing changed."""

    record: AttendanceRecordResponse
    message: str | None = None


class AttendanceListResponse(BaseModel):
    """Paginated attendance records."""

    items: list[AttendanceRecordResponse]
    total: int
