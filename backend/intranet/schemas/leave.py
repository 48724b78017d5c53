# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Self

from pydantic import BaseModel, Field, model_validator

from intranet.models.enums import LeaveCategory, LeaveStatus

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class SubmitLeavePayload(BaseModel):
    """Request body for submitting a leave request."""

    employee_id: uuid.UUID
    category: LeaveCategory
    start_date: date
    end_date: date
    reason: str | None = Field(default=None, max_length=1000)

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "end_date must not be before start_date"
            raise ValueError(msg)
        if self.category == LeaveCategory.HALF_DAY and self.end_date != self.start_date:
            msg = "half-day leave must start and end on the same day"
            raise ValueError(msg)
        return self


class ReviewPayload(BaseModel):
    """Request body for approve/reject actions."""

    note: str | None = Field(default=None, max_length=1000)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    category: LeaveCategory
    start_date: date
    end_date: date
    working_days: int
    amount: float
    reason: str | None
    status: LeaveStatus
    reviewed_at: datetime | None
    reviewed_by: uuid.UUID | None
    review_note: str | None
    created_at: datetime


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int


class LeaveMonthStatsResponse(BaseModel):
    """Counts of leave requests filed in a month, by status."""

    year: int
    month: int
    total: int
    pending: int
    approved: int
    rejected: int
    cancelled: int
