# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from pydantic import BaseModel

from intranet.models.enums import LeaveCategory


class CalendarEvent(BaseModel):
    """One employee's approved leave on one calendar day."""

    date: date
    employee_id: uuid.UUID
    employee_name: str
    category: LeaveCategory
    leave_request_id: uuid.UUID
    title: str


class CalendarMonthResponse(BaseModel):
    """Approved leave events in a month, ordered by date."""

    year: int
    month: int
    events: list[CalendarEvent]
