# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from intranet.models.enums import Team, UserRole
from intranet.schemas.balance import LeaveBalanceSchema


class UpsertEmployeeRequest(BaseModel):
    """Request body for creating or updating a directory profile."""

    email: str = Field(min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    display_name: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.USER
    team: Team | None = None
    joined_at: date | None = None
    birthday: date | None = None


class EmployeeResponse(BaseModel):
    """Directory entry, including the leave balance computed for today."""

    id: uuid.UUID
    email: str
    display_name: str
    role: UserRole
    team: Team | None
    joined_at: date | None
    birthday: date | None
    leave_adjustment: float
    balance: LeaveBalanceSchema | None
    created_at: datetime


class EmployeeListResponse(BaseModel):
    """List of directory entries."""

    items: list[EmployeeResponse]
    total: int
