# ruff: noqa: TC003
from __future__ import annotations

from datetime import date

from sqlmodel import Field

from intranet.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from intranet.models.enums import UserRole


class Employee(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Directory profile of an employee; source of the leave accrual inputs."""

    __tablename__ = "employee"

    email: str = Field(max_length=255, unique=True)
    display_name: str = Field(max_length=100)
    role: str = Field(default=UserRole.USER, max_length=20, sa_column_kwargs={"server_default": "user"})
    team: str | None = Field(default=None, max_length=50, index=True)
    joined_at: date | None = None  # accrual epoch; None means no entitlement is computable
    birthday: date | None = None
    leave_adjustment: float = Field(default=0.0, sa_column_kwargs={"server_default": "0"})
