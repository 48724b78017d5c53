# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from intranet.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase


class KpiMetric(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """A target and current value for one employee's metric in a month."""

    __tablename__ = "kpi_metric"
    __table_args__ = (sa.Index("ix_kpi_team_period", "team", "period"),)

    employee_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("employee.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    team: str = Field(max_length=50)
    metric_name: str = Field(max_length=100)
    target_value: float
    current_value: float = 0.0
    period: str = Field(max_length=7, index=True)  # YYYY-MM
