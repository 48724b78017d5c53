# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from intranet.models.enums import Team

PERIOD_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class KpiMetricPayload(BaseModel):
    """Request body for creating or replacing a KPI metric.

    When team is omitted it is taken from the employee's profile.
    """

    employee_id: uuid.UUID
    team: Team | None = None
    metric_name: str = Field(min_length=1, max_length=100)
    target_value: float = Field(ge=0)
    current_value: float = Field(default=0, ge=0)
    period: str = Field(pattern=PERIOD_PATTERN, description="YYYY-MM")


class KpiMetricResponse(BaseModel):
    """A KPI metric with its achievement rate in percent."""

    id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    team: Team
    metric_name: str
    target_value: float
    current_value: float
    achievement_rate: float
    period: str
    created_at: datetime
    updated_at: datetime


class KpiMetricListResponse(BaseModel):
    """Paginated KPI metrics, most recent period first."""

    items: list[KpiMetricResponse]
    total: int


class TeamKpiSummary(BaseModel):
    """Average achievement of one team's metrics in a period."""

    team: Team
    average_rate: float
    metric_count: int


class KpiSummaryResponse(BaseModel):
    """Per-team KPI averages for a period."""

    period: str
    teams: list[TeamKpiSummary]
