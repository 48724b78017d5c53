# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from intranet.api.deps import AuthDep
from intranet.db import SessionDep
from intranet.models.enums import Team
from intranet.schemas.kpi import (
    PERIOD_PATTERN,
    KpiMetricListResponse,
    KpiMetricPayload,
    KpiMetricResponse,
    KpiSummaryResponse,
)
from intranet.services import kpi as kpi_service
from intranet.services.clock import local_today

kpi_router = APIRouter(
    prefix="/kpi",
    tags=["kpi"],
)


@kpi_router.get("", response_model=KpiMetricListResponse)
async def list_metrics(
    session: SessionDep,
    auth: AuthDep,
    team: Team | None = Query(default=None),
    period: str | None = Query(default=None, pattern=PERIOD_PATTERN),
    employee_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> KpiMetricListResponse:
    """List KPI metrics with optional team, period and employee filters."""
    return await kpi_service.list_metrics(session, team, period, employee_id, offset, limit)


@kpi_router.get("/summary", response_model=KpiSummaryResponse)
async def team_summary(
    session: SessionDep,
    auth: AuthDep,
    period: str | None = Query(default=None, pattern=PERIOD_PATTERN),
) -> KpiSummaryResponse:
    """Average achievement per team; defaults to the current month."""
    return await kpi_service.team_summary(session, period or local_today().strftime("%Y-%m"))


@kpi_router.post("", response_model=KpiMetricResponse, status_code=status.HTTP_201_CREATED)
async def create_metric(
    payload: KpiMetricPayload,
    session: SessionDep,
    auth: AuthDep,
) -> KpiMetricResponse:
    """Record a metric (admin, or leader of the metric's team)."""
    return await kpi_service.create_metric(session, auth, payload)


@kpi_router.put("/{metric_id}", response_model=KpiMetricResponse)
async def update_metric(
    metric_id: uuid.UUID,
    payload: KpiMetricPayload,
    session: SessionDep,
    auth: AuthDep,
) -> KpiMetricResponse:
    return await kpi_service.update_metric(session, auth, metric_id, payload)


@kpi_router.delete("/{metric_id}", status_code=204)
async def delete_metric(
    metric_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> None:
    await kpi_service.delete_metric(session, auth, metric_id)
