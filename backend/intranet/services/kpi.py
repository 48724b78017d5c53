# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from intranet.exceptions import AppError
from intranet.models.employee import Employee
from intranet.models.enums import AuditAction, AuditEntityType, Team, UserRole
from intranet.models.kpi import KpiMetric
from intranet.schemas.kpi import (
    KpiMetricListResponse,
    KpiMetricResponse,
    KpiSummaryResponse,
    TeamKpiSummary,
)
from intranet.services.audit import model_to_audit_dict, write_audit_log
from intranet.services.balance import get_employee_or_404

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from intranet.schemas.auth import AuthContext
    from intranet.schemas.kpi import KpiMetricPayload

logger = logging.getLogger(__name__)


def achievement_rate(current_value: float, target_value: float) -> float:
    """Percent of target reached, one decimal. A zero target reads as 0%."""
    if target_value <= 0:
        return 0.0
    return round(current_value / target_value * 100, 1)


def _build_kpi_response(metric: KpiMetric, employee_name: str) -> KpiMetricResponse:
    return KpiMetricResponse(
        id=metric.id,
        employee_id=metric.employee_id,
        employee_name=employee_name,
        team=Team(metric.team),
        metric_name=metric.metric_name,
        target_value=metric.target_value,
        current_value=metric.current_value,
        achievement_rate=achievement_rate(metric.current_value, metric.target_value),
        period=metric.period,
        created_at=metric.created_at,
        updated_at=metric.updated_at,
    )


async def _get_metric_or_404(session: AsyncSession, metric_id: uuid.UUID) -> KpiMetric:
    metric = await session.get(KpiMetric, metric_id)
    if metric is None:
        raise AppError("KPI metric not found", status_code=404)
    return metric


async def _require_team_editor(session: AsyncSession, auth: AuthContext, team: str) -> None:
    """Admins edit every team; leaders edit only the team on their own profile."""
    if auth.is_admin:
        return
    if auth.role != UserRole.LEADER:
        raise AppError("Only admins and team leaders can manage KPI metrics", status_code=403)
    leader = await session.get(Employee, auth.user_id)
    if leader is None or leader.team is None or leader.team != team:
        raise AppError("Leaders can only manage KPI metrics of their own team", status_code=403)


async def _resolve_target(
    session: AsyncSession, auth: AuthContext, payload: KpiMetricPayload
) -> tuple[Employee, str]:
    """Load the measured employee, settle the metric's team and authorize the caller."""
    employee = await get_employee_or_404(session, payload.employee_id)
    team = payload.team.value if payload.team is not None else employee.team
    if team is None:
        raise AppError("Team is required when the employee has no team on record", status_code=400)
    await _require_team_editor(session, auth, team)
    if not auth.is_admin and employee.team != team:
        raise AppError("Employee is not a member of this team", status_code=403)
    return employee, team


async def create_metric(session: AsyncSession, auth: AuthContext, payload: KpiMetricPayload) -> KpiMetricResponse:
    """Record a KPI metric for an employee and period."""
    employee, team = await _resolve_target(session, auth, payload)

    metric = KpiMetric(
        employee_id=employee.id,
        team=team,
        metric_name=payload.metric_name,
        target_value=payload.target_value,
        current_value=payload.current_value,
        period=payload.period,
    )
    session.add(metric)
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.KPI_METRIC,
        entity_id=metric.id,
        action=AuditAction.CREATE,
        after_json=model_to_audit_dict(metric),
    )

    await session.commit()
    await session.refresh(metric)
    logger.info("KPI metric %s created for %s (%s)", metric.id, employee.id, metric.period)
    return _build_kpi_response(metric, employee.display_name)


async def update_metric(
    session: AsyncSession,
    auth: AuthContext,
    metric_id: uuid.UUID,
    payload: KpiMetricPayload,
) -> KpiMetricResponse:
    """Replace a metric. The caller needs edit rights on both the old and the new team."""
    metric = await _get_metric_or_404(session, metric_id)
    await _require_team_editor(session, auth, metric.team)
    employee, team = await _resolve_target(session, auth, payload)

    before_dict = model_to_audit_dict(metric)
    metric.employee_id = employee.id
    metric.team = team
    metric.metric_name = payload.metric_name
    metric.target_value = payload.target_value
    metric.current_value = payload.current_value
    metric.period = payload.period
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.KPI_METRIC,
        entity_id=metric.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json=model_to_audit_dict(metric),
    )

    await session.commit()
    await session.refresh(metric)
    return _build_kpi_response(metric, employee.display_name)


async def delete_metric(session: AsyncSession, auth: AuthContext, metric_id: uuid.UUID) -> None:
    metric = await _get_metric_or_404(session, metric_id)
    await _require_team_editor(session, auth, metric.team)

    before_dict = model_to_audit_dict(metric)
    await session.delete(metric)

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.KPI_METRIC,
        entity_id=metric_id,
        action=AuditAction.DELETE,
        before_json=before_dict,
    )

    await session.commit()
    logger.info("KPI metric %s deleted by %s", metric_id, auth.user_id)


async def list_metrics(
    session: AsyncSession,
    team: Team | None = None,
    period: str | None = None,
    employee_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> KpiMetricListResponse:
    """List metrics, most recent period first. Every employee can read every team."""
    filters = []
    if team is not None:
        filters.append(col(KpiMetric.team) == team.value)
    if period is not None:
        filters.append(col(KpiMetric.period) == period)
    if employee_id is not None:
        filters.append(col(KpiMetric.employee_id) == employee_id)

    count_result = await session.execute(select(func.count()).select_from(KpiMetric).where(*filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(KpiMetric, col(Employee.display_name))
        .join(Employee, col(Employee.id) == col(KpiMetric.employee_id))
        .where(*filters)
        .order_by(col(KpiMetric.period).desc(), col(KpiMetric.team), col(KpiMetric.metric_name))
        .offset(offset)
        .limit(limit)
    )

    return KpiMetricListResponse(
        items=[_build_kpi_response(metric, name) for metric, name in result.all()],
        total=total,
    )


async def team_summary(session: AsyncSession, period: str) -> KpiSummaryResponse:
    """Average achievement rate per team for a period; teams without metrics are left out."""
    result = await session.execute(select(KpiMetric).where(col(KpiMetric.period) == period))
    rates: dict[str, list[float]] = {}
    for metric in result.scalars().all():
        rates.setdefault(metric.team, []).append(achievement_rate(metric.current_value, metric.target_value))

    teams = [
        TeamKpiSummary(
            team=Team(team),
            average_rate=round(sum(values) / len(values), 1),
            metric_count=len(values),
        )
        for team, values in sorted(rates.items())
    ]
    return KpiSummaryResponse(period=period, teams=teams)
