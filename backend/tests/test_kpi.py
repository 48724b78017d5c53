"""Integration tests for team KPI metrics."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select
from sqlmodel import col

from conftest import ADMIN_HEADERS, user_headers
from intranet.models.audit import AuditLog
from intranet.models.enums import AuditAction, AuditEntityType
from intranet.services.kpi import achievement_rate

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    EmployeeFactory = Callable[..., Awaitable[uuid.UUID]]

KPI_URL = "/kpi"


def leader_headers(user_id: uuid.UUID) -> dict[str, str]:
    return {"X-User-Id": str(user_id), "X-Role": "leader"}


def _metric(employee_id: uuid.UUID, **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "employee_id": str(employee_id),
        "metric_name": "Orders shipped",
        "target_value": 200,
        "current_value": 150,
        "period": "2026-03",
    }
    body.update(overrides)
    return body


@pytest.mark.parametrize(
    ("current", "target", "expected"),
    [
        (150, 200, 75.0),
        (1, 3, 33.3),
        (250, 200, 125.0),
        (10, 0, 0.0),
    ],
)
def test_achievement_rate(current: float, target: float, expected: float) -> None:
    assert achievement_rate(current, target) == expected


async def test_admin_creates_metric(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    emp = await create_employee(display_name="Alice", team="COMMERCE")
    resp = await async_client.post(KPI_URL, json=_metric(emp), headers=ADMIN_HEADERS)
    assert resp.status_code == 201
    data = resp.json()
    assert data["employee_name"] == "Alice"
    assert data["team"] == "COMMERCE"
    assert data["achievement_rate"] == 75.0
    assert data["period"] == "2026-03"


async def test_team_required_without_profile_team(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    emp = await create_employee(team=None)
    missing = await async_client.post(KPI_URL, json=_metric(emp), headers=ADMIN_HEADERS)
    assert missing.status_code == 400

    explicit = await async_client.post(KPI_URL, json=_metric(emp, team="CONTENT"), headers=ADMIN_HEADERS)
    assert explicit.status_code == 201
    assert explicit.json()["team"] == "CONTENT"


async def test_metric_validation(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    emp = await create_employee(team="COMMERCE")
    bad_period = await async_client.post(KPI_URL, json=_metric(emp, period="2026-13"), headers=ADMIN_HEADERS)
    negative = await async_client.post(KPI_URL, json=_metric(emp, target_value=-1), headers=ADMIN_HEADERS)
    assert bad_period.status_code == 422
    assert negative.status_code == 422


async def test_unknown_employee(async_client: AsyncClient) -> None:
    resp = await async_client.post(KPI_URL, json=_metric(uuid.uuid4(), team="COMMERCE"), headers=ADMIN_HEADERS)
    assert resp.status_code == 404


async def test_regular_user_cannot_manage(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    emp = await create_employee(team="COMMERCE")
    resp = await async_client.post(KPI_URL, json=_metric(emp), headers=user_headers(emp))
    assert resp.status_code == 403


async def test_leader_manages_own_team_only(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    leader = await create_employee(team="COMMERCE", role="leader")
    teammate = await create_employee(team="COMMERCE")
    outsider = await create_employee(team="CONTENT")

    own = await async_client.post(KPI_URL, json=_metric(teammate), headers=leader_headers(leader))
    assert own.status_code == 201

    other_team = await async_client.post(KPI_URL, json=_metric(outsider), headers=leader_headers(leader))
    assert other_team.status_code == 403

    # Filing an outsider under the leader's team is refused as well.
    relabelled = await async_client.post(
        KPI_URL, json=_metric(outsider, team="COMMERCE"), headers=leader_headers(leader)
    )
    assert relabelled.status_code == 403


async def test_leader_without_team_cannot_manage(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    leader = await create_employee(team=None, role="leader")
    emp = await create_employee(team="COMMERCE")
    resp = await async_client.post(KPI_URL, json=_metric(emp), headers=leader_headers(leader))
    assert resp.status_code == 403


async def test_update_and_delete(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    leader = await create_employee(team="CONTENT", role="leader")
    emp = await create_employee(team="CONTENT")
    created = await async_client.post(KPI_URL, json=_metric(emp), headers=leader_headers(leader))
    url = f"{KPI_URL}/{created.json()['id']}"

    updated = await async_client.put(url, json=_metric(emp, current_value=200), headers=leader_headers(leader))
    assert updated.status_code == 200
    assert updated.json()["achievement_rate"] == 100.0

    outsider_leader = await create_employee(team="COMMERCE", role="leader")
    assert (await async_client.delete(url, headers=leader_headers(outsider_leader))).status_code == 403
    assert (await async_client.delete(url, headers=leader_headers(leader))).status_code == 204
    assert (await async_client.delete(url, headers=ADMIN_HEADERS)).status_code == 404


async def test_leader_cannot_move_metric_to_other_team(
    async_client: AsyncClient, create_employee: EmployeeFactory
) -> None:
    leader = await create_employee(team="COMMERCE", role="leader")
    teammate = await create_employee(team="COMMERCE")
    outsider = await create_employee(team="CONTENT")
    created = await async_client.post(KPI_URL, json=_metric(teammate), headers=leader_headers(leader))

    resp = await async_client.put(
        f"{KPI_URL}/{created.json()['id']}", json=_metric(outsider), headers=leader_headers(leader)
    )
    assert resp.status_code == 403


async def test_list_filters_and_order(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    alice = await create_employee(team="COMMERCE")
    bob = await create_employee(team="CONTENT")
    await async_client.post(KPI_URL, json=_metric(alice, period="2026-02"), headers=ADMIN_HEADERS)
    await async_client.post(KPI_URL, json=_metric(alice, period="2026-03"), headers=ADMIN_HEADERS)
    await async_client.post(KPI_URL, json=_metric(bob, period="2026-03"), headers=ADMIN_HEADERS)

    everything = await async_client.get(KPI_URL, headers=user_headers(bob))
    assert everything.status_code == 200
    assert everything.json()["total"] == 3
    assert [m["period"] for m in everything.json()["items"]] == ["2026-03", "2026-03", "2026-02"]

    commerce = await async_client.get(KPI_URL, params={"team": "COMMERCE"}, headers=user_headers(bob))
    assert commerce.json()["total"] == 2

    march = await async_client.get(
        KPI_URL, params={"period": "2026-03", "employee_id": str(bob)}, headers=user_headers(bob)
    )
    assert [m["employee_id"] for m in march.json()["items"]] == [str(bob)]


async def test_team_summary(async_client: AsyncClient, create_employee: EmployeeFactory) -> None:
    alice = await create_employee(team="COMMERCE")
    bob = await create_employee(team="COMMERCE")
    carol = await create_employee(team="CONTENT")
    await async_client.post(KPI_URL, json=_metric(alice, current_value=100), headers=ADMIN_HEADERS)
    await async_client.post(KPI_URL, json=_metric(bob, current_value=200), headers=ADMIN_HEADERS)
    await async_client.post(KPI_URL, json=_metric(carol, current_value=50), headers=ADMIN_HEADERS)
    await async_client.post(KPI_URL, json=_metric(carol, period="2026-04"), headers=ADMIN_HEADERS)

    resp = await async_client.get(f"{KPI_URL}/summary", params={"period": "2026-03"}, headers=user_headers(alice))
    assert resp.status_code == 200
    assert resp.json() == {
        "period": "2026-03",
        "teams": [
            {"team": "COMMERCE", "average_rate": 75.0, "metric_count": 2},
            {"team": "CONTENT", "average_rate": 25.0, "metric_count": 1},
        ],
    }


async def test_kpi_mutations_are_audited(
    async_client: AsyncClient, create_employee: EmployeeFactory, db_session: AsyncSession
) -> None:
    emp = await create_employee(team="COMMERCE")
    created = await async_client.post(KPI_URL, json=_metric(emp), headers=ADMIN_HEADERS)
    metric_id = uuid.UUID(created.json()["id"])
    await async_client.put(f"{KPI_URL}/{metric_id}", json=_metric(emp, current_value=180), headers=ADMIN_HEADERS)
    await async_client.delete(f"{KPI_URL}/{metric_id}", headers=ADMIN_HEADERS)

    result = await db_session.execute(
        select(AuditLog)
        .where(
            col(AuditLog.entity_type) == AuditEntityType.KPI_METRIC.value,
            col(AuditLog.entity_id) == metric_id,
        )
        .order_by(col(AuditLog.created_at))
    )
    logs = list(result.scalars().all())
    assert [log.action for log in logs] == [
        AuditAction.CREATE.value,
        AuditAction.UPDATE.value,
        AuditAction.DELETE.value,
    ]
    assert logs[1].before_json is not None
    assert logs[1].before_json["current_value"] == 150
    assert logs[1].after_json is not None
    assert logs[1].after_json["current_value"] == 180
