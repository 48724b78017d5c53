# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query

from intranet.api.deps import AdminDep, AuthDep
from intranet.db import SessionDep
from intranet.models.enums import Team
from intranet.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from intranet.services import employee as employee_service

employees_router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


@employees_router.put("/{employee_id}", response_model=EmployeeResponse)
async def upsert_employee(
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    session: SessionDep,
    auth: AdminDep,
) -> EmployeeResponse:
    """Create or update a directory profile (admin only)."""
    return await employee_service.upsert_employee(session, auth, employee_id, payload)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get a directory entry."""
    return await employee_service.get_employee(session, employee_id)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees(
    session: SessionDep,
    auth: AuthDep,
    team: Team | None = Query(default=None),
    search: str | None = Query(default=None, max_length=100),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> EmployeeListResponse:
    """List the employee directory with optional team and name/email filters."""
    return await employee_service.list_employees(session, team, search, offset, limit)
