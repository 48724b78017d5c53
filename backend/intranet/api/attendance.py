# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query

from intranet.api.deps import AdminDep, AuthDep, ClientIpDep
from intranet.db import SessionDep
from intranet.schemas.attendance import (
    AttendanceActionResponse,
    AttendanceListResponse,
    AttendancePayload,
    AttendanceStatusResponse,
)
from intranet.services import attendance as attendance_service

attendance_router = APIRouter(
    prefix="/attendance",
    tags=["attendance"],
)


@attendance_router.get("/today", response_model=AttendanceStatusResponse)
async def get_today(
    session: SessionDep,
    auth: AuthDep,
    ip: ClientIpDep,
) -> AttendanceStatusResponse:
    """Whether this network may record attendance, and the caller's record for today."""
    return await attendance_service.get_today_status(session, auth, ip)


@attendance_router.post("", response_model=AttendanceActionResponse)
async def record_attendance(
    payload: AttendancePayload,
    session: SessionDep,
    auth: AuthDep,
    ip: ClientIpDep,
) -> AttendanceActionResponse:
    """Check in or check out for today."""
    return await attendance_service.record_attendance(session, auth, ip, payload.action)


@attendance_router.get("", response_model=AttendanceListResponse)
async def list_attendance(
    session: SessionDep,
    auth: AdminDep,
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    employee_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=200),
) -> AttendanceListResponse:
    """List attendance records (admin only)."""
    return await attendance_service.list_attendance(session, start_date, end_date, employee_id, offset, limit)
