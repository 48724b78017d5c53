# ruff: noqa: B008, TC001
from __future__ import annotations

from fastapi import APIRouter, Query

from intranet.api.deps import AuthDep
from intranet.db import SessionDep
from intranet.schemas.leave_calendar import CalendarMonthResponse
from intranet.services import leave_calendar as calendar_service

calendar_router = APIRouter(
    prefix="/calendar",
    tags=["calendar"],
)


@calendar_router.get("", response_model=CalendarMonthResponse)
async def get_month(
    session: SessionDep,
    auth: AuthDep,
    year: int = Query(ge=2000, le=2100),
    month: int = Query(ge=1, le=12),
) -> CalendarMonthResponse:
    """Approved leave for a month, one event per employee per day."""
    return await calendar_service.get_month(session, year, month)
