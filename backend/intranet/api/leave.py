# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from intranet.api.deps import AdminDep, AuthDep
from intranet.db import SessionDep
from intranet.models.enums import LeaveStatus
from intranet.schemas.leave import (
    LeaveMonthStatsResponse,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    ReviewPayload,
    SubmitLeavePayload,
)
from intranet.services import leave as leave_service
from intranet.services.clock import local_today

leave_router = APIRouter(
    prefix="/leave-requests",
    tags=["leave"],
)


@leave_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_request(
    payload: SubmitLeavePayload,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Submit a new leave request."""
    return await leave_service.submit_request(session, auth, payload)


@leave_router.get("", response_model=LeaveRequestListResponse)
async def list_requests(
    session: SessionDep,
    auth: AuthDep,
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    employee_id: uuid.UUID | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List leave requests with optional filters."""
    return await leave_service.list_requests(session, auth, status_filter, employee_id, offset, limit)


@leave_router.get("/stats", response_model=LeaveMonthStatsResponse)
async def month_stats(
    session: SessionDep,
    auth: AdminDep,
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
) -> LeaveMonthStatsResponse:
    """Requests filed in a month by status; defaults to the current month (admin only)."""
    today = local_today()
    return await leave_service.month_stats(session, year or today.year, month or today.month)


@leave_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Get a single leave request."""
    return await leave_service.get_request(session, auth, request_id)


@leave_router.post("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    payload: ReviewPayload | None = None,
) -> LeaveRequestResponse:
    """Approve a pending leave request (admin only)."""
    return await leave_service.approve_request(session, auth, request_id, payload)


@leave_router.post("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AdminDep,
    payload: ReviewPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a pending leave request (admin only)."""
    return await leave_service.reject_request(session, auth, request_id, payload)


@leave_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_request(
    request_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
) -> LeaveRequestResponse:
    """Cancel a pending leave request."""
    return await leave_service.cancel_request(session, auth, request_id)
