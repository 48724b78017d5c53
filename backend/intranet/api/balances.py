# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Query, status

from intranet.api.deps import AdminDep, AuthDep
from intranet.db import SessionDep
from intranet.schemas.balance import AdjustmentResponse, BalanceResponse, CreateAdjustmentRequest
from intranet.services import balance as balance_service

employee_balance_router = APIRouter(
    prefix="/employees/{employee_id}/balance",
    tags=["balances"],
)

adjustment_router = APIRouter(
    prefix="/adjustments",
    tags=["balances"],
)


@employee_balance_router.get("", response_model=BalanceResponse)
async def get_employee_balance(
    employee_id: uuid.UUID,
    session: SessionDep,
    auth: AuthDep,
    as_of: date | None = Query(default=None),
) -> BalanceResponse:
    """Get an employee's leave balance, computed as of today unless as_of is given."""
    return await balance_service.get_employee_balance(session, auth, employee_id, as_of)


@adjustment_router.post("", response_model=AdjustmentResponse, status_code=status.HTTP_201_CREATED)
async def create_adjustment(
    payload: CreateAdjustmentRequest,
    session: SessionDep,
    auth: AdminDep,
) -> AdjustmentResponse:
    """Apply a manual leave adjustment (admin only)."""
    return await balance_service.create_adjustment(session, auth, payload)
