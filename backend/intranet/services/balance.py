# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from intranet.exceptions import AppError
from intranet.models.employee import Employee
from intranet.models.enums import AuditAction, AuditEntityType, LeaveCategory, LeaveStatus
from intranet.models.leave import LeaveRequest
from intranet.schemas.balance import AdjustmentResponse, BalanceResponse, LeaveBalanceSchema
from intranet.services.audit import model_to_audit_dict, write_audit_log
from intranet.services.clock import local_today
from intranet.services.leave_calculator import (
    REGIME_CATEGORIES,
    LeaveBalance,
    UsedLeaveEntry,
    can_use_leave,
    compute_balance,
    describe,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from intranet.schemas.auth import AuthContext
    from intranet.schemas.balance import CreateAdjustmentRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input assembly
# ---------------------------------------------------------------------------


def expand_used_entries(requests: Iterable[LeaveRequest]) -> list[UsedLeaveEntry]:
    """Turn approved requests into calculator entries, one per charged working day."""
    entries: list[UsedLeaveEntry] = []
    for request in requests:
        entry = UsedLeaveEntry(LeaveCategory(request.category))
        entries.extend([entry] * request.working_days)
    return entries


async def _requests_by_employee(
    session: AsyncSession,
    employee_ids: list[uuid.UUID],
    status: LeaveStatus,
) -> dict[uuid.UUID, list[LeaveRequest]]:
    """Fetch requests in one status for several employees, grouped by employee."""
    grouped: dict[uuid.UUID, list[LeaveRequest]] = defaultdict(list)
    if not employee_ids:
        return grouped

    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.employee_id).in_(employee_ids),
            col(LeaveRequest.status) == status.value,
        )
    )
    for request in result.scalars().all():
        grouped[request.employee_id].append(request)
    return grouped


def evaluate(employee: Employee, approved: Iterable[LeaveRequest], as_of: date) -> LeaveBalance | None:
    """Run the calculator for one employee. Raises 400 when as_of precedes the join date."""
    try:
        return compute_balance(
            employee.joined_at,
            as_of,
            expand_used_entries(approved),
            employee.leave_adjustment,
        )
    except ValueError as exc:
        raise AppError(str(exc), status_code=400) from exc


def pending_amount_for(balance: LeaveBalance | None, pending: Iterable[LeaveRequest]) -> float:
    """Weight of pending requests that would draw on the active regime's pool."""
    if balance is None:
        return 0.0
    valid = REGIME_CATEGORIES[balance.regime]
    return sum((r.amount for r in pending if LeaveCategory(r.category) in valid), 0.0)


def to_balance_schema(balance: LeaveBalance | None) -> LeaveBalanceSchema | None:
    if balance is None:
        return None
    return LeaveBalanceSchema(
        regime=balance.regime,
        months_worked=balance.months_worked,
        years_worked=balance.years_worked,
        total_entitlement=balance.total_entitlement,
        used_amount=balance.used_amount,
        remaining=balance.remaining,
        manual_adjustment=balance.manual_adjustment,
        description=describe(balance),
    )


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def get_employee_or_404(session: AsyncSession, employee_id: uuid.UUID) -> Employee:
    """Fetch an employee by ID. Raises 404 if not found."""
    employee = await session.get(Employee, employee_id)
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    return employee


def lock_employee_stmt(employee_id: uuid.UUID) -> Select[tuple[Employee]]:
    """SELECT ... FOR UPDATE on the profile row that carries the leave balance inputs."""
    return (
        select(Employee)
        .where(col(Employee.id) == employee_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


async def get_employee_for_update(session: AsyncSession, employee_id: uuid.UUID) -> Employee:
    """Fetch and row-lock an employee until the transaction ends. Raises 404 if not found.

    Balance writes (adjustments, new requests) serialize on this lock.
    """
    result = await session.execute(lock_employee_stmt(employee_id))
    employee = result.scalar_one_or_none()
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    return employee


async def balances_for(
    session: AsyncSession,
    employees: list[Employee],
    as_of: date,
) -> dict[uuid.UUID, LeaveBalance | None]:
    """Compute balances for many employees with a single query for their usage.

    Employees whose join date lies after as_of get no balance rather than
    failing the whole batch.
    """
    approved = await _requests_by_employee(session, [e.id for e in employees], LeaveStatus.APPROVED)
    balances: dict[uuid.UUID, LeaveBalance | None] = {}
    for employee in employees:
        if employee.joined_at is not None and employee.joined_at > as_of:
            logger.warning("Employee %s joins on %s, after %s; balance omitted", employee.id, employee.joined_at, as_of)
            balances[employee.id] = None
            continue
        balances[employee.id] = evaluate(employee, approved[employee.id], as_of)
    return balances


async def build_balance_response(
    session: AsyncSession,
    employee: Employee,
    as_of: date,
) -> BalanceResponse:
    """Assemble the calculator input for one employee and compute the balance."""
    approved = await _requests_by_employee(session, [employee.id], LeaveStatus.APPROVED)
    pending = await _requests_by_employee(session, [employee.id], LeaveStatus.PENDING)
    balance = evaluate(employee, approved[employee.id], as_of)

    return BalanceResponse(
        employee_id=employee.id,
        as_of=as_of,
        join_date_required=balance is None,
        balance=to_balance_schema(balance),
        pending_amount=pending_amount_for(balance, pending[employee.id]),
        can_use_leave=can_use_leave(balance),
    )


async def get_employee_balance(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    as_of: date | None = None,
) -> BalanceResponse:
    """Get an employee's balance; employees may only read their own."""
    if not auth.is_admin and auth.user_id != employee_id:
        raise AppError("Not authorized to view this balance", status_code=403)

    employee = await get_employee_or_404(session, employee_id)
    return await build_balance_response(session, employee, as_of or local_today())


# ---------------------------------------------------------------------------
# Write path: admin adjustments
# ---------------------------------------------------------------------------


async def create_adjustment(
    session: AsyncSession,
    auth: AuthContext,
    payload: CreateAdjustmentRequest,
) -> AdjustmentResponse:
    """Add a signed manual adjustment to an employee's balance.

    The adjustment accumulates on the profile and is applied after the
    entitlement/usage difference, so it can take the balance below zero.
    """
    employee = await get_employee_for_update(session, payload.employee_id)
    before_dict = model_to_audit_dict(employee)

    employee.leave_adjustment += payload.amount
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.ADJUSTMENT,
        entity_id=employee.id,
        action=AuditAction.UPDATE,
        before_json=before_dict,
        after_json={**model_to_audit_dict(employee), "amount": payload.amount, "reason": payload.reason},
    )

    await session.commit()
    await session.refresh(employee)
    logger.info(
        "Leave adjustment %+.1f for employee %s by %s (total %.1f)",
        payload.amount,
        employee.id,
        auth.user_id,
        employee.leave_adjustment,
    )

    return AdjustmentResponse(
        employee_id=employee.id,
        amount=payload.amount,
        leave_adjustment=employee.leave_adjustment,
        reason=payload.reason,
        balance=await build_balance_response(session, employee, local_today()),
    )
