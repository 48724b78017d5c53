# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlmodel import col

from intranet.exceptions import AppError
from intranet.models.employee import Employee
from intranet.models.enums import AuditAction, AuditEntityType, Team, UserRole
from intranet.schemas.employee import EmployeeListResponse, EmployeeResponse
from intranet.services.audit import model_to_audit_dict, write_audit_log
from intranet.services.balance import balances_for, get_employee_or_404, to_balance_schema
from intranet.services.clock import local_today

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from intranet.schemas.auth import AuthContext
    from intranet.schemas.employee import UpsertEmployeeRequest
    from intranet.services.leave_calculator import LeaveBalance

logger = logging.getLogger(__name__)


def _build_employee_response(employee: Employee, balance: LeaveBalance | None) -> EmployeeResponse:
    """Map an employee model and its computed balance to the response schema."""
    return EmployeeResponse(
        id=employee.id,
        email=employee.email,
        display_name=employee.display_name,
        role=UserRole(employee.role),
        team=Team(employee.team) if employee.team else None,
        joined_at=employee.joined_at,
        birthday=employee.birthday,
        leave_adjustment=employee.leave_adjustment,
        balance=to_balance_schema(balance),
        created_at=employee.created_at,
    )


async def upsert_employee(
    session: AsyncSession,
    auth: AuthContext,
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
) -> EmployeeResponse:
    """Create or update a directory profile (admin only).

    The manual leave adjustment is not part of the profile payload; it only
    changes through audited adjustments.
    """
    today = local_today()
    if payload.joined_at is not None and payload.joined_at > today:
        raise AppError("joined_at cannot be in the future", status_code=400)

    employee = await session.get(Employee, employee_id)
    before_dict = model_to_audit_dict(employee) if employee is not None else None

    if employee is None:
        employee = Employee(id=employee_id, email=payload.email, display_name=payload.display_name)
        session.add(employee)
        action = AuditAction.CREATE
    else:
        action = AuditAction.UPDATE

    employee.email = payload.email
    employee.display_name = payload.display_name
    employee.role = payload.role.value
    employee.team = payload.team.value if payload.team else None
    employee.joined_at = payload.joined_at
    employee.birthday = payload.birthday

    try:
        await session.flush()
    except IntegrityError:
        await session.rollback()
        raise AppError("Email is already used by another employee", status_code=409) from None

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.EMPLOYEE,
        entity_id=employee.id,
        action=action,
        before_json=before_dict,
        after_json=model_to_audit_dict(employee),
    )

    await session.commit()
    await session.refresh(employee)
    logger.info("Employee %s %s by %s", employee.id, action.value.lower(), auth.user_id)

    balances = await balances_for(session, [employee], today)
    return _build_employee_response(employee, balances[employee.id])


async def get_employee(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeResponse:
    """Get a directory entry with today's balance."""
    employee = await get_employee_or_404(session, employee_id)
    balances = await balances_for(session, [employee], local_today())
    return _build_employee_response(employee, balances[employee.id])


async def list_employees(
    session: AsyncSession,
    team: Team | None = None,
    search: str | None = None,
    offset: int = 0,
    limit: int = 50,
) -> EmployeeListResponse:
    """List directory entries ordered by name, each with today's balance."""
    base_filters = []
    if team is not None:
        base_filters.append(col(Employee.team) == team.value)
    if search:
        pattern = f"%{search.lower()}%"
        base_filters.append(
            or_(
                func.lower(col(Employee.display_name)).like(pattern),
                func.lower(col(Employee.email)).like(pattern),
            )
        )

    count_result = await session.execute(select(func.count()).select_from(Employee).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(Employee).where(*base_filters).order_by(col(Employee.display_name)).offset(offset).limit(limit)
    )
    employees = list(result.scalars().all())
    balances = await balances_for(session, employees, local_today())

    return EmployeeListResponse(
        items=[_build_employee_response(e, balances[e.id]) for e in employees],
        total=total,
    )
