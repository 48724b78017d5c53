# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlmodel import col

from intranet.config import get_settings
from intranet.exceptions import AppError
from intranet.models.enums import AuditAction, AuditEntityType, LeaveCategory, LeaveStatus
from intranet.models.leave import LeaveRequest
from intranet.schemas.leave import LeaveMonthStatsResponse, LeaveRequestListResponse, LeaveRequestResponse
from intranet.services.audit import model_to_audit_dict, write_audit_log
from intranet.services.balance import (
    _requests_by_employee,
    evaluate,
    get_employee_for_update,
    pending_amount_for,
)
from intranet.services.clock import local_now, local_today
from intranet.services.leave_calculator import CATEGORY_WEIGHTS, REGIME_CATEGORIES

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from intranet.schemas.auth import AuthContext
    from intranet.schemas.leave import ReviewPayload, SubmitLeavePayload
    from intranet.services.leave_calculator import LeaveBalance

logger = logging.getLogger(__name__)

_ACTIVE_STATUSES = [LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def count_working_days(start_date: date, end_date: date) -> int:
    """Count Monday-Friday days in the inclusive range."""
    days = 0
    current = start_date
    one_day = timedelta(days=1)
    while current <= end_date:
        if current.weekday() < 5:
            days += 1
        current += one_day
    return days


def _build_leave_response(request: LeaveRequest) -> LeaveRequestResponse:
    """Map a leave request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        category=LeaveCategory(request.category),
        start_date=request.start_date,
        end_date=request.end_date,
        working_days=request.working_days,
        amount=request.amount,
        reason=request.reason,
        status=LeaveStatus(request.status),
        reviewed_at=request.reviewed_at,
        reviewed_by=request.reviewed_by,
        review_note=request.review_note,
        created_at=request.created_at,
    )


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a leave request by ID. Raises 404 if not found."""
    request = await session.get(LeaveRequest, request_id)
    if request is None:
        raise AppError("Leave request not found", status_code=404)
    return request


async def _check_overlap(
    session: AsyncSession,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
) -> None:
    """Raise 409 if a pending or approved request shares any day with the range."""
    result = await session.execute(
        select(LeaveRequest).where(
            col(LeaveRequest.employee_id) == employee_id,
            col(LeaveRequest.status).in_(_ACTIVE_STATUSES),
            col(LeaveRequest.start_date) <= end_date,
            col(LeaveRequest.end_date) >= start_date,
        )
    )
    if result.scalars().first() is not None:
        raise AppError("Request overlaps with an existing pending or approved request", status_code=409)


def _check_category_for_regime(category: LeaveCategory, balance: LeaveBalance) -> None:
    """Raise 400 unless the category draws on the regime's pool."""
    if category not in REGIME_CATEGORIES[balance.regime]:
        raise AppError(
            f"{category.value} leave is not available in the {balance.regime.value.lower()} regime",
            status_code=400,
        )


async def _review(
    session: AsyncSession,
    auth: AuthContext,
    request: LeaveRequest,
    new_status: LeaveStatus,
    audit_action: AuditAction,
    note: str | None = None,
) -> LeaveRequestResponse:
    """Shared transition out of PENDING: set status and reviewer, audit, commit."""
    before_dict = model_to_audit_dict(request)

    request.status = new_status.value
    request.reviewed_at = local_now()
    request.reviewed_by = auth.user_id
    request.review_note = note

    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=request.id,
        action=audit_action,
        before_json=before_dict,
        after_json=model_to_audit_dict(request),
    )

    await session.commit()
    await session.refresh(request)
    logger.info("Leave request %s %s by %s", request.id, new_status.value.lower(), auth.user_id)
    return _build_leave_response(request)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_request(
    session: AsyncSession,
    auth: AuthContext,
    payload: SubmitLeavePayload,
) -> LeaveRequestResponse:
    """Submit a leave request in PENDING state.

    Flow:
    1. Authorize (own request, or admin on behalf of anyone) and lock the
       employee row with SELECT FOR UPDATE
    2. Count charged working days
    3. Compute today's balance (join date required)
    4. Check the category draws on the current regime's pool
    5. Check for overlapping pending/approved requests
    6. Check remaining balance net of other pending requests
    7. Create request, audit, commit (releases the lock)
    """
    # 1. Authorize and lock.
    if not auth.is_admin and auth.user_id != payload.employee_id:
        raise AppError("Not authorized to request leave for another employee", status_code=403)
    employee = await get_employee_for_update(session, payload.employee_id)

    # 2. Working days.
    working_days = count_working_days(payload.start_date, payload.end_date)
    if working_days == 0:
        raise AppError("Request covers no working days", status_code=400)
    amount = working_days * CATEGORY_WEIGHTS[payload.category]

    # 3. Balance as of today.
    approved = await _requests_by_employee(session, [employee.id], LeaveStatus.APPROVED)
    pending = await _requests_by_employee(session, [employee.id], LeaveStatus.PENDING)
    balance = evaluate(employee, approved[employee.id], local_today())
    if balance is None:
        raise AppError("Join date is not recorded; leave balance cannot be computed", status_code=400)

    # 4. Category must apply to the active regime.
    _check_category_for_regime(payload.category, balance)

    # 5. Overlap.
    await _check_overlap(session, employee.id, payload.start_date, payload.end_date)

    # 6. Balance check.
    available = balance.remaining - pending_amount_for(balance, pending[employee.id])
    if amount > available:
        raise AppError(f"Insufficient leave balance: requested {amount:g}, available {available:g}", status_code=400)

    # 7. Create.
    leave_request = LeaveRequest(
        employee_id=employee.id,
        category=payload.category.value,
        start_date=payload.start_date,
        end_date=payload.end_date,
        working_days=working_days,
        amount=amount,
        reason=payload.reason,
        status=LeaveStatus.PENDING.value,
    )
    session.add(leave_request)
    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.LEAVE_REQUEST,
        entity_id=leave_request.id,
        action=AuditAction.SUBMIT,
        after_json=model_to_audit_dict(leave_request),
    )

    await session.commit()
    await session.refresh(leave_request)
    logger.info("Leave request %s submitted for employee %s (%g days)", leave_request.id, employee.id, amount)
    return _build_leave_response(leave_request)


async def approve_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: ReviewPayload | None = None,
) -> LeaveRequestResponse:
    """Approve a pending request; it then counts as used leave.

    The category is checked against the employee's regime as of today: a
    MONTHLY request still pending after the first anniversary would draw on
    no pool once approved, so it is refused.
    """
    leave_request = await _get_request_or_404(session, request_id)
    if leave_request.status != LeaveStatus.PENDING.value:
        raise AppError("Only pending requests can be approved", status_code=400)

    employee = await get_employee_for_update(session, leave_request.employee_id)
    approved = await _requests_by_employee(session, [employee.id], LeaveStatus.APPROVED)
    balance = evaluate(employee, approved[employee.id], local_today())
    if balance is None:
        raise AppError("Join date is not recorded; leave balance cannot be computed", status_code=400)
    _check_category_for_regime(LeaveCategory(leave_request.category), balance)

    return await _review(
        session,
        auth,
        leave_request,
        new_status=LeaveStatus.APPROVED,
        audit_action=AuditAction.APPROVE,
        note=payload.note if payload else None,
    )


async def reject_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
    payload: ReviewPayload | None = None,
) -> LeaveRequestResponse:
    """Reject a pending request."""
    leave_request = await _get_request_or_404(session, request_id)
    if leave_request.status != LeaveStatus.PENDING.value:
        raise AppError("Only pending requests can be rejected", status_code=400)

    return await _review(
        session,
        auth,
        leave_request,
        new_status=LeaveStatus.REJECTED,
        audit_action=AuditAction.REJECT,
        note=payload.note if payload else None,
    )


async def cancel_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Cancel a pending request. The requesting employee or an admin can cancel."""
    leave_request = await _get_request_or_404(session, request_id)

    if leave_request.status != LeaveStatus.PENDING.value:
        raise AppError("Only pending requests can be cancelled", status_code=400)
    if auth.user_id != leave_request.employee_id and not auth.is_admin:
        raise AppError("Not authorized to cancel this request", status_code=403)

    return await _review(session, auth, leave_request, new_status=LeaveStatus.CANCELLED, audit_action=AuditAction.CANCEL)


async def get_request(
    session: AsyncSession,
    auth: AuthContext,
    request_id: uuid.UUID,
) -> LeaveRequestResponse:
    """Get a single request; employees only see their own."""
    leave_request = await _get_request_or_404(session, request_id)
    if not auth.is_admin and auth.user_id != leave_request.employee_id:
        raise AppError("Not authorized to view this request", status_code=403)
    return _build_leave_response(leave_request)


async def list_requests(
    session: AsyncSession,
    auth: AuthContext,
    status_filter: LeaveStatus | None = None,
    employee_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List requests, newest first. Non-admins are limited to their own."""
    if not auth.is_admin:
        employee_id = auth.user_id

    base_filters = []
    if status_filter is not None:
        base_filters.append(col(LeaveRequest.status) == status_filter.value)
    if employee_id is not None:
        base_filters.append(col(LeaveRequest.employee_id) == employee_id)

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(*base_filters)
        .order_by(col(LeaveRequest.created_at).desc(), col(LeaveRequest.start_date).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    return LeaveRequestListResponse(
        items=[_build_leave_response(r) for r in requests],
        total=total,
    )


async def month_stats(session: AsyncSession, year: int, month: int) -> LeaveMonthStatsResponse:
    """Count requests filed in a local calendar month, by current status."""
    zone = ZoneInfo(get_settings().timezone)
    start = datetime(year, month, 1, tzinfo=zone)
    end = datetime(year + 1, 1, 1, tzinfo=zone) if month == 12 else datetime(year, month + 1, 1, tzinfo=zone)

    result = await session.execute(
        select(col(LeaveRequest.status), func.count())
        .where(
            col(LeaveRequest.created_at) >= start.astimezone(UTC),
            col(LeaveRequest.created_at) < end.astimezone(UTC),
        )
        .group_by(col(LeaveRequest.status))
    )
    counts = {status: count for status, count in result.all()}

    return LeaveMonthStatsResponse(
        year=year,
        month=month,
        total=sum(counts.values()),
        pending=counts.get(LeaveStatus.PENDING.value, 0),
        approved=counts.get(LeaveStatus.APPROVED.value, 0),
        rejected=counts.get(LeaveStatus.REJECTED.value, 0),
        cancelled=counts.get(LeaveStatus.CANCELLED.value, 0),
    )
