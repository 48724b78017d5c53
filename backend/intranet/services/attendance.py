# ruff: noqa: TC003
"""Daily check-in/check-out, restricted to the office network."""

from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from intranet.config import get_settings
from intranet.exceptions import AppError
from intranet.models.attendance import AttendanceRecord
from intranet.models.enums import AttendanceAction, AttendanceStatus, AuditAction, AuditEntityType
from intranet.schemas.attendance import (
    AttendanceActionResponse,
    AttendanceListResponse,
    AttendanceRecordResponse,
    AttendanceStatusResponse,
)
from intranet.services.audit import model_to_audit_dict, write_audit_log
from intranet.services.balance import get_employee_or_404
from intranet.services.clock import ensure_utc, local_now, local_today

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from intranet.schemas.auth import AuthContext

logger = logging.getLogger(__name__)


def is_allowed_ip(ip: str, allowed: Sequence[str]) -> bool:
    """Match ip against the allowlist. An empty list allows everything.

    Entries ending in "." match any address with that prefix.
    """
    if not allowed:
        return True
    for entry in (e.strip() for e in allowed):
        if not entry:
            continue
        if entry.endswith("."):
            if ip.startswith(entry):
                return True
        elif ip == entry:
            return True
    return False


def _worked_minutes(record: AttendanceRecord) -> int | None:
    if record.check_in is None or record.check_out is None:
        return None
    delta = ensure_utc(record.check_out) - ensure_utc(record.check_in)
    return max(0, int(delta.total_seconds()) // 60)


def _build_record_response(record: AttendanceRecord) -> AttendanceRecordResponse:
    return AttendanceRecordResponse(
        id=record.id,
        employee_id=record.employee_id,
        work_date=record.work_date,
        check_in=record.check_in,
        check_in_ip=record.check_in_ip,
        check_out=record.check_out,
        check_out_ip=record.check_out_ip,
        status=AttendanceStatus(record.status),
        worked_minutes=_worked_minutes(record),
    )


async def _get_record(session: AsyncSession, employee_id: uuid.UUID, work_date: date) -> AttendanceRecord | None:
    result = await session.execute(
        select(AttendanceRecord).where(
            col(AttendanceRecord.employee_id) == employee_id,
            col(AttendanceRecord.work_date) == work_date,
        )
    )
    return result.scalar_one_or_none()


async def get_today_status(session: AsyncSession, auth: AuthContext, ip: str) -> AttendanceStatusResponse:
    """Report whether ip may record attendance and the caller's record for today."""
    allowed = is_allowed_ip(ip, get_settings().allowed_attendance_ips)
    record = await _get_record(session, auth.user_id, local_today())
    return AttendanceStatusResponse(
        allowed=allowed,
        ip=ip,
        record=_build_record_response(record) if record is not None else None,
    )


async def record_attendance(
    session: AsyncSession,
    auth: AuthContext,
    ip: str,
    action: AttendanceAction,
) -> AttendanceActionResponse:
    """Check the caller in or out for today.

    Repeating an action that already happened returns the existing record
    with a message instead of failing.
    """
    if not is_allowed_ip(ip, get_settings().allowed_attendance_ips):
        logger.warning("Attendance %s from disallowed address %s by %s", action.value, ip, auth.user_id)
        raise AppError(f"Attendance can only be recorded from the office network (detected {ip})", status_code=403)

    await get_employee_or_404(session, auth.user_id)
    now = local_now()
    today = now.date()
    record = await _get_record(session, auth.user_id, today)
    before_dict = model_to_audit_dict(record) if record is not None else None

    if action == AttendanceAction.CHECK_IN:
        if record is not None and record.check_in is not None:
            return AttendanceActionResponse(record=_build_record_response(record), message="Already checked in")
        if record is None:
            record = AttendanceRecord(employee_id=auth.user_id, work_date=today)
            session.add(record)
        record.check_in = now
        record.check_in_ip = ip
        record.status = AttendanceStatus.CHECKED_IN.value
        audit_action = AuditAction.CHECK_IN
    else:
        if record is None or record.check_in is None:
            raise AppError("No check-in recorded for today", status_code=400)
        if record.check_out is not None:
            return AttendanceActionResponse(record=_build_record_response(record), message="Already checked out")
        record.check_out = now
        record.check_out_ip = ip
        record.status = AttendanceStatus.CHECKED_OUT.value
        audit_action = AuditAction.CHECK_OUT

    await session.flush()

    await write_audit_log(
        session,
        auth=auth,
        entity_type=AuditEntityType.ATTENDANCE,
        entity_id=record.id,
        action=audit_action,
        before_json=before_dict,
        after_json=model_to_audit_dict(record),
    )

    await session.commit()
    await session.refresh(record)
    logger.info("Employee %s %s on %s from %s", auth.user_id, action.value, today, ip)
    return AttendanceActionResponse(record=_build_record_response(record))


async def list_attendance(
    session: AsyncSession,
    start_date: date | None = None,
    end_date: date | None = None,
    employee_id: uuid.UUID | None = None,
    offset: int = 0,
    limit: int = 50,
) -> AttendanceListResponse:
    """List attendance records, most recent day first."""
    base_filters = []
    if start_date is not None:
        base_filters.append(col(AttendanceRecord.work_date) >= start_date)
    if end_date is not None:
        base_filters.append(col(AttendanceRecord.work_date) <= end_date)
    if employee_id is not None:
        base_filters.append(col(AttendanceRecord.employee_id) == employee_id)

    count_result = await session.execute(select(func.count()).select_from(AttendanceRecord).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(AttendanceRecord)
        .where(*base_filters)
        .order_by(col(AttendanceRecord.work_date).desc(), col(AttendanceRecord.check_in))
        .offset(offset)
        .limit(limit)
    )
    records = list(result.scalars().all())

    return AttendanceListResponse(
        items=[_build_record_response(r) for r in records],
        total=total,
    )
