from __future__ import annotations

from calendar import monthrange
from datetime import date, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from intranet.models.employee import Employee
from intranet.models.enums import LeaveCategory, LeaveStatus
from intranet.models.leave import LeaveRequest
from intranet.schemas.leave_calendar import CalendarEvent, CalendarMonthResponse

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

CATEGORY_LABELS: dict[LeaveCategory, str] = {
    LeaveCategory.FULL_DAY: "Annual leave",
    LeaveCategory.HALF_DAY: "Half-day leave",
    LeaveCategory.MONTHLY: "Monthly leave",
}


def _month_bounds(year: int, month: int) -> tuple[date, date]:
    """Return (first_day, last_day) of the month, both inclusive."""
    _, days_in_month = monthrange(year, month)
    return date(year, month, 1), date(year, month, days_in_month)


def expand_to_days(request: LeaveRequest, employee_name: str, first: date, last: date) -> list[CalendarEvent]:
    """One event per calendar day of the request that falls inside [first, last]."""
    category = LeaveCategory(request.category)
    current = max(request.start_date, first)
    end = min(request.end_date, last)
    events: list[CalendarEvent] = []
    while current <= end:
        events.append(
            CalendarEvent(
                date=current,
                employee_id=request.employee_id,
                employee_name=employee_name,
                category=category,
                leave_request_id=request.id,
                title=f"{employee_name} - {CATEGORY_LABELS[category]}",
            )
        )
        current += timedelta(days=1)
    return events


async def get_month(session: AsyncSession, year: int, month: int) -> CalendarMonthResponse:
    """Approved leave overlapping the month, expanded to daily events."""
    first, last = _month_bounds(year, month)

    result = await session.execute(
        select(LeaveRequest, col(Employee.display_name))
        .join(Employee, col(Employee.id) == col(LeaveRequest.employee_id))
        .where(
            col(LeaveRequest.status) == LeaveStatus.APPROVED.value,
            col(LeaveRequest.start_date) <= last,
            col(LeaveRequest.end_date) >= first,
        )
        .order_by(col(LeaveRequest.start_date))
    )

    events: list[CalendarEvent] = []
    for request, employee_name in result.all():
        events.extend(expand_to_days(request, employee_name, first, last))
    events.sort(key=lambda e: (e.date, e.employee_name))

    return CalendarMonthResponse(year=year, month=month, events=events)
