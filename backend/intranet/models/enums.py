from __future__ import annotations

import enum


class UserRole(enum.StrEnum):
    """Role of an intranet user."""

    ADMIN = "admin"
    LEADER = "leader"
    USER = "user"


class Team(enum.StrEnum):
    """Organizational team an employee belongs to."""

    COMMERCE = "COMMERCE"
    CONTENT = "CONTENT"


class LeaveCategory(enum.StrEnum):
    """Kind of leave; determines the weight and which regime pool it draws on."""

    FULL_DAY = "FULL_DAY"
    HALF_DAY = "HALF_DAY"
    MONTHLY = "MONTHLY"


class LeaveRegime(enum.StrEnum):
    """Accrual rule set derived from tenure."""

    MONTHLY = "MONTHLY"
    ANNUAL = "ANNUAL"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class AttendanceStatus(enum.StrEnum):
    """Progress of an attendance record through the day."""

    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class AttendanceAction(enum.StrEnum):
    """Action posted to the attendance endpoint."""

    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class AuditEntityType(enum.StrEnum):
    """Entity type recorded in the audit log."""

    EMPLOYEE = "EMPLOYEE"
    LEAVE_REQUEST = "LEAVE_REQUEST"
    ADJUSTMENT = "ADJUSTMENT"
    ATTENDANCE = "ATTENDANCE"
    POST = "POST"
    COMMENT = "COMMENT"
    KPI_METRIC = "KPI_METRIC"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    CANCEL = "CANCEL"
    SUBMIT = "SUBMIT"
    CHECK_IN = "CHECK_IN"
    CHECK_OUT = "CHECK_OUT"
    DELETE = "DELETE"


class BoardTab(enum.StrEnum):
    """Board list views."""

    ALL = "all"
    BEST = "best"
    NOTICE = "notice"
