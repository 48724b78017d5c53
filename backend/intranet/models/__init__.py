from sqlmodel import SQLModel

from intranet.models.attendance import AttendanceRecord
from intranet.models.audit import AuditLog
from intranet.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from intranet.models.board import Post, PostComment, PostLike
from intranet.models.employee import Employee
from intranet.models.enums import (
    AttendanceAction,
    AttendanceStatus,
    AuditAction,
    AuditEntityType,
    BoardTab,
    LeaveCategory,
    LeaveRegime,
    LeaveStatus,
    Team,
    UserRole,
)
from intranet.models.kpi import KpiMetric
from intranet.models.leave import LeaveRequest

__all__ = [
    "AttendanceAction",
    "AttendanceRecord",
    "AttendanceStatus",
    "AuditAction",
    "AuditEntityType",
    "AuditLog",
    "BoardTab",
    "Employee",
    "KpiMetric",
    "LeaveCategory",
    "LeaveRegime",
    "LeaveRequest",
    "LeaveStatus",
    "Post",
    "PostComment",
    "PostLike",
    "SQLModel",
    "Team",
    "TimestampMixin",
    "UUIDBase",
    "UpdatedAtMixin",
]
