from fastapi import APIRouter

from intranet.api.attendance import attendance_router
from intranet.api.audit import audit_router
from intranet.api.balances import adjustment_router, employee_balance_router
from intranet.api.board import board_router, comment_router
from intranet.api.calendar import calendar_router
from intranet.api.employees import employees_router
from intranet.api.kpi import kpi_router
from intranet.api.leave import leave_router

api_router = APIRouter()
api_router.include_router(employees_router)
api_router.include_router(employee_balance_router)
api_router.include_router(adjustment_router)
api_router.include_router(leave_router)
api_router.include_router(attendance_router)
api_router.include_router(calendar_router)
api_router.include_router(board_router)
api_router.include_router(comment_router)
api_router.include_router(kpi_router)
api_router.include_router(audit_router)
