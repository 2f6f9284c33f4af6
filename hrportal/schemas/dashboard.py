"""
Dashboard Schemas
"""
from typing import List
from hrportal.schemas.base import CamelModel
from hrportal.schemas.leave import LeaveBalanceResponse, HolidayResponse


class DashboardStatsResponse(CamelModel):
    hours_this_week: float
    target_hours: float
    pending_timesheets: int
    pending_leave_requests: int
    leave_balances: List[LeaveBalanceResponse]
    upcoming_holidays: List[HolidayResponse]
