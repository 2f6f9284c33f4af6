"""
Leave Schemas

Leave balances, leave requests, leave types and holidays.
"""
from pydantic import Field
from typing import List, Literal, Optional
from datetime import date, datetime
import datetime as dt
from hrportal.schemas.base import CamelModel, EmployeeSummary, UserSummary

LeaveStatus = Literal["pending", "approved", "rejected", "cancelled"]


class YearFilter(CamelModel):
    year: Optional[int] = Field(None, ge=1900, le=3000)


class LeaveTypeResponse(CamelModel):
    id: int
    name: str
    is_paid: bool
    requires_approval: bool
    requires_attachment: bool
    default_allocated: float


class LeaveTypeListResponse(CamelModel):
    leave_types: List[LeaveTypeResponse]


class LeaveBalanceResponse(CamelModel):
    id: int
    year: int
    leave_type_id: int
    allocated: float
    used: float
    balance: float
    leave_type: LeaveTypeResponse


class LeaveBalanceListResponse(CamelModel):
    leave_balances: List[LeaveBalanceResponse]


class LeaveRequestCreate(CamelModel):
    leave_type_id: int
    start_date: date
    end_date: date
    is_half_day: bool = False
    half_day_period: Optional[Literal["AM", "PM"]] = None
    reason: str = Field(..., min_length=1)
    attachment_url: Optional[str] = None
    backup_user_id: Optional[int] = None


class LeaveRequestFilter(CamelModel):
    status: Optional[LeaveStatus] = None
    year: Optional[int] = Field(None, ge=1900, le=3000)


class LeaveRequestResponse(CamelModel):
    id: int
    user_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    is_half_day: bool
    half_day_period: Optional[str] = None
    reason: str
    attachment_url: Optional[str] = None
    backup_user_id: Optional[int] = None
    status: str
    reviewed_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    created_at: datetime
    leave_type: LeaveTypeResponse
    backup_user: Optional[UserSummary] = None
    reviewer: Optional[UserSummary] = None


class LeaveRequestDetail(LeaveRequestResponse):
    """Request with the employee, for approval queues."""
    user: EmployeeSummary


class LeaveRequestListResponse(CamelModel):
    leave_requests: List[LeaveRequestResponse]


class LeaveRequestMutationResponse(CamelModel):
    success: bool = True
    leave_request: LeaveRequestResponse


class BackupEmployeeListResponse(CamelModel):
    employees: List[EmployeeSummary]


class HolidayResponse(CamelModel):
    id: int
    name: str
    date: dt.date
    year: int
    is_optional: bool


class HolidayListResponse(CamelModel):
    holidays: List[HolidayResponse]
