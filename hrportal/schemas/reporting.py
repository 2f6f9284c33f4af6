"""
Reporting Schemas
"""
from typing import List, Optional
from datetime import date
from hrportal.schemas.base import CamelModel


class ReportingRequest(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class DateRange(CamelModel):
    start_date: date
    end_date: date


class ReportingOverview(CamelModel):
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    billable_percentage: float
    total_projects: int
    total_employees: int
    average_hours_per_employee: float


class ProjectHours(CamelModel):
    project_id: int
    project_name: str
    client: str
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    budget_hours: Optional[float] = None
    utilization: Optional[float] = None
    employee_count: int


class EmployeeHours(CamelModel):
    user_id: int
    employee_id: str
    employee_name: str
    designation: str
    total_hours: float
    billable_hours: float
    non_billable_hours: float
    project_count: int


class OvertimeWeek(CamelModel):
    user_id: int
    employee_id: str
    employee_name: str
    week_start: date
    total_hours: float
    overtime_hours: float


class WeeklyTrend(CamelModel):
    week_start: date
    total_hours: float
    billable_hours: float


class ReportingResponse(CamelModel):
    date_range: DateRange
    overview: ReportingOverview
    project_hours: List[ProjectHours]
    employee_hours: List[EmployeeHours]
    overtime_data: List[OvertimeWeek]
    weekly_trends: List[WeeklyTrend]
