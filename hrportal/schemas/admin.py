"""
Admin Schemas

Employee administration, projects and assignments, time entry
oversight and leave configuration.

Update schemas rely on model_dump(exclude_unset=True): a field that
is absent is left alone, a field sent as null clears the column.
"""
from pydantic import EmailStr, Field
from typing import List, Literal, Optional
from datetime import date, datetime
import datetime as dt
from hrportal.models.user import UserRole
from hrportal.schemas.base import CamelModel, DepartmentSummary, UserSummary, EmployeeSummary, ManagerSummary
from hrportal.schemas.auth import EmploymentType
from hrportal.schemas.leave import LeaveBalanceResponse, LeaveTypeResponse, HolidayResponse
from hrportal.schemas.timesheet import TimeEntryDetail, TimeEntryStatus

ProjectStatus = Literal["active", "completed", "on-hold"]


class ProjectBrief(CamelModel):
    id: int
    name: str
    client: Optional[str] = None
    status: str


# Employees

class DepartmentListResponse(CamelModel):
    departments: List[DepartmentSummary]


class ManagerListResponse(CamelModel):
    managers: List[ManagerSummary]


class EmployeeResponse(CamelModel):
    id: int
    employee_id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    profile_photo_url: Optional[str] = None
    role: UserRole
    department: Optional[DepartmentSummary] = None
    designation: Optional[str] = None
    manager: Optional[UserSummary] = None
    employment_type: str
    join_date: date
    end_date: Optional[date] = None
    status: str
    created_at: datetime


class EmployeeListResponse(CamelModel):
    employees: List[EmployeeResponse]


class EmployeeProjectAssignment(CamelModel):
    id: int
    project_id: int
    role: Optional[str] = None
    assigned_at: datetime
    project: ProjectBrief


class EmployeeDetail(EmployeeResponse):
    personal_email: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    skills: Optional[str] = None
    certifications: Optional[str] = None
    project_assignments: List[EmployeeProjectAssignment] = []
    leave_balances: List[LeaveBalanceResponse] = []


class EmployeeDetailResponse(CamelModel):
    employee: EmployeeDetail


class EmployeeByIdRequest(CamelModel):
    employee_id: int


class UserIdRequest(CamelModel):
    user_id: int


class OnboardEmployeeRequest(CamelModel):
    employee_id: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = None
    department_id: Optional[int] = None
    designation: Optional[str] = None
    manager_id: Optional[int] = None
    role: UserRole = UserRole.EMPLOYEE
    employment_type: EmploymentType = "full-time"
    join_date: date


class OnboardEmployeeResponse(CamelModel):
    success: bool = True
    user_id: int
    employee_id: str


class EmployeeUpdate(CamelModel):
    user_id: int
    employee_id: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone: Optional[str] = None
    personal_email: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    department_id: Optional[int] = None
    designation: Optional[str] = None
    manager_id: Optional[int] = None
    role: Optional[UserRole] = None
    employment_type: Optional[EmploymentType] = None
    skills: Optional[str] = None
    certifications: Optional[str] = None


class EmployeeStatusUpdate(CamelModel):
    user_id: int
    status: Literal["active", "inactive"]


class EmployeeMutationResponse(CamelModel):
    success: bool = True
    employee: EmployeeResponse


# Projects

class ProjectCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    client: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget_hours: Optional[float] = Field(None, gt=0)
    status: ProjectStatus = "active"
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None
    sow_file_url: Optional[str] = None
    aws_account_number: Optional[str] = None


class ProjectCreateResponse(CamelModel):
    success: bool = True
    project_id: int
    project_name: str


class ProjectUpdate(CamelModel):
    project_id: int
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    client: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget_hours: Optional[float] = Field(None, gt=0)
    status: Optional[ProjectStatus] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None
    sow_file_url: Optional[str] = None
    aws_account_number: Optional[str] = None


class ProjectIdRequest(CamelModel):
    project_id: int


class AssignProjectRequest(CamelModel):
    user_id: int
    project_id: int
    role: Optional[str] = None


class AssignProjectResponse(CamelModel):
    success: bool = True
    assignment_id: int


class ProjectAssignmentResponse(CamelModel):
    id: int
    user_id: int
    role: Optional[str] = None
    assigned_at: datetime
    user: EmployeeSummary


class ProjectCounts(CamelModel):
    assignments: int
    time_entries: int


class ProjectResponse(CamelModel):
    id: int
    name: str
    client: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget_hours: Optional[float] = None
    status: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    sow_file_url: Optional[str] = None
    aws_account_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class ProjectDetail(ProjectResponse):
    assignments: List[ProjectAssignmentResponse] = []
    counts: ProjectCounts


class ProjectListResponse(CamelModel):
    projects: List[ProjectDetail]


class ProjectMutationResponse(CamelModel):
    success: bool = True
    project: ProjectResponse


# Time entries

class AdminTimeEntryFilter(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    user_id: Optional[int] = None
    project_id: Optional[int] = None
    status: Optional[TimeEntryStatus] = None


class AdminTimeEntryListResponse(CamelModel):
    time_entries: List[TimeEntryDetail]


class AdminTimeEntryUpdate(CamelModel):
    time_entry_id: int
    date: Optional[dt.date] = None
    project_id: Optional[int] = None
    task: Optional[str] = Field(None, min_length=1, max_length=255)
    hours: Optional[float] = Field(None, ge=0, le=24)
    description: Optional[str] = None
    is_billable: Optional[bool] = None
    status: Optional[TimeEntryStatus] = None
    review_comment: Optional[str] = None


class AdminTimeEntryMutationResponse(CamelModel):
    success: bool = True
    time_entry: TimeEntryDetail


class BulkReviewRequest(CamelModel):
    time_entry_ids: List[int] = Field(..., min_length=1)
    status: Literal["approved", "rejected"]
    review_comment: Optional[str] = None


class BulkReviewResponse(CamelModel):
    success: bool = True
    updated_count: int


class ExportFilter(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    user_id: Optional[int] = None
    project_id: Optional[int] = None


class ExportResponse(CamelModel):
    csv: str
    filename: str
    count: int


# Leave configuration

class LeaveTypeCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    is_paid: bool = True
    requires_approval: bool = True
    requires_attachment: bool = False
    default_allocated: float = Field(..., ge=0)


class LeaveTypeUpdate(CamelModel):
    leave_type_id: int
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_paid: Optional[bool] = None
    requires_approval: Optional[bool] = None
    requires_attachment: Optional[bool] = None
    default_allocated: Optional[float] = Field(None, ge=0)


class LeaveTypeIdRequest(CamelModel):
    leave_type_id: int


class LeaveTypeMutationResponse(CamelModel):
    success: bool = True
    leave_type: LeaveTypeResponse


class LeaveTypeCounts(CamelModel):
    leave_balances: int
    leave_requests: int


class LeaveTypeUsage(LeaveTypeResponse):
    counts: LeaveTypeCounts


class LeaveTypeUsageListResponse(CamelModel):
    leave_types: List[LeaveTypeUsage]


class HolidayCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    is_optional: bool = False


class HolidayUpdate(CamelModel):
    holiday_id: int
    name: str = Field(..., min_length=1, max_length=255)
    date: dt.date
    is_optional: bool


class HolidayIdRequest(CamelModel):
    holiday_id: int


class HolidayMutationResponse(CamelModel):
    success: bool = True
    holiday: HolidayResponse


class HolidayYearListResponse(CamelModel):
    holidays: List[HolidayResponse]
    year: int

