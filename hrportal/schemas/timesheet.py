"""
Timesheet Schemas
"""
from pydantic import Field
from typing import List, Literal, Optional
from datetime import date, datetime
import datetime as dt
from hrportal.schemas.base import CamelModel, ProjectSummary, TaskSummary, EmployeeSummary, UserSummary

TimeEntryStatus = Literal["draft", "submitted", "approved", "rejected"]
EditableStatus = Literal["draft", "submitted"]
ReviewStatus = Literal["approved", "rejected"]


class TimeEntryCreate(CamelModel):
    date: dt.date
    project_id: int
    task_id: Optional[int] = None
    task: str = Field(..., min_length=1, max_length=255)
    hours: float = Field(..., ge=0, le=24)
    description: Optional[str] = None
    is_billable: bool = True
    status: EditableStatus = "draft"


class TimeEntryFilter(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[TimeEntryStatus] = None


class TimeEntryUpdate(CamelModel):
    time_entry_id: int
    date: Optional[dt.date] = None
    project_id: Optional[int] = None
    task_id: Optional[int] = None
    task: Optional[str] = Field(None, min_length=1, max_length=255)
    hours: Optional[float] = Field(None, ge=0, le=24)
    description: Optional[str] = None
    is_billable: Optional[bool] = None
    status: Optional[EditableStatus] = None


class TimeEntryIdRequest(CamelModel):
    time_entry_id: int


class TimeEntryResponse(CamelModel):
    id: int
    user_id: int
    date: dt.date
    project_id: int
    task_id: Optional[int] = None
    task: str
    hours: float
    description: Optional[str] = None
    is_billable: bool
    status: str
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    review_comment: Optional[str] = None
    created_at: datetime
    project: ProjectSummary
    linked_task: Optional[TaskSummary] = None


class TimeEntryDetail(TimeEntryResponse):
    """Entry with the employee and reviewer, for approval and admin views."""
    user: EmployeeSummary
    reviewer: Optional[UserSummary] = None


class TimeEntryListResponse(CamelModel):
    time_entries: List[TimeEntryResponse]


class TimeEntryMutationResponse(CamelModel):
    success: bool = True
    time_entry: TimeEntryResponse


class AssignedProject(ProjectSummary):
    description: Optional[str] = None
    status: str


class AssignedProjectListResponse(CamelModel):
    projects: List[AssignedProject]
