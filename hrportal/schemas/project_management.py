"""
Project Management Schemas

Sprints, tasks and task comments.
"""
from pydantic import Field
from typing import List, Literal, Optional
from datetime import date, datetime
from hrportal.schemas.base import CamelModel, EmployeeSummary, SprintSummary, UserSummary

SprintStatus = Literal["planned", "active", "completed"]
TaskStatus = Literal["todo", "in-progress", "done"]
TaskPriority = Literal["low", "medium", "high"]


class SprintCreate(CamelModel):
    project_id: int
    name: str = Field(..., min_length=1, max_length=255)
    goal: Optional[str] = None
    start_date: date
    end_date: date
    status: SprintStatus = "planned"


class SprintUpdate(CamelModel):
    sprint_id: int
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    goal: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    status: Optional[SprintStatus] = None


class SprintCreateResponse(CamelModel):
    success: bool = True
    sprint_id: int


class SprintCounts(CamelModel):
    tasks: int


class SprintResponse(CamelModel):
    id: int
    project_id: int
    name: str
    goal: Optional[str] = None
    start_date: date
    end_date: date
    status: str
    created_at: datetime
    counts: SprintCounts


class SprintListResponse(CamelModel):
    sprints: List[SprintResponse]


class ProjectTasksRequest(CamelModel):
    project_id: int
    sprint_id: Optional[int] = None


class TaskCreate(CamelModel):
    project_id: int
    sprint_id: Optional[int] = None
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    status: TaskStatus = "todo"
    priority: TaskPriority = "medium"
    assigned_to_id: Optional[int] = None
    estimated_hours: Optional[float] = Field(None, ge=0)


class TaskUpdate(CamelModel):
    task_id: int
    sprint_id: Optional[int] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to_id: Optional[int] = None
    estimated_hours: Optional[float] = Field(None, ge=0)


class TaskCreateResponse(CamelModel):
    success: bool = True
    task_id: int


class TaskIdRequest(CamelModel):
    task_id: int


class TaskResponse(CamelModel):
    id: int
    project_id: int
    sprint_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    assigned_to_id: Optional[int] = None
    estimated_hours: Optional[float] = None
    created_at: datetime
    updated_at: datetime
    assigned_to: Optional[EmployeeSummary] = None
    sprint: Optional[SprintSummary] = None


class TaskListResponse(CamelModel):
    tasks: List[TaskResponse]


class TaskCommentCreate(CamelModel):
    task_id: int
    content: str = Field(..., min_length=1)


class TaskCommentResponse(CamelModel):
    id: int
    task_id: int
    content: str
    created_at: datetime
    user: UserSummary


class TaskCommentMutationResponse(CamelModel):
    success: bool = True
    comment: TaskCommentResponse


class TaskCommentListResponse(CamelModel):
    comments: List[TaskCommentResponse]
