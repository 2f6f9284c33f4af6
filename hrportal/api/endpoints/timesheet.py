"""
Timesheet Endpoints

Employees log hours against projects they are assigned to.

Lifecycle:
- draft: editable and deletable by the owner
- submitted: waiting for the manager; locked
- approved / rejected: reviewed; rejected entries can be edited again
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.project import Project, ProjectAssignment
from hrportal.models.project_management import Task
from hrportal.models.timesheet import TimeEntry
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.timesheet import (
    TimeEntryCreate,
    TimeEntryFilter,
    TimeEntryUpdate,
    TimeEntryIdRequest,
    TimeEntryListResponse,
    TimeEntryMutationResponse,
    AssignedProjectListResponse,
)
from hrportal.api.deps import get_current_user
from hrportal.core.exceptions import NotFoundError, PermissionDenied, InvalidInputError
from hrportal.services.notifications import create_notification
from hrportal.utils.formatting import format_us_date, format_hours
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["timesheet"])

EDITABLE_STATUSES = ("draft", "rejected")


def get_assigned_project(db: Session, user: User, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project")

    assignment = db.query(ProjectAssignment).filter(
        ProjectAssignment.user_id == user.id,
        ProjectAssignment.project_id == project_id
    ).first()
    if not assignment:
        raise PermissionDenied("You are not assigned to this project")

    return project


def check_task_link(db: Session, task_id: Optional[int], project_id: int) -> None:
    """A linked task must exist and belong to the entry's project."""
    if task_id is None:
        return
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task")
    if task.project_id != project_id:
        raise InvalidInputError("Task does not belong to this project")


def notify_manager_of_submission(db: Session, user: User, project: Project, entry: TimeEntry) -> None:
    if not user.manager_id:
        return
    create_notification(
        db,
        user.manager_id,
        "New Timesheet Submitted",
        f"{user.full_name} has submitted a timesheet for {project.name} "
        f"({format_hours(entry.hours)}h on {format_us_date(entry.date)}) for your review.",
    )


@router.post("/createTimeEntry", response_model=TimeEntryMutationResponse)
async def create_time_entry(
    entry_data: TimeEntryCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Log hours on an assigned project.

    Creating with status=submitted notifies the caller's manager.
    """
    project = get_assigned_project(db, current_user, entry_data.project_id)
    check_task_link(db, entry_data.task_id, project.id)

    entry = TimeEntry(
        user_id=current_user.id,
        **entry_data.model_dump(),
    )
    if entry.status == "submitted":
        entry.submitted_at = datetime.utcnow()

    db.add(entry)
    db.flush()

    if entry.status == "submitted":
        notify_manager_of_submission(db, current_user, project, entry)

    db.commit()
    db.refresh(entry)

    logger.info(f"Time entry created: {entry.id} by user {current_user.id} ({entry.status})")

    return {"time_entry": entry}


@router.post("/getTimeEntries", response_model=TimeEntryListResponse)
async def get_time_entries(
    filters: Optional[TimeEntryFilter] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    The caller's entries, newest date first.

    NOTE: The date range only applies when both bounds are given.
    """
    filters = filters or TimeEntryFilter()

    query = db.query(TimeEntry).filter(TimeEntry.user_id == current_user.id)

    if filters.start_date and filters.end_date:
        query = query.filter(
            TimeEntry.date >= filters.start_date,
            TimeEntry.date <= filters.end_date
        )

    if filters.status:
        query = query.filter(TimeEntry.status == filters.status)

    entries = query.order_by(TimeEntry.date.desc(), TimeEntry.id.desc()).all()

    return {"time_entries": entries}


@router.post("/updateTimeEntry", response_model=TimeEntryMutationResponse)
async def update_time_entry(
    entry_update: TimeEntryUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Edit an own draft or rejected entry.

    Resubmitting stamps submitted_at and notifies the manager again.
    """
    entry = db.query(TimeEntry).filter(TimeEntry.id == entry_update.time_entry_id).first()

    if not entry:
        raise NotFoundError("Time entry")

    if entry.user_id != current_user.id:
        raise PermissionDenied("You can only update your own time entries")

    if entry.status not in EDITABLE_STATUSES:
        raise InvalidInputError("Can only update draft or rejected entries")

    update_data = entry_update.model_dump(exclude_unset=True, exclude={"time_entry_id"})

    project_id = update_data.get("project_id") or entry.project_id
    project = entry.project
    if project_id != entry.project_id:
        project = get_assigned_project(db, current_user, project_id)
    if "task_id" in update_data or project_id != entry.project_id:
        check_task_link(db, update_data.get("task_id", entry.task_id), project_id)

    for field, value in update_data.items():
        if value is None and field not in ("task_id", "description"):
            continue
        setattr(entry, field, value)

    if update_data.get("status") == "submitted":
        entry.submitted_at = datetime.utcnow()
        notify_manager_of_submission(db, current_user, project, entry)

    db.commit()
    db.refresh(entry)

    logger.info(f"Time entry updated: {entry.id} by user {current_user.id}")

    return {"time_entry": entry}


@router.post("/deleteTimeEntry", response_model=SuccessResponse)
async def delete_time_entry(
    request: TimeEntryIdRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete an own draft entry."""
    entry = db.query(TimeEntry).filter(TimeEntry.id == request.time_entry_id).first()

    if not entry:
        raise NotFoundError("Time entry")

    if entry.user_id != current_user.id:
        raise PermissionDenied("You can only delete your own time entries")

    if entry.status != "draft":
        raise InvalidInputError("Can only delete draft entries")

    db.delete(entry)
    db.commit()

    logger.info(f"Time entry deleted: {request.time_entry_id} by user {current_user.id}")

    return {"success": True}


@router.post("/getProjects", response_model=AssignedProjectListResponse)
async def get_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Active projects the caller can log time against."""
    projects = db.query(Project).join(
        ProjectAssignment, ProjectAssignment.project_id == Project.id
    ).filter(
        ProjectAssignment.user_id == current_user.id,
        Project.status == "active"
    ).order_by(Project.name).all()

    return {"projects": projects}
