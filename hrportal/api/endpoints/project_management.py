"""
Project Management Endpoints

Sprints, tasks and task comments on top of the project catalogue.

RBAC:
- Sprints: managers create and edit, anyone can list
- Tasks: anyone can create and edit, managers delete
- getProjectTasks: employees only see projects they are assigned to
"""
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional

from hrportal.database import get_db
from hrportal.models.user import User, UserRole
from hrportal.models.project import Project, ProjectAssignment
from hrportal.models.timesheet import TimeEntry
from hrportal.models.project_management import Sprint, Task, TaskComment
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.admin import ProjectIdRequest, ProjectListResponse
from hrportal.schemas.project_management import (
    SprintCreate,
    SprintUpdate,
    SprintCreateResponse,
    SprintCounts,
    SprintResponse,
    SprintListResponse,
    ProjectTasksRequest,
    TaskCreate,
    TaskUpdate,
    TaskCreateResponse,
    TaskIdRequest,
    TaskListResponse,
    TaskCommentCreate,
    TaskCommentMutationResponse,
    TaskCommentListResponse,
)
from hrportal.api.deps import get_current_user, require_manager
from hrportal.core.exceptions import NotFoundError, PermissionDenied, InvalidInputError
from hrportal.services.projects import get_project_or_404, project_detail
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["project-management"])

SPRINT_REQUIRED_FIELDS = ("name", "start_date", "end_date", "status")
TASK_REQUIRED_FIELDS = ("title", "status", "priority")


def get_sprint_or_404(db: Session, sprint_id: int) -> Sprint:
    sprint = db.query(Sprint).filter(Sprint.id == sprint_id).first()
    if not sprint:
        raise NotFoundError("Sprint")
    return sprint


def get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFoundError("Task")
    return task


def check_task_references(db: Session, project_id: int, sprint_id: Optional[int],
                          assigned_to_id: Optional[int]) -> None:
    """Sprint must be in the task's project; assignee must exist."""
    if sprint_id is not None:
        sprint = get_sprint_or_404(db, sprint_id)
        if sprint.project_id != project_id:
            raise InvalidInputError("Sprint does not belong to this project")
    if assigned_to_id is not None:
        if not db.query(User).filter(User.id == assigned_to_id).first():
            raise NotFoundError("Assignee")


def drop_nulls(update_data: dict, required: tuple) -> dict:
    for field in required:
        if field in update_data and update_data[field] is None:
            del update_data[field]
    return update_data


# Sprints

@router.post("/createSprint", response_model=SprintCreateResponse)
async def create_sprint(
    sprint_data: SprintCreate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    get_project_or_404(db, sprint_data.project_id)

    if sprint_data.end_date < sprint_data.start_date:
        raise InvalidInputError("End date must be on or after start date")

    sprint = Sprint(**sprint_data.model_dump())
    db.add(sprint)
    db.commit()
    db.refresh(sprint)

    logger.info(f"Sprint created: {sprint.id} in project {sprint.project_id} by user {current_user.id}")

    return {"sprint_id": sprint.id}


@router.post("/updateSprint", response_model=SuccessResponse)
async def update_sprint(
    sprint_update: SprintUpdate,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    sprint = get_sprint_or_404(db, sprint_update.sprint_id)

    update_data = drop_nulls(
        sprint_update.model_dump(exclude_unset=True, exclude={"sprint_id"}),
        SPRINT_REQUIRED_FIELDS,
    )

    start_date = update_data.get("start_date", sprint.start_date)
    end_date = update_data.get("end_date", sprint.end_date)
    if end_date < start_date:
        raise InvalidInputError("End date must be on or after start date")

    for field, value in update_data.items():
        setattr(sprint, field, value)

    db.commit()

    logger.info(f"Sprint updated: {sprint.id} by user {current_user.id}")

    return {"success": True}


@router.post("/getSprints", response_model=SprintListResponse)
async def get_sprints(
    request: ProjectIdRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """A project's sprints, latest start first, with task counts."""
    sprints = db.query(Sprint).filter(
        Sprint.project_id == request.project_id
    ).order_by(Sprint.start_date.desc(), Sprint.id.desc()).all()

    task_counts = dict(
        db.query(Task.sprint_id, func.count(Task.id)).filter(
            Task.project_id == request.project_id,
            Task.sprint_id.isnot(None)
        ).group_by(Task.sprint_id).all()
    )

    return {
        "sprints": [
            SprintResponse(
                id=s.id,
                project_id=s.project_id,
                name=s.name,
                goal=s.goal,
                start_date=s.start_date,
                end_date=s.end_date,
                status=s.status,
                created_at=s.created_at,
                counts=SprintCounts(tasks=task_counts.get(s.id, 0)),
            )
            for s in sprints
        ]
    }


# Tasks

@router.post("/createTask", response_model=TaskCreateResponse)
async def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    get_project_or_404(db, task_data.project_id)
    check_task_references(db, task_data.project_id, task_data.sprint_id, task_data.assigned_to_id)

    task = Task(**task_data.model_dump())
    db.add(task)
    db.commit()
    db.refresh(task)

    logger.info(f"Task created: {task.id} in project {task.project_id} by user {current_user.id}")

    return {"task_id": task.id}


@router.post("/updateTask", response_model=SuccessResponse)
async def update_task(
    task_update: TaskUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit a task. Sending sprintId or assignedToId as null clears it."""
    task = get_task_or_404(db, task_update.task_id)

    update_data = drop_nulls(
        task_update.model_dump(exclude_unset=True, exclude={"task_id"}),
        TASK_REQUIRED_FIELDS,
    )
    check_task_references(db, task.project_id, update_data.get("sprint_id"), update_data.get("assigned_to_id"))

    for field, value in update_data.items():
        setattr(task, field, value)

    db.commit()

    logger.info(f"Task updated: {task.id} by user {current_user.id}")

    return {"success": True}


@router.post("/getTasks", response_model=TaskListResponse)
async def get_tasks(
    request: ProjectTasksRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """A project's tasks, newest first, optionally for one sprint."""
    query = db.query(Task).filter(Task.project_id == request.project_id)

    if request.sprint_id is not None:
        query = query.filter(Task.sprint_id == request.sprint_id)

    tasks = query.order_by(Task.created_at.desc(), Task.id.desc()).all()

    return {"tasks": tasks}


@router.post("/getProjectTasks", response_model=TaskListResponse)
async def get_project_tasks(
    request: ProjectIdRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Tasks of a project, for linking time entries.

    Employees must be assigned to the project. Managers and admins
    can see any project.
    """
    get_project_or_404(db, request.project_id)

    if not current_user.has_permission(UserRole.MANAGER):
        assignment = db.query(ProjectAssignment).filter(
            ProjectAssignment.user_id == current_user.id,
            ProjectAssignment.project_id == request.project_id
        ).first()
        if not assignment:
            raise PermissionDenied("You are not assigned to this project")

    tasks = db.query(Task).filter(
        Task.project_id == request.project_id
    ).order_by(Task.created_at.desc(), Task.id.desc()).all()

    return {"tasks": tasks}


@router.post("/deleteTask", response_model=SuccessResponse)
async def delete_task(
    request: TaskIdRequest,
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """
    Delete a task and its comments.

    Time entries linked to it keep their free-text task label and
    lose the link.
    """
    task = get_task_or_404(db, request.task_id)

    db.query(TimeEntry).filter(TimeEntry.task_id == task.id).update(
        {TimeEntry.task_id: None}, synchronize_session=False
    )
    db.query(TaskComment).filter(TaskComment.task_id == task.id).delete(synchronize_session=False)
    db.query(Task).filter(Task.id == task.id).delete(synchronize_session=False)
    db.commit()

    logger.info(f"Task deleted: {request.task_id} by user {current_user.id}")

    return {"success": True}


@router.post("/getMyProjects", response_model=ProjectListResponse)
async def get_my_projects(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Every project for managers and admins; assigned ones for employees."""
    query = db.query(Project)

    if not current_user.has_permission(UserRole.MANAGER):
        query = query.join(ProjectAssignment).filter(ProjectAssignment.user_id == current_user.id)

    projects = query.order_by(Project.name, Project.id).all()

    return {"projects": [project_detail(db, p) for p in projects]}


# Comments

@router.post("/createTaskComment", response_model=TaskCommentMutationResponse)
async def create_task_comment(
    comment_data: TaskCommentCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    get_task_or_404(db, comment_data.task_id)

    comment = TaskComment(
        task_id=comment_data.task_id,
        user_id=current_user.id,
        content=comment_data.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    return {"comment": comment}


@router.post("/getTaskComments", response_model=TaskCommentListResponse)
async def get_task_comments(
    request: TaskIdRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Comments on a task, oldest first."""
    get_task_or_404(db, request.task_id)

    comments = db.query(TaskComment).filter(
        TaskComment.task_id == request.task_id
    ).order_by(TaskComment.created_at.asc(), TaskComment.id.asc()).all()

    return {"comments": comments}
