"""
Admin Project Endpoints

Project catalogue and employee assignments.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import time

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.project import Project, ProjectAssignment
from hrportal.models.project_management import Sprint, Task, TaskComment
from hrportal.schemas.base import SuccessResponse, UploadUrlRequest, UploadUrlResponse
from hrportal.schemas.admin import (
    ProjectCreate,
    ProjectCreateResponse,
    ProjectUpdate,
    ProjectIdRequest,
    ProjectMutationResponse,
    ProjectListResponse,
    AssignProjectRequest,
    AssignProjectResponse,
)
from hrportal.api.deps import require_admin
from hrportal.core.exceptions import NotFoundError, ConflictError, InvalidInputError
from hrportal.services.projects import get_project_or_404, time_entry_count, project_detail
from hrportal.services.storage import StorageClient, get_storage
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])

# Columns that can't be cleared with null
REQUIRED_FIELDS = ("name", "status")


@router.post("/createProject", response_model=ProjectCreateResponse)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    project = Project(**project_data.model_dump())
    db.add(project)
    db.commit()
    db.refresh(project)

    logger.info(f"Project created: {project.id} ({project.name}) by admin {current_user.id}")

    return {"project_id": project.id, "project_name": project.name}


@router.post("/getProjectSowUploadUrl", response_model=UploadUrlResponse)
async def get_project_sow_upload_url(
    request: UploadUrlRequest,
    current_user: User = Depends(require_admin),
    storage: StorageClient = Depends(get_storage)
):
    """Pre-signed PUT URL for a statement of work in the documents bucket."""
    bucket = storage.settings.BUCKET_DOCUMENTS
    object_name = f"sow/{int(time.time() * 1000)}-{request.file_name}"

    return {
        "upload_url": storage.upload_url(bucket, object_name),
        "object_name": object_name,
    }


@router.post("/assignProjectToEmployee", response_model=AssignProjectResponse)
async def assign_project_to_employee(
    request: AssignProjectRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Assign an employee to a project.

    Employees can only log time against projects they are assigned to.
    """
    if not db.query(User).filter(User.id == request.user_id).first():
        raise NotFoundError("Employee")
    get_project_or_404(db, request.project_id)

    existing = db.query(ProjectAssignment).filter(
        ProjectAssignment.user_id == request.user_id,
        ProjectAssignment.project_id == request.project_id
    ).first()
    if existing:
        raise ConflictError("Employee is already assigned to this project")

    assignment = ProjectAssignment(
        user_id=request.user_id,
        project_id=request.project_id,
        role=request.role,
    )
    db.add(assignment)
    db.commit()
    db.refresh(assignment)

    logger.info(f"User {request.user_id} assigned to project {request.project_id} by admin {current_user.id}")

    return {"assignment_id": assignment.id}


@router.post("/getAllProjects", response_model=ProjectListResponse)
async def get_all_projects(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Every project, newest first, with assignments and counts.

    PERFORMANCE NOTE: counts are queried per project. Fine for the
    size of a project catalogue.
    """
    projects = db.query(Project).order_by(Project.created_at.desc(), Project.id.desc()).all()
    return {"projects": [project_detail(db, p) for p in projects]}


@router.post("/updateProject", response_model=ProjectMutationResponse)
async def update_project(
    project_update: ProjectUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    project = get_project_or_404(db, project_update.project_id)

    update_data = project_update.model_dump(exclude_unset=True, exclude={"project_id"})
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    for field, value in update_data.items():
        setattr(project, field, value)

    db.commit()
    db.refresh(project)

    logger.info(f"Project updated: {project.id} by admin {current_user.id}")

    return {"project": project}


@router.post("/deleteProject", response_model=SuccessResponse)
async def delete_project(
    request: ProjectIdRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Delete a project that has no logged time.

    Assignments, sprints, tasks and task comments go with it.
    """
    project = get_project_or_404(db, request.project_id)

    entries = time_entry_count(db, project.id)
    if entries:
        raise InvalidInputError(
            f"Cannot delete project with {entries} time entries. "
            f"Set its status to completed instead."
        )

    task_ids = [t.id for t in db.query(Task.id).filter(Task.project_id == project.id)]
    if task_ids:
        db.query(TaskComment).filter(TaskComment.task_id.in_(task_ids)).delete(synchronize_session=False)
        db.query(Task).filter(Task.id.in_(task_ids)).delete(synchronize_session=False)
    db.query(Sprint).filter(Sprint.project_id == project.id).delete(synchronize_session=False)
    db.query(ProjectAssignment).filter(ProjectAssignment.project_id == project.id).delete(
        synchronize_session=False
    )

    db.query(Project).filter(Project.id == project.id).delete(synchronize_session=False)
    db.commit()

    logger.info(f"Project deleted: {request.project_id} by admin {current_user.id}")

    return {"success": True}
