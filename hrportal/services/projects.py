"""
Project Lookups

Shared by the admin project catalogue and the project management
board.
"""
from sqlalchemy import func
from sqlalchemy.orm import Session
from hrportal.models.project import Project
from hrportal.models.timesheet import TimeEntry
from hrportal.schemas.admin import ProjectResponse, ProjectDetail, ProjectCounts, ProjectAssignmentResponse
from hrportal.core.exceptions import NotFoundError


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundError("Project")
    return project


def time_entry_count(db: Session, project_id: int) -> int:
    return db.query(func.count(TimeEntry.id)).filter(TimeEntry.project_id == project_id).scalar()


def project_detail(db: Session, project: Project) -> ProjectDetail:
    """Project with its assignments and usage counts."""
    assignments = sorted(project.assignments, key=lambda a: a.assigned_at)
    return ProjectDetail(
        **ProjectResponse.model_validate(project).model_dump(),
        assignments=[ProjectAssignmentResponse.model_validate(a) for a in assignments],
        counts=ProjectCounts(
            assignments=len(assignments),
            time_entries=time_entry_count(db, project.id),
        ),
    )
