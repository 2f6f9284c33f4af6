"""
Admin Time Entry Endpoints

Oversight of every employee's time: search, corrections, bulk
review and the approved-hours CSV export.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.project import Project
from hrportal.models.timesheet import TimeEntry
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.timesheet import TimeEntryIdRequest
from hrportal.schemas.admin import (
    AdminTimeEntryFilter,
    AdminTimeEntryListResponse,
    AdminTimeEntryUpdate,
    AdminTimeEntryMutationResponse,
    BulkReviewRequest,
    BulkReviewResponse,
    ExportFilter,
    ExportResponse,
)
from hrportal.api.deps import require_admin
from hrportal.core.exceptions import NotFoundError
from hrportal.services.notifications import create_notification, plural, summarize_names
from hrportal.services.reporting import export_csv, export_filename
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])

# Columns that can't be cleared with null
REQUIRED_FIELDS = ("date", "project_id", "task", "hours", "is_billable", "status")


def get_entry_or_404(db: Session, time_entry_id: int) -> TimeEntry:
    entry = db.query(TimeEntry).filter(TimeEntry.id == time_entry_id).first()
    if not entry:
        raise NotFoundError("Time entry")
    return entry


@router.post("/getAllTimeEntries", response_model=AdminTimeEntryListResponse)
async def get_all_time_entries(
    filters: Optional[AdminTimeEntryFilter] = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Every employee's entries, newest date first, optionally filtered."""
    filters = filters or AdminTimeEntryFilter()
    query = db.query(TimeEntry)

    if filters.start_date:
        query = query.filter(TimeEntry.date >= filters.start_date)
    if filters.end_date:
        query = query.filter(TimeEntry.date <= filters.end_date)
    if filters.user_id:
        query = query.filter(TimeEntry.user_id == filters.user_id)
    if filters.project_id:
        query = query.filter(TimeEntry.project_id == filters.project_id)
    if filters.status:
        query = query.filter(TimeEntry.status == filters.status)

    entries = query.order_by(TimeEntry.date.desc(), TimeEntry.id.desc()).all()

    return {"time_entries": entries}


@router.post("/adminUpdateTimeEntry", response_model=AdminTimeEntryMutationResponse)
async def admin_update_time_entry(
    entry_update: AdminTimeEntryUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Correct any entry regardless of its status.

    Moving an entry to submitted stamps submitted_at if it was never
    submitted. Moving it to approved or rejected records the admin as
    reviewer; moving it back to draft or submitted clears the reviewer.
    """
    entry = get_entry_or_404(db, entry_update.time_entry_id)

    update_data = entry_update.model_dump(exclude_unset=True, exclude={"time_entry_id"})
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    if "project_id" in update_data:
        if not db.query(Project).filter(Project.id == update_data["project_id"]).first():
            raise NotFoundError("Project")
        if update_data["project_id"] != entry.project_id:
            # Task links are project scoped
            entry.task_id = None

    for field, value in update_data.items():
        setattr(entry, field, value)

    status = update_data.get("status")
    if status == "submitted" and not entry.submitted_at:
        entry.submitted_at = datetime.utcnow()
    if status in ("approved", "rejected"):
        entry.reviewed_by = current_user.id
        entry.reviewed_at = datetime.utcnow()
    elif status in ("draft", "submitted"):
        # Back in the employee's hands; the old review no longer applies
        entry.reviewed_by = None
        entry.reviewed_at = None

    db.commit()
    db.refresh(entry)

    logger.info(f"Time entry {entry.id} updated by admin {current_user.id}, fields={list(update_data.keys())}")

    return {"time_entry": entry}


@router.post("/adminDeleteTimeEntry", response_model=SuccessResponse)
async def admin_delete_time_entry(
    request: TimeEntryIdRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete any entry, including approved ones."""
    entry = get_entry_or_404(db, request.time_entry_id)

    db.delete(entry)
    db.commit()

    logger.info(f"Time entry {request.time_entry_id} deleted by admin {current_user.id}")

    return {"success": True}


@router.post("/bulkReviewTimeEntries", response_model=BulkReviewResponse)
async def bulk_review_time_entries(
    review: BulkReviewRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Approve or reject many entries at once, whatever their status.

    Each affected employee gets a single notification summarizing
    their entries.
    """
    entries = db.query(TimeEntry).filter(
        TimeEntry.id.in_(review.time_entry_ids)
    ).order_by(TimeEntry.id).all()

    if not entries:
        raise NotFoundError(detail="No time entries found with the provided IDs")

    now = datetime.utcnow()
    by_user = {}
    for entry in entries:
        entry.status = review.status
        entry.reviewed_by = current_user.id
        entry.reviewed_at = now
        entry.review_comment = review.review_comment
        by_user.setdefault(entry.user_id, []).append(entry)

    comment = f" Comment: {review.review_comment}" if review.review_comment else ""
    for user_id, user_entries in by_user.items():
        count = len(user_entries)
        project_names = []
        for entry in user_entries:
            if entry.project.name not in project_names:
                project_names.append(entry.project.name)

        create_notification(
            db,
            user_id,
            f"{count} {plural(count, 'Timesheet')} {review.status.capitalize()}",
            f"{count} of your timesheet entries for {summarize_names(project_names)} "
            f"{'has' if count == 1 else 'have'} been {review.status}.{comment}",
        )

    db.commit()

    logger.info(f"Bulk review: {len(entries)} time entries {review.status} by admin {current_user.id}")

    return {"updated_count": len(entries)}


@router.post("/exportApprovedTimeEntries", response_model=ExportResponse)
async def export_approved_time_entries(
    filters: Optional[ExportFilter] = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Approved entries as CSV, ordered by date then employee ID.

    The CSV is returned inline; the browser saves it under `filename`.
    """
    filters = filters or ExportFilter()
    query = db.query(TimeEntry).join(TimeEntry.user).filter(TimeEntry.status == "approved")

    if filters.start_date:
        query = query.filter(TimeEntry.date >= filters.start_date)
    if filters.end_date:
        query = query.filter(TimeEntry.date <= filters.end_date)
    if filters.user_id:
        query = query.filter(TimeEntry.user_id == filters.user_id)
    if filters.project_id:
        query = query.filter(TimeEntry.project_id == filters.project_id)

    entries = query.order_by(TimeEntry.date.asc(), User.employee_id.asc(), TimeEntry.id.asc()).all()

    logger.info(f"Exported {len(entries)} approved time entries for admin {current_user.id}")

    return {
        "csv": export_csv(entries),
        "filename": export_filename(),
        "count": len(entries),
    }
