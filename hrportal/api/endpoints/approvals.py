"""
Approval Endpoints

Manager review queues for submitted timesheets and pending leave.

RBAC:
- Queues: managers see their direct reports, admins see everyone
- Review: the employee's manager or any admin
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime

from hrportal.database import get_db
from hrportal.models.user import User, UserRole
from hrportal.models.timesheet import TimeEntry
from hrportal.models.leave import LeaveRequest
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.approval import (
    PendingTimesheetListResponse,
    PendingLeaveRequestListResponse,
    TimesheetReview,
    LeaveRequestReview,
    TimesheetReviewResponse,
)
from hrportal.api.deps import get_current_user, require_manager
from hrportal.core.exceptions import NotFoundError, InvalidInputError
from hrportal.core.permissions import require_reviewer
from hrportal.services.leave import leave_days, get_balance, debit_balance
from hrportal.services.notifications import create_notification
from hrportal.utils.formatting import format_us_date, format_hours
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["approvals"])


def review_suffix(comment: str) -> str:
    return f" Comment: {comment}" if comment else ""


@router.post("/getPendingTimesheets", response_model=PendingTimesheetListResponse)
async def get_pending_timesheets(
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Submitted entries waiting for review, oldest submission first."""
    query = db.query(TimeEntry).join(TimeEntry.user).filter(TimeEntry.status == "submitted")

    if current_user.role != UserRole.ADMIN:
        query = query.filter(User.manager_id == current_user.id)

    timesheets = query.order_by(TimeEntry.submitted_at.asc(), TimeEntry.id.asc()).all()

    return {"timesheets": timesheets}


@router.post("/getPendingLeaveRequests", response_model=PendingLeaveRequestListResponse)
async def get_pending_leave_requests(
    current_user: User = Depends(require_manager),
    db: Session = Depends(get_db)
):
    """Pending leave requests, oldest first."""
    query = db.query(LeaveRequest).join(LeaveRequest.user).filter(LeaveRequest.status == "pending")

    if current_user.role != UserRole.ADMIN:
        query = query.filter(User.manager_id == current_user.id)

    leave_requests = query.order_by(LeaveRequest.created_at.asc(), LeaveRequest.id.asc()).all()

    return {"leave_requests": leave_requests}


@router.post("/reviewTimesheet", response_model=TimesheetReviewResponse)
async def review_timesheet(
    review: TimesheetReview,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Approve or reject a submitted entry and notify the employee."""
    entry = db.query(TimeEntry).filter(TimeEntry.id == review.time_entry_id).first()

    if not entry:
        raise NotFoundError("Time entry")

    require_reviewer(current_user, entry.user, "timesheets")

    if entry.status != "submitted":
        raise InvalidInputError("Only submitted timesheets can be reviewed")

    entry.status = review.status
    entry.reviewed_by = current_user.id
    entry.reviewed_at = datetime.utcnow()
    entry.review_comment = review.review_comment

    create_notification(
        db,
        entry.user_id,
        f"Timesheet {review.status.capitalize()}",
        f"Your timesheet for {entry.project.name} ({format_hours(entry.hours)}h on "
        f"{format_us_date(entry.date)}) has been {review.status}.{review_suffix(review.review_comment)}",
    )

    db.commit()
    db.refresh(entry)

    logger.info(f"Timesheet {entry.id} {review.status} by user {current_user.id}")

    return {"time_entry": entry}


@router.post("/reviewLeaveRequest", response_model=SuccessResponse)
async def review_leave_request(
    review: LeaveRequestReview,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Approve or reject a pending leave request.

    Approval debits the current year's balance in the same commit
    as the status change.
    """
    leave_request = db.query(LeaveRequest).filter(LeaveRequest.id == review.leave_request_id).first()

    if not leave_request:
        raise NotFoundError("Leave request")

    require_reviewer(current_user, leave_request.user, "leave requests")

    if leave_request.status != "pending":
        raise InvalidInputError("Only pending leave requests can be reviewed")

    leave_request.status = review.status
    leave_request.reviewed_by = current_user.id
    leave_request.reviewed_at = datetime.utcnow()
    leave_request.review_comment = review.review_comment

    if review.status == "approved":
        days = leave_days(leave_request.start_date, leave_request.end_date, leave_request.is_half_day)
        balance = get_balance(db, leave_request.user_id, leave_request.leave_type_id, datetime.utcnow().year)
        if balance:
            debit_balance(balance, days)
        else:
            logger.warning(f"No leave balance to debit for request {leave_request.id}")

    create_notification(
        db,
        leave_request.user_id,
        f"Leave Request {review.status.capitalize()}",
        f"Your {leave_request.leave_type.name} request from {format_us_date(leave_request.start_date)} "
        f"to {format_us_date(leave_request.end_date)} has been {review.status}."
        f"{review_suffix(review.review_comment)}",
    )

    db.commit()

    logger.info(f"Leave request {leave_request.id} {review.status} by user {current_user.id}")

    return {"success": True}
