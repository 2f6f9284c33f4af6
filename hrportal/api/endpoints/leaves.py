"""
Leave Endpoints

Employee side of leave management: balances, requests, backups,
leave types and the holiday calendar.

NOTE: Day counts are calendar days (see services/leave.py).
Balances are only debited when a manager approves the request.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import extract
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.leave import LeaveType, LeaveBalance, LeaveRequest, Holiday
from hrportal.schemas.leave import (
    YearFilter,
    LeaveTypeListResponse,
    LeaveBalanceListResponse,
    LeaveRequestCreate,
    LeaveRequestFilter,
    LeaveRequestListResponse,
    LeaveRequestMutationResponse,
    BackupEmployeeListResponse,
    HolidayListResponse,
)
from hrportal.api.deps import get_current_user
from hrportal.core.exceptions import NotFoundError, InvalidInputError
from hrportal.services.leave import leave_days, get_balance
from hrportal.services.notifications import create_notification
from hrportal.utils.formatting import format_us_date
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["leaves"])


@router.post("/getLeaveBalances", response_model=LeaveBalanceListResponse)
async def get_leave_balances(
    filters: Optional[YearFilter] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's balances for a year (default: current year)."""
    year = (filters and filters.year) or datetime.utcnow().year

    balances = db.query(LeaveBalance).join(LeaveType).filter(
        LeaveBalance.user_id == current_user.id,
        LeaveBalance.year == year
    ).order_by(LeaveType.name).all()

    return {"leave_balances": balances}


@router.post("/createLeaveRequest", response_model=LeaveRequestMutationResponse)
async def create_leave_request(
    request_data: LeaveRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Request leave.

    The current year's balance must cover the request. The manager
    is notified (with the backup, if any) and so is the backup.
    """
    leave_type = db.query(LeaveType).filter(LeaveType.id == request_data.leave_type_id).first()
    if not leave_type:
        raise NotFoundError("Leave type")

    if request_data.end_date < request_data.start_date:
        raise InvalidInputError("End date cannot be before start date")

    backup_user = None
    if request_data.backup_user_id is not None:
        if request_data.backup_user_id == current_user.id:
            raise InvalidInputError("You cannot be your own backup")
        backup_user = db.query(User).filter(User.id == request_data.backup_user_id).first()
        if not backup_user:
            raise NotFoundError("Backup user")

    days = leave_days(request_data.start_date, request_data.end_date, request_data.is_half_day)

    balance = get_balance(db, current_user.id, leave_type.id, datetime.utcnow().year)
    if not balance or balance.balance < days:
        raise InvalidInputError("Insufficient leave balance")

    leave_request = LeaveRequest(
        user_id=current_user.id,
        status="pending",
        **request_data.model_dump(),
    )
    db.add(leave_request)
    db.flush()

    period = f"from {format_us_date(request_data.start_date)} to {format_us_date(request_data.end_date)}"

    if current_user.manager_id:
        backup_text = f" Backup: {backup_user.full_name}." if backup_user else ""
        create_notification(
            db,
            current_user.manager_id,
            "New Leave Request",
            f"{current_user.full_name} has requested {leave_type.name} {period} for your review.{backup_text}",
        )

    if backup_user:
        create_notification(
            db,
            backup_user.id,
            "Backup Assignment",
            f"You have been assigned as backup for {current_user.full_name} "
            f"during their {leave_type.name} {period}.",
        )

    db.commit()
    db.refresh(leave_request)

    logger.info(f"Leave request created: {leave_request.id} by user {current_user.id} ({days} days)")

    return {"leave_request": leave_request}


@router.post("/getLeaveRequests", response_model=LeaveRequestListResponse)
async def get_leave_requests(
    filters: Optional[LeaveRequestFilter] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """The caller's requests, newest first. year filters on the start date."""
    filters = filters or LeaveRequestFilter()

    query = db.query(LeaveRequest).filter(LeaveRequest.user_id == current_user.id)

    if filters.status:
        query = query.filter(LeaveRequest.status == filters.status)

    if filters.year:
        query = query.filter(extract("year", LeaveRequest.start_date) == filters.year)

    requests = query.order_by(LeaveRequest.created_at.desc(), LeaveRequest.id.desc()).all()

    return {"leave_requests": requests}


@router.post("/getEmployeesForBackup", response_model=BackupEmployeeListResponse)
async def get_employees_for_backup(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Active colleagues who can cover while the caller is away."""
    employees = db.query(User).filter(
        User.status == "active",
        User.id != current_user.id
    ).order_by(User.first_name, User.last_name).all()

    return {"employees": employees}


@router.post("/getLeaveTypes", response_model=LeaveTypeListResponse)
async def get_leave_types(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    leave_types = db.query(LeaveType).order_by(LeaveType.name).all()
    return {"leave_types": leave_types}


@router.post("/getHolidays", response_model=HolidayListResponse)
async def get_holidays(
    filters: Optional[YearFilter] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    year = (filters and filters.year) or datetime.utcnow().year

    holidays = db.query(Holiday).filter(Holiday.year == year).order_by(Holiday.date).all()

    return {"holidays": holidays}
