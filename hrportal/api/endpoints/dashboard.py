"""
Dashboard Endpoints

Summary figures for the employee home page.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from datetime import date, timedelta

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.timesheet import TimeEntry
from hrportal.models.leave import LeaveBalance, LeaveRequest, LeaveType, Holiday
from hrportal.schemas.dashboard import DashboardStatsResponse
from hrportal.api.deps import get_current_user

router = APIRouter(tags=["dashboard"])

WEEKLY_TARGET_HOURS = 40
UPCOMING_HOLIDAY_COUNT = 3


def week_bounds(today: date):
    """Sunday through Saturday of the week containing today."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


@router.post("/getDashboardStats", response_model=DashboardStatsResponse)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Hours logged this week (any status), counts of own items waiting
    for review, this year's balances and the next few holidays.
    """
    today = date.today()
    week_start, week_end = week_bounds(today)

    hours_this_week = db.query(func.coalesce(func.sum(TimeEntry.hours), 0)).filter(
        TimeEntry.user_id == current_user.id,
        TimeEntry.date >= week_start,
        TimeEntry.date <= week_end
    ).scalar()

    pending_timesheets = db.query(TimeEntry).filter(
        TimeEntry.user_id == current_user.id,
        TimeEntry.status == "submitted"
    ).count()

    pending_leave_requests = db.query(LeaveRequest).filter(
        LeaveRequest.user_id == current_user.id,
        LeaveRequest.status == "pending"
    ).count()

    leave_balances = db.query(LeaveBalance).join(LeaveType).filter(
        LeaveBalance.user_id == current_user.id,
        LeaveBalance.year == today.year
    ).order_by(LeaveType.name).all()

    upcoming_holidays = db.query(Holiday).filter(
        Holiday.year == today.year,
        Holiday.date >= today
    ).order_by(Holiday.date).limit(UPCOMING_HOLIDAY_COUNT).all()

    return {
        "hours_this_week": float(hours_this_week),
        "target_hours": WEEKLY_TARGET_HOURS,
        "pending_timesheets": pending_timesheets,
        "pending_leave_requests": pending_leave_requests,
        "leave_balances": leave_balances,
        "upcoming_holidays": upcoming_holidays,
    }
