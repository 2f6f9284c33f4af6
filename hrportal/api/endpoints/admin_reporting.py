"""
Admin Reporting Endpoint

Approved hours aggregated per project, per employee and per week.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Optional

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.timesheet import TimeEntry
from hrportal.schemas.reporting import ReportingRequest, ReportingResponse
from hrportal.api.deps import require_admin
from hrportal.core.exceptions import InvalidInputError
from hrportal.services.reporting import build_report, default_range
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])


@router.post("/getReportingData", response_model=ReportingResponse)
async def get_reporting_data(
    request: Optional[ReportingRequest] = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Reporting dashboard data for a date range.

    Defaults to the last 90 days. Only approved entries count.

    PERFORMANCE NOTE: Aggregation happens in Python over the approved
    entries in range. Move it into SQL if ranges get large.
    """
    request = request or ReportingRequest()
    start_date, end_date = default_range(request.start_date, request.end_date)

    if end_date < start_date:
        raise InvalidInputError("End date must be on or after start date")

    entries = db.query(TimeEntry).filter(
        TimeEntry.status == "approved",
        TimeEntry.date >= start_date,
        TimeEntry.date <= end_date
    ).order_by(TimeEntry.date).all()

    logger.info(f"Reporting data for {start_date}..{end_date}: {len(entries)} approved entries")

    return build_report(entries, start_date, end_date)
