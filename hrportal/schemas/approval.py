"""
Approval Schemas

Manager review queues for timesheets and leave requests.
"""
from typing import List, Optional
from hrportal.schemas.base import CamelModel
from hrportal.schemas.timesheet import TimeEntryDetail, ReviewStatus, TimeEntryResponse
from hrportal.schemas.leave import LeaveRequestDetail


class PendingTimesheetListResponse(CamelModel):
    timesheets: List[TimeEntryDetail]


class PendingLeaveRequestListResponse(CamelModel):
    leave_requests: List[LeaveRequestDetail]


class TimesheetReview(CamelModel):
    time_entry_id: int
    status: ReviewStatus
    review_comment: Optional[str] = None


class LeaveRequestReview(CamelModel):
    leave_request_id: int
    status: ReviewStatus
    review_comment: Optional[str] = None


class TimesheetReviewResponse(CamelModel):
    success: bool = True
    time_entry: TimeEntryResponse
