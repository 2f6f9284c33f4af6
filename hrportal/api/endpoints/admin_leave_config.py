"""
Admin Leave Configuration Endpoints

Leave types and the company holiday calendar.

NOTE: Changing a leave type's default_allocated only affects balances
created afterwards (new employees). Existing balances are untouched.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional
from datetime import datetime

from hrportal.database import get_db
from hrportal.models.user import User
from hrportal.models.leave import LeaveType, LeaveBalance, LeaveRequest, Holiday
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.leave import YearFilter, LeaveTypeResponse
from hrportal.schemas.admin import (
    LeaveTypeCreate,
    LeaveTypeUpdate,
    LeaveTypeIdRequest,
    LeaveTypeMutationResponse,
    LeaveTypeCounts,
    LeaveTypeUsage,
    LeaveTypeUsageListResponse,
    HolidayCreate,
    HolidayUpdate,
    HolidayIdRequest,
    HolidayMutationResponse,
    HolidayYearListResponse,
)
from hrportal.api.deps import require_admin
from hrportal.core.exceptions import NotFoundError, ConflictError
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])

# Columns that can't be cleared with null
REQUIRED_FIELDS = ("name", "is_paid", "requires_approval", "requires_attachment", "default_allocated")


def get_leave_type_or_404(db: Session, leave_type_id: int) -> LeaveType:
    leave_type = db.query(LeaveType).filter(LeaveType.id == leave_type_id).first()
    if not leave_type:
        raise NotFoundError("Leave type")
    return leave_type


def get_holiday_or_404(db: Session, holiday_id: int) -> Holiday:
    holiday = db.query(Holiday).filter(Holiday.id == holiday_id).first()
    if not holiday:
        raise NotFoundError("Holiday")
    return holiday


def usage_counts(db: Session, leave_type_id: int) -> LeaveTypeCounts:
    return LeaveTypeCounts(
        leave_balances=db.query(func.count(LeaveBalance.id)).filter(
            LeaveBalance.leave_type_id == leave_type_id
        ).scalar(),
        leave_requests=db.query(func.count(LeaveRequest.id)).filter(
            LeaveRequest.leave_type_id == leave_type_id
        ).scalar(),
    )


def ensure_unique_name(db: Session, name: str, exclude_id: int = None) -> None:
    query = db.query(LeaveType).filter(LeaveType.name == name)
    if exclude_id is not None:
        query = query.filter(LeaveType.id != exclude_id)
    if query.first():
        raise ConflictError("Leave type with this name already exists")


def ensure_free_date(db: Session, day, exclude_id: int = None) -> None:
    query = db.query(Holiday).filter(Holiday.date == day)
    if exclude_id is not None:
        query = query.filter(Holiday.id != exclude_id)
    if query.first():
        raise ConflictError("A holiday already exists on this date")


# Leave types

@router.post("/createLeaveType", response_model=LeaveTypeMutationResponse)
async def create_leave_type(
    leave_type_data: LeaveTypeCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    ensure_unique_name(db, leave_type_data.name)

    leave_type = LeaveType(**leave_type_data.model_dump())
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)

    logger.info(f"Leave type created: {leave_type.id} ({leave_type.name}) by admin {current_user.id}")

    return {"leave_type": leave_type}


@router.post("/updateLeaveType", response_model=LeaveTypeMutationResponse)
async def update_leave_type(
    leave_type_update: LeaveTypeUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    leave_type = get_leave_type_or_404(db, leave_type_update.leave_type_id)

    update_data = leave_type_update.model_dump(exclude_unset=True, exclude={"leave_type_id"})
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    if "name" in update_data:
        ensure_unique_name(db, update_data["name"], exclude_id=leave_type.id)

    for field, value in update_data.items():
        setattr(leave_type, field, value)

    db.commit()
    db.refresh(leave_type)

    logger.info(f"Leave type updated: {leave_type.id} by admin {current_user.id}")

    return {"leave_type": leave_type}


@router.post("/deleteLeaveType", response_model=SuccessResponse)
async def delete_leave_type(
    request: LeaveTypeIdRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Delete a leave type nobody has a balance or request for."""
    leave_type = get_leave_type_or_404(db, request.leave_type_id)

    counts = usage_counts(db, leave_type.id)
    if counts.leave_balances or counts.leave_requests:
        raise ConflictError(
            f"Cannot delete leave type that is in use "
            f"({counts.leave_balances} balances, {counts.leave_requests} requests)"
        )

    db.delete(leave_type)
    db.commit()

    logger.info(f"Leave type deleted: {request.leave_type_id} by admin {current_user.id}")

    return {"success": True}


@router.post("/getAllLeaveTypes", response_model=LeaveTypeUsageListResponse)
async def get_all_leave_types(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Leave types by name with how many balances and requests use each."""
    leave_types = db.query(LeaveType).order_by(LeaveType.name).all()

    return {
        "leave_types": [
            LeaveTypeUsage(
                **LeaveTypeResponse.model_validate(lt).model_dump(),
                counts=usage_counts(db, lt.id),
            )
            for lt in leave_types
        ]
    }


# Holidays

@router.post("/createHoliday", response_model=HolidayMutationResponse)
async def create_holiday(
    holiday_data: HolidayCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Add a holiday. The year is taken from the date."""
    ensure_free_date(db, holiday_data.date)

    holiday = Holiday(
        name=holiday_data.name,
        date=holiday_data.date,
        year=holiday_data.date.year,
        is_optional=holiday_data.is_optional,
    )
    db.add(holiday)
    db.commit()
    db.refresh(holiday)

    logger.info(f"Holiday created: {holiday.id} ({holiday.name} {holiday.date}) by admin {current_user.id}")

    return {"holiday": holiday}


@router.post("/updateHoliday", response_model=HolidayMutationResponse)
async def update_holiday(
    holiday_update: HolidayUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    holiday = get_holiday_or_404(db, holiday_update.holiday_id)
    ensure_free_date(db, holiday_update.date, exclude_id=holiday.id)

    holiday.name = holiday_update.name
    holiday.date = holiday_update.date
    holiday.year = holiday_update.date.year
    holiday.is_optional = holiday_update.is_optional

    db.commit()
    db.refresh(holiday)

    logger.info(f"Holiday updated: {holiday.id} by admin {current_user.id}")

    return {"holiday": holiday}


@router.post("/deleteHoliday", response_model=SuccessResponse)
async def delete_holiday(
    request: HolidayIdRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    holiday = get_holiday_or_404(db, request.holiday_id)

    db.delete(holiday)
    db.commit()

    logger.info(f"Holiday deleted: {request.holiday_id} by admin {current_user.id}")

    return {"success": True}


@router.post("/getAllHolidays", response_model=HolidayYearListResponse)
async def get_all_holidays(
    filters: Optional[YearFilter] = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Holidays of one year (default: current year), by date."""
    year = (filters and filters.year) or datetime.utcnow().year

    holidays = db.query(Holiday).filter(Holiday.year == year).order_by(Holiday.date).all()

    return {"holidays": holidays, "year": year}
