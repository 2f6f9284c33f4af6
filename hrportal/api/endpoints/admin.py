"""
Admin Employee Endpoints

Employee directory and lifecycle: onboarding, edits, activation
and removal. All admin only.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import date, datetime

from hrportal.database import get_db
from hrportal.models.department import Department
from hrportal.models.user import User, UserRole, PasswordResetToken
from hrportal.models.project import ProjectAssignment
from hrportal.models.timesheet import TimeEntry
from hrportal.models.leave import LeaveBalance, LeaveRequest, LeaveType
from hrportal.models.project_management import Task, TaskComment
from hrportal.models.document import Document, Payslip
from hrportal.models.notification import Notification
from hrportal.schemas.base import SuccessResponse
from hrportal.schemas.admin import (
    DepartmentListResponse,
    ManagerListResponse,
    EmployeeListResponse,
    EmployeeByIdRequest,
    EmployeeDetail,
    EmployeeDetailResponse,
    EmployeeProjectAssignment,
    OnboardEmployeeRequest,
    OnboardEmployeeResponse,
    EmployeeUpdate,
    EmployeeStatusUpdate,
    EmployeeMutationResponse,
    UserIdRequest,
)
from hrportal.schemas.leave import LeaveBalanceResponse
from hrportal.api.deps import require_admin
from hrportal.core.exceptions import NotFoundError, InvalidInputError
from hrportal.services.employees import (
    create_employee,
    ensure_unique_identity,
    check_references,
    ensure_no_reporting_cycle,
)
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["admin"])

# Columns that can't be cleared with null
REQUIRED_FIELDS = ("employee_id", "email", "first_name", "last_name", "role", "employment_type")


def get_employee_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("Employee")
    return user


@router.post("/getDepartments", response_model=DepartmentListResponse)
async def get_departments(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    departments = db.query(Department).order_by(Department.name).all()
    return {"departments": departments}


@router.post("/getManagers", response_model=ManagerListResponse)
async def get_managers(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Active users who can be picked as someone's manager."""
    managers = db.query(User).filter(
        User.role.in_([UserRole.MANAGER, UserRole.ADMIN]),
        User.status == "active"
    ).order_by(User.first_name, User.last_name).all()

    return {"managers": managers}


@router.post("/getAllEmployees", response_model=EmployeeListResponse)
async def get_all_employees(
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Every employee, active or not, by first name."""
    employees = db.query(User).order_by(User.first_name, User.last_name).all()
    return {"employees": employees}


@router.post("/getEmployeeById", response_model=EmployeeDetailResponse)
async def get_employee_by_id(
    request: EmployeeByIdRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Full record with project assignments and this year's balances."""
    employee = get_employee_or_404(db, request.employee_id)

    assignments = db.query(ProjectAssignment).filter(
        ProjectAssignment.user_id == employee.id
    ).order_by(ProjectAssignment.assigned_at.desc()).all()

    balances = db.query(LeaveBalance).join(LeaveType).filter(
        LeaveBalance.user_id == employee.id,
        LeaveBalance.year == datetime.utcnow().year
    ).order_by(LeaveType.name).all()

    detail = EmployeeDetail.model_validate(employee).model_copy(update={
        "project_assignments": [EmployeeProjectAssignment.model_validate(a) for a in assignments],
        "leave_balances": [LeaveBalanceResponse.model_validate(b) for b in balances],
    })

    return {"employee": detail}


@router.post("/onboardEmployee", response_model=OnboardEmployeeResponse)
async def onboard_employee(
    request: OnboardEmployeeRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create an employee account with default leave balances."""
    user = create_employee(db, **request.model_dump())
    db.commit()

    logger.info(f"Employee onboarded: {user.id} ({user.employee_id}) by admin {current_user.id}")

    return {"user_id": user.id, "employee_id": user.employee_id}


@router.post("/updateEmployee", response_model=EmployeeMutationResponse)
async def update_employee(
    employee_update: EmployeeUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Edit any employee field.

    Omitted fields are left alone; optional fields sent as null are cleared.
    """
    employee = get_employee_or_404(db, employee_update.user_id)

    update_data = employee_update.model_dump(exclude_unset=True, exclude={"user_id"})
    for field in REQUIRED_FIELDS:
        if field in update_data and update_data[field] is None:
            del update_data[field]

    ensure_unique_identity(
        db,
        email=update_data.get("email"),
        employee_id=update_data.get("employee_id"),
        exclude_user_id=employee.id,
    )
    check_references(db, update_data.get("department_id"), update_data.get("manager_id"))

    if update_data.get("manager_id") is not None:
        ensure_no_reporting_cycle(db, employee.id, update_data["manager_id"])

    for field, value in update_data.items():
        setattr(employee, field, value)

    db.commit()
    db.refresh(employee)

    logger.info(f"Employee updated: {employee.id} by admin {current_user.id}, fields={list(update_data.keys())}")

    return {"employee": employee}


@router.post("/deactivateEmployee", response_model=EmployeeMutationResponse)
async def deactivate_employee(
    request: EmployeeStatusUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Activate or deactivate an account.

    Deactivating stamps end_date with today; reactivating clears it.
    Inactive users can no longer log in.
    """
    if request.user_id == current_user.id:
        raise InvalidInputError("You cannot deactivate your own account")

    employee = get_employee_or_404(db, request.user_id)

    employee.status = request.status
    employee.end_date = date.today() if request.status == "inactive" else None

    db.commit()
    db.refresh(employee)

    logger.info(f"Employee {employee.id} set {request.status} by admin {current_user.id}")

    return {"employee": employee}


@router.post("/deleteEmployee", response_model=SuccessResponse)
async def delete_employee(
    request: UserIdRequest,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Permanently remove an employee and everything they own.

    References from other people's records (reviewer, manager, backup,
    task assignee) are cleared rather than deleted. Prefer
    deactivateEmployee when history must be kept.
    """
    if request.user_id == current_user.id:
        raise InvalidInputError("You cannot delete your own account")

    employee = get_employee_or_404(db, request.user_id)
    user_id = employee.id

    # Clear references held by other rows
    db.query(TimeEntry).filter(TimeEntry.reviewed_by == user_id).update(
        {TimeEntry.reviewed_by: None}, synchronize_session=False
    )
    db.query(LeaveRequest).filter(LeaveRequest.reviewed_by == user_id).update(
        {LeaveRequest.reviewed_by: None}, synchronize_session=False
    )
    db.query(LeaveRequest).filter(LeaveRequest.backup_user_id == user_id).update(
        {LeaveRequest.backup_user_id: None}, synchronize_session=False
    )
    db.query(User).filter(User.manager_id == user_id).update(
        {User.manager_id: None}, synchronize_session=False
    )
    db.query(Task).filter(Task.assigned_to_id == user_id).update(
        {Task.assigned_to_id: None}, synchronize_session=False
    )

    # Remove rows owned by the employee
    for model in (
        Notification,
        Document,
        Payslip,
        LeaveRequest,
        LeaveBalance,
        TimeEntry,
        ProjectAssignment,
        PasswordResetToken,
        TaskComment,
    ):
        db.query(model).filter(model.user_id == user_id).delete(synchronize_session=False)

    db.delete(employee)
    db.commit()

    logger.info(f"Employee deleted: {user_id} by admin {current_user.id}")

    return {"success": True}
