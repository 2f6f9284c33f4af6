"""
Employee Records

Account creation shared by self-registration and admin onboarding,
plus the identity checks both of them and updateEmployee rely on.
"""
from datetime import datetime
from sqlalchemy.orm import Session
from hrportal.models.department import Department
from hrportal.models.user import User
from hrportal.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from hrportal.core.security import get_password_hash
from hrportal.services.leave import create_leave_balances
from hrportal.utils.logging import get_logger

logger = get_logger(__name__)


def ensure_unique_identity(db: Session, email: str = None, employee_id: str = None,
                           exclude_user_id: int = None) -> None:
    """Raise CONFLICT when the email or employee id belongs to another user."""
    if email is not None:
        query = db.query(User).filter(User.email == email)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        if query.first():
            raise ConflictError("A user with this email already exists")

    if employee_id is not None:
        query = db.query(User).filter(User.employee_id == employee_id)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        if query.first():
            raise ConflictError("A user with this employee ID already exists")


def check_references(db: Session, department_id: int = None, manager_id: int = None) -> None:
    if department_id is not None:
        if not db.query(Department).filter(Department.id == department_id).first():
            raise NotFoundError("Department")
    if manager_id is not None:
        if not db.query(User).filter(User.id == manager_id).first():
            raise NotFoundError("Manager")


def ensure_no_reporting_cycle(db: Session, user_id: int, manager_id: int) -> None:
    """
    Reject a manager that is the user or reports to the user, directly or
    through a longer chain.
    """
    seen = set()
    current_id = manager_id
    while current_id is not None and current_id not in seen:
        if current_id == user_id:
            raise InvalidInputError("This manager assignment would create a reporting cycle")
        seen.add(current_id)
        current_id = db.query(User.manager_id).filter(User.id == current_id).scalar()


def create_employee(db: Session, password: str, **fields) -> User:
    """
    Create an active user with this year's leave balances.

    Caller commits.
    """
    ensure_unique_identity(db, fields.get("email"), fields.get("employee_id"))
    check_references(db, fields.get("department_id"), fields.get("manager_id"))

    user = User(
        password_hash=get_password_hash(password),
        status="active",
        **fields,
    )
    db.add(user)
    db.flush()

    create_leave_balances(db, user.id, datetime.utcnow().year)

    logger.info(f"Employee record created: {user.id} ({user.employee_id})")

    return user
