"""
Setup Script

Prepares a fresh environment: tables, storage buckets and reference
data (departments, leave types, holidays) plus the first admin account.

Safe to run repeatedly; anything that already exists is left alone.

Usage:
    hrportal-setup
"""
from datetime import date
from sqlalchemy.orm import Session

from hrportal.config import get_settings
from hrportal.database import SessionLocal, init_db
from hrportal.models.department import Department
from hrportal.models.leave import LeaveType, Holiday
from hrportal.models.user import User, UserRole
from hrportal.services.employees import create_employee
from hrportal.services.storage import get_storage
from hrportal.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)

DEPARTMENTS = ["Engineering", "Human Resources", "Sales", "Marketing", "Finance"]

LEAVE_TYPES = [
    {"name": "Annual Leave", "is_paid": True, "requires_approval": True,
     "requires_attachment": False, "default_allocated": 18},
    {"name": "Sick Leave", "is_paid": True, "requires_approval": True,
     "requires_attachment": True, "default_allocated": 10},
    {"name": "Personal Leave", "is_paid": False, "requires_approval": True,
     "requires_attachment": False, "default_allocated": 5},
    {"name": "Comp Off", "is_paid": True, "requires_approval": True,
     "requires_attachment": False, "default_allocated": 0},
]


def thanksgiving(year: int) -> date:
    """Fourth Thursday of November."""
    first = date(year, 11, 1)
    first_thursday = 1 + (3 - first.weekday()) % 7
    return date(year, 11, first_thursday + 21)


# (name, date for a given year)
HOLIDAYS = [
    ("New Year's Day", lambda year: date(year, 1, 1)),
    ("Independence Day", lambda year: date(year, 7, 4)),
    ("Thanksgiving", thanksgiving),
    ("Christmas Day", lambda year: date(year, 12, 25)),
]


def setup_buckets() -> None:
    settings = get_settings()
    storage = get_storage()
    for bucket in settings.buckets:
        storage.ensure_bucket(bucket, public=(bucket == settings.BUCKET_PROFILE_PHOTOS))


def seed_departments(db: Session) -> Department:
    """Returns Human Resources, the admin's department."""
    for name in DEPARTMENTS:
        if not db.query(Department).filter(Department.name == name).first():
            db.add(Department(name=name))
            logger.info(f"Created department: {name}")
    db.flush()
    return db.query(Department).filter(Department.name == "Human Resources").first()


def seed_leave_types(db: Session) -> None:
    for data in LEAVE_TYPES:
        if not db.query(LeaveType).filter(LeaveType.name == data["name"]).first():
            db.add(LeaveType(**data))
            logger.info(f"Created leave type: {data['name']}")
    db.flush()


def seed_holidays(db: Session, year: int) -> None:
    for name, date_for in HOLIDAYS:
        holiday_date = date_for(year)
        if not db.query(Holiday).filter(Holiday.date == holiday_date).first():
            db.add(Holiday(name=name, date=holiday_date, year=year, is_optional=False))
            logger.info(f"Created holiday: {name} ({holiday_date})")
    db.flush()


def seed_admin(db: Session, department: Department) -> None:
    settings = get_settings()

    if db.query(User).filter(User.email == settings.ADMIN_EMAIL).first():
        logger.info(f"Admin user already exists: {settings.ADMIN_EMAIL}")
        return

    create_employee(
        db,
        password=settings.ADMIN_PASSWORD,
        employee_id="EMP001",
        email=settings.ADMIN_EMAIL,
        first_name="System",
        last_name="Administrator",
        department_id=department.id,
        designation="HR Administrator",
        role=UserRole.ADMIN,
        employment_type="full-time",
        join_date=date.today(),
    )
    logger.warning(f"Created admin user {settings.ADMIN_EMAIL}; change the default password")


def seed(db: Session, year: int = None) -> None:
    """Seed reference data and the admin account in one transaction."""
    year = year or date.today().year

    department = seed_departments(db)
    seed_leave_types(db)
    seed_holidays(db, year)
    seed_admin(db, department)

    db.commit()


def main() -> None:
    settings = get_settings()
    setup_logging(log_level=settings.LOG_LEVEL)

    logger.info("Creating database tables")
    init_db()

    logger.info("Ensuring storage buckets")
    setup_buckets()

    db = SessionLocal()
    try:
        seed(db)
    finally:
        db.close()

    logger.info("Setup complete")


if __name__ == "__main__":
    main()
