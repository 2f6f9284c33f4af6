from datetime import date, datetime, timedelta
import asyncio
import json

import pytest
from jose import jwt

from hrportal.api.deps import require_admin, require_manager
from hrportal.core.exceptions import PermissionDenied
from hrportal.core.permissions import can_review, require_role, require_reviewer
from hrportal.core.security import (
    create_access_token,
    decode_access_token,
    generate_reset_token,
    get_password_hash,
    verify_password,
)
from hrportal.models.department import Department
from hrportal.models.leave import Holiday, LeaveBalance, LeaveType
from hrportal.models.user import User, UserRole
from hrportal.scripts.setup import seed, thanksgiving
from hrportal.services.storage import public_read_policy
from hrportal.utils.formatting import format_hours, format_us_date, format_us_datetime


def test_access_token_round_trip():
    payload = decode_access_token(create_access_token(42))

    assert payload["sub"] == "42"
    assert payload["exp"] > payload["iat"]


def test_expired_token_is_rejected():
    token = create_access_token(42, expires_delta=timedelta(seconds=-5))

    assert decode_access_token(token) is None


def test_token_signed_with_other_key_is_rejected():
    forged = jwt.encode({"sub": "1", "exp": datetime.utcnow() + timedelta(minutes=5)}, "other-key", algorithm="HS256")

    assert decode_access_token(forged) is None
    assert decode_access_token("not-a-jwt") is None


def test_password_hashing():
    hashed = get_password_hash("password123")

    assert hashed != "password123"
    assert verify_password("password123", hashed)
    assert not verify_password("password124", hashed)


def test_reset_tokens_are_random_hex():
    first, second = generate_reset_token(), generate_reset_token()

    assert len(first) == 64
    int(first, 16)
    assert first != second


def test_admins_review_anyone_managers_only_reports():
    admin = User(id=1, role=UserRole.ADMIN)
    manager = User(id=2, role=UserRole.MANAGER)
    report = User(id=3, role=UserRole.EMPLOYEE, manager_id=2)
    stranger = User(id=4, role=UserRole.EMPLOYEE, manager_id=None)

    assert can_review(admin, stranger)
    assert can_review(manager, report)
    assert not can_review(manager, stranger)

    with pytest.raises(PermissionDenied) as exc_info:
        require_reviewer(manager, stranger, "timesheets")
    assert exc_info.value.detail == "You can only review timesheets of your direct reports"


def test_require_role_hierarchy():
    manager = User(role=UserRole.MANAGER)

    require_role(manager, UserRole.EMPLOYEE)
    require_role(manager, UserRole.MANAGER)
    with pytest.raises(PermissionDenied):
        require_role(manager, UserRole.ADMIN)


@pytest.mark.parametrize("day,expected", [
    (date(2024, 1, 5), "1/5/2024"),
    (date(2025, 12, 31), "12/31/2025"),
])
def test_format_us_date(day, expected):
    assert format_us_date(day) == expected


@pytest.mark.parametrize("moment,expected", [
    (datetime(2024, 1, 5, 0, 7, 9), "1/5/2024, 12:07:09 AM"),
    (datetime(2024, 1, 5, 12, 0, 0), "1/5/2024, 12:00:00 PM"),
    (datetime(2024, 1, 5, 15, 30, 1), "1/5/2024, 3:30:01 PM"),
])
def test_format_us_datetime(moment, expected):
    assert format_us_datetime(moment) == expected


@pytest.mark.parametrize("hours,expected", [(8.0, "8"), (7.5, "7.5"), (0.25, "0.25")])
def test_format_hours(hours, expected):
    assert format_hours(hours) == expected


def test_public_read_policy_targets_bucket_objects():
    policy = json.loads(public_read_policy("profile-photos"))

    statement = policy["Statement"][0]
    assert statement["Action"] == ["s3:GetObject"]
    assert statement["Resource"] == ["arn:aws:s3:::profile-photos/*"]


def test_ensure_bucket_creates_once(storage):
    assert storage.ensure_bucket("profile-photos", public=True) is True
    assert storage.ensure_bucket("profile-photos", public=True) is False
    assert storage.ensure_bucket("payslips") is True

    assert "profile-photos" in storage.client.policies
    assert "payslips" not in storage.client.policies


def test_object_url(storage):
    assert storage.object_url("profile-photos", "1/me.png") == "http://localhost:9000/profile-photos/1/me.png"


def test_seed_is_idempotent(db):
    seed(db, year=2030)
    seed(db, year=2030)

    assert db.query(Department).count() == 5
    assert db.query(LeaveType).count() == 4
    assert db.query(Holiday).filter(Holiday.year == 2030).count() == 4

    admin = db.query(User).one()
    assert admin.role == UserRole.ADMIN
    assert admin.employee_id == "EMP001"
    assert admin.department.name == "Human Resources"
    assert db.query(LeaveBalance).filter(LeaveBalance.user_id == admin.id).count() == 4


@pytest.mark.parametrize("year,expected", [
    (2024, date(2024, 11, 28)),
    (2025, date(2025, 11, 27)),
    (2026, date(2026, 11, 26)),
])
def test_thanksgiving_is_fourth_thursday(year, expected):
    assert thanksgiving(year) == expected


def test_seeded_thanksgiving_follows_the_year(db):
    seed(db, year=2025)

    assert db.query(Holiday).filter(Holiday.name == "Thanksgiving").one().date == date(2025, 11, 27)


def test_role_dependencies_are_awaitable():
    manager = User(id=2, role=UserRole.MANAGER)

    assert asyncio.run(require_manager(current_user=manager)) is manager
    with pytest.raises(PermissionDenied):
        asyncio.run(require_admin(current_user=manager))
