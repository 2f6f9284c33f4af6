"""
Shared fixtures.

Each test gets a fresh in-memory SQLite database bound through a
get_db override, a storage client whose MinIO backend is faked and an
assistant client whose OpenAI backend replays queued replies.
Setup data is committed before requests are made because the
in-memory database lives on a single shared connection.
"""
import os
from datetime import date
from types import SimpleNamespace

# Settings are cached on first import, so configure them first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "testing"
os.environ["SECRET_KEY"] = "test-secret-key"

import httpx
import openai
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import hrportal.models  # noqa: F401
from hrportal.config import get_settings
from hrportal.database import Base, get_db
from hrportal.main import app
from hrportal.core.security import create_access_token
from hrportal.models.department import Department
from hrportal.models.leave import LeaveType
from hrportal.models.project import Project, ProjectAssignment
from hrportal.models.user import UserRole
from hrportal.services.assistant import AssistantClient, get_assistant
from hrportal.services.employees import create_employee
from hrportal.services.storage import StorageClient, get_storage


class FakeMinio:
    """Records calls and returns deterministic pre-signed URLs."""

    def __init__(self):
        self.buckets = set()
        self.policies = {}

    def presigned_put_object(self, bucket, object_name, expires=None):
        return f"http://storage.test/{bucket}/{object_name}?X-Amz-Signature=put"

    def presigned_get_object(self, bucket, object_name, expires=None):
        return f"http://storage.test/{bucket}/{object_name}?X-Amz-Signature=get"

    def bucket_exists(self, bucket):
        return bucket in self.buckets

    def make_bucket(self, bucket):
        self.buckets.add(bucket)

    def set_bucket_policy(self, bucket, policy):
        self.policies[bucket] = policy


class FakeCompletions:
    """Hands out queued replies and records each request."""

    def __init__(self):
        self.replies = []
        self.requests = []
        self.fail = False

    async def create(self, **kwargs):
        self.requests.append(kwargs)
        if self.fail:
            raise openai.APIConnectionError(request=httpx.Request("POST", "http://llm.test/v1/chat/completions"))
        content = self.replies.pop(0) if self.replies else ""
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class FakeOpenAI:
    def __init__(self):
        self.chat = SimpleNamespace(completions=FakeCompletions())

    @property
    def completions(self):
        return self.chat.completions


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _enable_foreign_keys)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    """Session for arranging data and inspecting results.

    Call db.expire_all() before reading rows a request has changed.
    """
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage():
    return StorageClient(get_settings(), client=FakeMinio())


@pytest.fixture
def assistant():
    return AssistantClient(get_settings(), client=FakeOpenAI())


@pytest.fixture
def client(session_factory, storage, assistant):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_assistant] = lambda: assistant
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def department(db):
    department = Department(name="Engineering")
    db.add(department)
    db.commit()
    return department


@pytest.fixture
def leave_types(db):
    """Annual (18 days) and Sick (10 days). Created before users so they get balances."""
    annual = LeaveType(name="Annual Leave", is_paid=True, requires_approval=True,
                       requires_attachment=False, default_allocated=18)
    sick = LeaveType(name="Sick Leave", is_paid=True, requires_approval=True,
                     requires_attachment=True, default_allocated=10)
    db.add_all([annual, sick])
    db.commit()
    return {"annual": annual, "sick": sick}


@pytest.fixture
def make_user(db, department, leave_types):
    counter = {"n": 0}

    def _make_user(first_name="Test", last_name="User", role=UserRole.EMPLOYEE,
                   manager=None, password="password123", **fields):
        counter["n"] += 1
        n = counter["n"]
        user = create_employee(
            db,
            password=password,
            employee_id=fields.pop("employee_id", f"EMP{100 + n}"),
            email=fields.pop("email", f"user{n}@company.com"),
            first_name=first_name,
            last_name=last_name,
            role=role,
            department_id=department.id,
            manager_id=manager.id if manager else None,
            employment_type="full-time",
            join_date=fields.pop("join_date", date(2024, 1, 15)),
            **fields,
        )
        db.commit()
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user("Alice", "Admin", role=UserRole.ADMIN, email="admin@company.com")


@pytest.fixture
def manager(make_user):
    return make_user("Mark", "Manager", role=UserRole.MANAGER, email="manager@company.com")


@pytest.fixture
def employee(make_user, manager):
    return make_user("Erin", "Employee", manager=manager, email="erin@company.com")


@pytest.fixture
def other_employee(make_user):
    return make_user("Oscar", "Other", email="oscar@company.com")


def auth(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def headers():
    return auth


@pytest.fixture
def project(db):
    project = Project(name="Apollo", client="Acme Corp", status="active", budget_hours=100)
    db.add(project)
    db.commit()
    return project


@pytest.fixture
def assign(db):
    def _assign(user, project, role=None):
        assignment = ProjectAssignment(user_id=user.id, project_id=project.id, role=role)
        db.add(assignment)
        db.commit()
        return assignment

    return _assign
