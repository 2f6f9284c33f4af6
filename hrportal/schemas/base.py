"""
Base Schemas

The browser client speaks camelCase JSON. Every schema derives from
CamelModel so fields are snake_case in Python and camelCase on the wire.
Summary schemas here are embedded in responses across feature areas.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from hrportal.models.user import UserRole


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Allows creating from ORM models
    )


class SuccessResponse(CamelModel):
    success: bool = True


class MessageResponse(SuccessResponse):
    message: str


class UploadUrlRequest(CamelModel):
    file_name: str
    file_type: str


class UploadUrlResponse(CamelModel):
    """Pre-signed PUT URL plus the object name to report back after upload."""
    upload_url: str
    object_name: str


class DepartmentSummary(CamelModel):
    id: int
    name: str


class UserSummary(CamelModel):
    """Manager, reviewer, backup and comment author references."""
    id: int
    first_name: str
    last_name: str
    email: str


class EmployeeSummary(CamelModel):
    id: int
    employee_id: str
    first_name: str
    last_name: str
    email: Optional[str] = None
    designation: Optional[str] = None


class ManagerSummary(EmployeeSummary):
    role: UserRole


class ProjectSummary(CamelModel):
    id: int
    name: str
    client: Optional[str] = None


class TaskSummary(CamelModel):
    id: int
    title: str
    status: str


class SprintSummary(CamelModel):
    id: int
    name: str
