"""
Authentication Schemas
"""
from pydantic import EmailStr, Field
from typing import Literal, Optional
from datetime import date
from hrportal.models.user import UserRole
from hrportal.schemas.base import CamelModel, DepartmentSummary, UserSummary

EmploymentType = Literal["full-time", "part-time", "contractor"]


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginUser(CamelModel):
    """User summary returned with the token."""
    id: int
    employee_id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    profile_photo_url: Optional[str] = None
    department: Optional[DepartmentSummary] = None
    designation: Optional[str] = None


class TokenResponse(CamelModel):
    token: str
    user: LoginUser


class RegisterRequest(CamelModel):
    """
    Self-registration payload.

    NOTE: role is accepted as sent. Admin onboarding is the
    supported path for creating managers and admins.
    """
    employee_id: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    department_id: Optional[int] = None
    designation: Optional[str] = None
    manager_id: Optional[int] = None
    role: UserRole = UserRole.EMPLOYEE
    employment_type: EmploymentType = "full-time"
    join_date: date


class RegisterResponse(CamelModel):
    success: bool = True
    user_id: int


class MeResponse(CamelModel):
    """Full profile of the authenticated user."""
    id: int
    employee_id: str
    email: str
    first_name: str
    last_name: str
    phone: Optional[str] = None
    personal_email: Optional[str] = None
    profile_photo_url: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    role: UserRole
    department: Optional[DepartmentSummary] = None
    designation: Optional[str] = None
    manager: Optional[UserSummary] = None
    employment_type: str
    join_date: date
    skills: Optional[str] = None
    certifications: Optional[str] = None


class ChangePasswordRequest(CamelModel):
    old_password: str
    new_password: str = Field(..., min_length=8, max_length=100)


class PasswordResetRequest(CamelModel):
    email: EmailStr


class PasswordResetRequestResponse(CamelModel):
    success: bool = True
    message: str
    # Only populated in development so the flow works without e-mail
    token: Optional[str] = None


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=100)
