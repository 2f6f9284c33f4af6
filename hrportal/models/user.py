"""
User Model

Employees, managers and admins share one table. The role drives
what a user can reach; manager_id links an employee to the person
who reviews their timesheets and leave.
"""
from sqlalchemy import Column, String, Text, Date, DateTime, ForeignKey, Index, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
from hrportal.database import Base
import enum


class UserRole(str, enum.Enum):
    """
    User roles.

    EMPLOYEE: Own timesheets, leave, profile and documents
    MANAGER: Also reviews direct reports and manages sprints/tasks
    ADMIN: Full access, including employee and project administration
    """
    EMPLOYEE = "employee"
    MANAGER = "manager"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)

    # Credentials and identity
    employee_id = Column(String(50), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)

    # Self-service profile fields
    phone = Column(String(50), nullable=True)
    personal_email = Column(String(255), nullable=True)
    profile_photo_url = Column(String(500), nullable=True)
    address = Column(Text, nullable=True)
    emergency_contact = Column(Text, nullable=True)
    skills = Column(Text, nullable=True)
    certifications = Column(Text, nullable=True)

    # Employment details (admin managed)
    role = Column(
        SQLEnum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        default=UserRole.EMPLOYEE,
        nullable=False,
        index=True
    )
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)
    designation = Column(String(100), nullable=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    employment_type = Column(String(20), default="full-time", nullable=False)  # full-time, part-time, contractor
    join_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String(20), default="active", nullable=False, index=True)  # active, inactive

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    department = relationship("Department", back_populates="users")
    manager = relationship("User", remote_side=[id], foreign_keys=[manager_id])

    __table_args__ = (
        # Approval queues: direct reports of a manager
        Index('idx_user_manager_status', 'manager_id', 'status'),
    )

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def has_permission(self, required_role: UserRole) -> bool:
        """
        Check if user has required permission level.

        Simple hierarchy: ADMIN > MANAGER > EMPLOYEE
        """
        role_hierarchy = {
            UserRole.EMPLOYEE: 1,
            UserRole.MANAGER: 2,
            UserRole.ADMIN: 3,
        }
        return role_hierarchy[self.role] >= role_hierarchy[required_role]


class PasswordResetToken(Base):
    """
    One outstanding reset token per user.

    Tokens are deleted once used or found expired.
    """
    __tablename__ = "password_reset_tokens"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    token = Column(String(128), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User")

    def __repr__(self):
        return f"<PasswordResetToken user={self.user_id}>"
