"""
Database Models

Importing this package registers every table with Base.metadata.
"""
from hrportal.models.department import Department
from hrportal.models.user import User, UserRole, PasswordResetToken
from hrportal.models.project import Project, ProjectAssignment
from hrportal.models.timesheet import TimeEntry
from hrportal.models.leave import LeaveType, LeaveBalance, LeaveRequest, Holiday
from hrportal.models.project_management import Sprint, Task, TaskComment
from hrportal.models.document import Document, Payslip
from hrportal.models.notification import Notification

__all__ = [
    "Department",
    "User",
    "UserRole",
    "PasswordResetToken",
    "Project",
    "ProjectAssignment",
    "TimeEntry",
    "LeaveType",
    "LeaveBalance",
    "LeaveRequest",
    "Holiday",
    "Sprint",
    "Task",
    "TaskComment",
    "Document",
    "Payslip",
    "Notification",
]
