"""
Permission System

Three roles with a simple hierarchy: admin > manager > employee.

Role checks for whole endpoints live in api/deps.py as dependencies.
The helpers here cover checks that need the loaded row, like
"is this the employee's manager".
"""
from hrportal.core.exceptions import PermissionDenied
from hrportal.models.user import User, UserRole


def require_role(user: User, required_role: UserRole) -> None:
    """
    Check if user has required role level.

    Raises PermissionDenied if user doesn't have sufficient permissions.
    """
    if not user.has_permission(required_role):
        raise PermissionDenied(f"This action requires {required_role.value} role or higher")


def is_admin(user: User) -> bool:
    return user.role == UserRole.ADMIN


def can_review(reviewer: User, employee: User) -> bool:
    """
    Check if reviewer can approve/reject the employee's timesheets and leave.

    Rules:
    - Admins can review anyone
    - Managers can review their direct reports
    """
    if is_admin(reviewer):
        return True
    return employee.manager_id == reviewer.id


def require_reviewer(reviewer: User, employee: User, what: str) -> None:
    if not can_review(reviewer, employee):
        raise PermissionDenied(f"You can only review {what} of your direct reports")
