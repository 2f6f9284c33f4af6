"""
API Dependencies

Reusable FastAPI dependencies for authentication and authorization.
Every protected procedure depends on one of get_current_user,
require_manager or require_admin.
"""
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from hrportal.database import get_db
from hrportal.models.user import User, UserRole
from hrportal.core.security import decode_access_token
from hrportal.core.exceptions import AuthenticationError, PermissionDenied
from hrportal.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

# auto_error=False so a missing header surfaces as our UNAUTHORIZED error
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Get current authenticated user.

    This dependency:
    1. Validates JWT token
    2. Loads user from database
    3. Checks the account is active
    """
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise AuthenticationError("Invalid or expired token")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")

    # PERFORMANCE NOTE: This is a DB query on every authenticated request
    user = db.query(User).filter(User.id == user_id).first()

    if not user:
        logger.warning(f"Token for unknown user: {user_id}")
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise PermissionDenied("Account is inactive")

    return user


async def require_manager(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Require manager role or higher.

    Managers and admins can access, employees cannot.
    """
    if not current_user.has_permission(UserRole.MANAGER):
        log_security_event(
            "forbidden_action",
            {"user_id": current_user.id, "required_role": UserRole.MANAGER.value},
            logger,
        )
        raise PermissionDenied("Manager privileges required")
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_user)
) -> User:
    """
    Require admin role.

    Use this dependency for admin-only endpoints.
    """
    if current_user.role != UserRole.ADMIN:
        log_security_event(
            "forbidden_action",
            {"user_id": current_user.id, "required_role": UserRole.ADMIN.value},
            logger,
        )
        raise PermissionDenied("Admin privileges required")
    return current_user
