"""
Custom Exceptions

Centralized exception definitions for better error handling.
Every exception carries a procedure error code which the handler in
main.py returns next to the detail message.
"""
from fastapi import HTTPException, status


class ProcedureError(HTTPException):
    """Base class for errors raised from procedures."""

    code = "INTERNAL_SERVER_ERROR"
    status_code_default = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: str = "", headers: dict = None):
        super().__init__(
            status_code=self.status_code_default,
            detail=detail or self.default_detail,
            headers=headers,
        )


class AuthenticationError(ProcedureError):
    """Raised when authentication fails."""

    code = "UNAUTHORIZED"
    status_code_default = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"

    def __init__(self, detail: str = ""):
        super().__init__(detail=detail, headers={"WWW-Authenticate": "Bearer"})


class PermissionDenied(ProcedureError):
    """Raised when the caller's role or ownership doesn't allow the action."""

    code = "FORBIDDEN"
    status_code_default = status.HTTP_403_FORBIDDEN
    default_detail = "Permission denied"


class NotFoundError(ProcedureError):
    """Raised when a referenced row doesn't exist."""

    code = "NOT_FOUND"
    status_code_default = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"

    def __init__(self, resource: str = "", detail: str = ""):
        if not detail and resource:
            detail = f"{resource} not found"
        super().__init__(detail=detail)


class ConflictError(ProcedureError):
    """Raised on uniqueness violations and references that block a delete."""

    code = "CONFLICT"
    status_code_default = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class InvalidInputError(ProcedureError):
    """Raised when input fails a business rule (schema errors are handled separately)."""

    code = "BAD_REQUEST"
    status_code_default = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"
