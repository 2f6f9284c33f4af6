"""
Authentication Endpoints

Login, self-registration, the current user's profile, password change
and the forgot-password flow.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime, timedelta

from hrportal.database import get_db
from hrportal.models.user import User, PasswordResetToken
from hrportal.schemas.base import SuccessResponse, MessageResponse
from hrportal.schemas.auth import (
    LoginRequest,
    TokenResponse,
    RegisterRequest,
    RegisterResponse,
    MeResponse,
    ChangePasswordRequest,
    PasswordResetRequest,
    PasswordResetRequestResponse,
    ResetPasswordRequest,
)
from hrportal.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    generate_reset_token,
)
from hrportal.core.exceptions import AuthenticationError, PermissionDenied, InvalidInputError
from hrportal.api.deps import get_current_user
from hrportal.services.employees import create_employee
from hrportal.config import get_settings
from hrportal.utils.logging import log_security_event, get_logger

logger = get_logger(__name__)
settings = get_settings()

router = APIRouter(tags=["auth"])

RESET_MESSAGE = "If the email exists, a password reset link has been sent"


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate with email and password and return a JWT.

    SECURITY: Unknown email and wrong password produce the same error
    to prevent user enumeration.
    """
    user = db.query(User).filter(User.email == credentials.email).first()

    if not user:
        log_security_event(
            "failed_login",
            {"reason": "user_not_found", "email": credentials.email},
            logger
        )
        raise AuthenticationError("Invalid email or password")

    if not verify_password(credentials.password, user.password_hash):
        log_security_event(
            "failed_login",
            {"reason": "invalid_password", "user_id": user.id},
            logger
        )
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        log_security_event(
            "failed_login",
            {"reason": "user_inactive", "user_id": user.id},
            logger
        )
        raise PermissionDenied("Account is inactive")

    token = create_access_token(user.id)

    logger.info(f"Successful login: user={user.id}")

    return {"token": token, "user": user}


@router.post("/register", response_model=RegisterResponse)
async def register(
    registration: RegisterRequest,
    db: Session = Depends(get_db)
):
    """
    Self-registration.

    Creates the user and allocates this year's leave balances from
    each leave type's default allocation.
    """
    user = create_employee(db, **registration.model_dump())
    db.commit()

    logger.info(f"User registered: {user.id} ({user.employee_id})")

    return {"user_id": user.id}


@router.post("/getMe", response_model=MeResponse)
async def get_me(
    current_user: User = Depends(get_current_user)
):
    """Full profile of the authenticated user, with department and manager."""
    return current_user


@router.post("/changePassword", response_model=SuccessResponse)
async def change_password(
    request: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    if not verify_password(request.old_password, current_user.password_hash):
        log_security_event(
            "failed_password_change",
            {"user_id": current_user.id},
            logger
        )
        raise AuthenticationError("Current password is incorrect")

    current_user.password_hash = get_password_hash(request.new_password)
    db.commit()

    logger.info(f"Password changed: user={current_user.id}")

    return {"success": True}


@router.post("/requestPasswordReset", response_model=PasswordResetRequestResponse)
async def request_password_reset(
    request: PasswordResetRequest,
    db: Session = Depends(get_db)
):
    """
    Start the forgot-password flow.

    Always reports success so the response doesn't reveal which
    emails are registered. Any previous token for the user is replaced.

    NOTE: E-mail delivery isn't wired up. The reset link is logged, and in
    development the token is also returned so the flow can be completed.
    """
    user = db.query(User).filter(User.email == request.email).first()

    if not user:
        logger.info("Password reset requested for unknown email")
        return {"message": RESET_MESSAGE}

    db.query(PasswordResetToken).filter(PasswordResetToken.user_id == user.id).delete()

    token = generate_reset_token()
    db.add(PasswordResetToken(
        user_id=user.id,
        token=token,
        expires_at=datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES),
    ))
    db.commit()

    log_security_event("password_reset_requested", {"user_id": user.id}, logger)

    if settings.ENVIRONMENT == "development":
        logger.info(f"Password reset link: {settings.BASE_URL}/reset-password/{token}")
        return {"message": RESET_MESSAGE, "token": token}

    return {"message": RESET_MESSAGE}


@router.post("/resetPassword", response_model=MessageResponse)
async def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Complete the forgot-password flow. Tokens are single use."""
    reset_token = db.query(PasswordResetToken).filter(
        PasswordResetToken.token == request.token
    ).first()

    if not reset_token:
        raise InvalidInputError("Invalid or expired reset token")

    if reset_token.expires_at < datetime.utcnow():
        db.delete(reset_token)
        db.commit()
        raise InvalidInputError("Reset token has expired")

    user = db.query(User).filter(User.id == reset_token.user_id).first()
    user.password_hash = get_password_hash(request.new_password)
    db.delete(reset_token)
    db.commit()

    log_security_event("password_reset_completed", {"user_id": user.id}, logger)

    return {"message": "Password has been reset successfully"}
