"""
Security Module

Handles password hashing, JWT token generation/validation and
password reset tokens.

SECURITY NOTES:
- Passwords are hashed with bcrypt; rounds come from settings so tests can lower them
- JWT tokens expire after ACCESS_TOKEN_EXPIRE_MINUTES
- Reset tokens are 32 random bytes, hex encoded
"""
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
import secrets
from jose import JWTError, jwt
from passlib.context import CryptContext
from hrportal.config import get_settings

settings = get_settings()

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password using bcrypt.

    NOTE: This is intentionally slow. Don't call this in tight loops.
    """
    return pwd_context.hash(password)


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token for a user.

    Token payload:
    - sub: user id (as string, JWT requires it)
    - exp: expiration timestamp
    - iat: issued at timestamp
    """
    now = datetime.utcnow()
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = {
        "sub": str(user_id),
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode and verify a JWT token.

    Returns the payload if valid, None if invalid/expired.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        # Token invalid, expired, or tampered with
        return None


def generate_reset_token() -> str:
    """Random 64 hex character token for password reset links."""
    return secrets.token_hex(32)
