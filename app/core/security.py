"""
Security utilities for authentication and authorization.
Handles JWT tokens, password hashing and login lockout timing.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Any
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.core.config import settings


# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(
    data: dict[str, Any],
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data to encode in the token
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def create_refresh_token(data: dict[str, Any]) -> str:
    """
    Create a JWT refresh token.

    Args:
        data: Payload data to encode in the token

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(days=settings.refresh_token_expire_days)
    to_encode.update({"exp": expire, "type": "refresh"})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload or None if invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
        )
        return payload
    except JWTError:
        return None


def verify_token_type(payload: dict[str, Any], expected_type: str) -> bool:
    """Verify that a token is of the expected type."""
    return payload.get("type") == expected_type


# ── Login lockout ─────────────────────────────────────────────────────────────


def lockout_remaining_minutes(
    lockout_until: Optional[datetime],
    now: Optional[datetime] = None,
) -> int:
    """Whole minutes left on a lockout (rounded up), 0 if not locked."""
    if lockout_until is None:
        return 0
    now = now or datetime.now(timezone.utc)
    if lockout_until.tzinfo is None:
        lockout_until = lockout_until.replace(tzinfo=timezone.utc)
    remaining = (lockout_until - now).total_seconds()
    if remaining <= 0:
        return 0
    return int(-(-remaining // 60))


def next_lockout(
    failed_attempts: int,
    now: Optional[datetime] = None,
) -> Optional[datetime]:
    """
    Lockout expiry to set after `failed_attempts` consecutive failures,
    or None while still under the threshold.
    """
    if failed_attempts < settings.max_failed_logins:
        return None
    now = now or datetime.now(timezone.utc)
    return now + timedelta(minutes=settings.lockout_minutes)
