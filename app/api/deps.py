"""
API dependencies for dependency injection.
"""
from typing import Optional
from uuid import UUID
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import decode_token, verify_token_type
from app.core.exceptions import (
    UnauthorizedException,
    InvalidTokenException,
    ForbiddenException,
)
from app.models.user import User
from app.repositories.user_repository import UserRepository


# Security scheme
security = HTTPBearer(auto_error=False)

user_repo = UserRepository()


def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Bearer header wins; otherwise the HTTP-only session cookie set at login."""
    if credentials:
        return credentials.credentials
    return request.cookies.get(settings.auth_cookie_name)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Get the current authenticated user.

    Raises:
        UnauthorizedException: If no token provided
        InvalidTokenException: If token is invalid, expired, or the user is gone
    """
    token = _extract_token(request, credentials)
    if not token:
        raise UnauthorizedException("Authentication required")

    payload = decode_token(token)

    if not payload:
        raise InvalidTokenException()

    if not verify_token_type(payload, "access"):
        raise InvalidTokenException()

    try:
        user_id = UUID(payload.get("sub") or "")
    except ValueError:
        raise InvalidTokenException()

    user = await user_repo.get_active_by_id(db, user_id)
    if not user:
        raise InvalidTokenException()

    # Rate limiter keys on this
    request.state.current_user = user
    return user


async def get_admin_user(
    current_user: User = Depends(get_current_user),
) -> User:
    """
    Get current user, ensuring they are an admin.

    Raises:
        ForbiddenException: If user is not an admin
    """
    if not current_user.is_admin:
        raise ForbiddenException("Admin access required")
    return current_user

