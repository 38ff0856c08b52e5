"""
Authentication service - registration, login with lockout, token refresh.
"""
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import (
    verify_password,
    hash_password,
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_token_type,
    lockout_remaining_minutes,
    next_lockout,
)
from app.core.exceptions import (
    AccountLockedException,
    InvalidCredentialsException,
    EmailAlreadyExistsException,
    InvalidTokenException,
)
from app.core.logging import get_logger
from app.models.notification import NotificationType
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.sanitization import sanitize_email, strict_text
from app.schemas.auth import TokenResponse
from app.services.notification_service import NotificationService

logger = get_logger(__name__)


class AuthService:
    """Handles all authentication business logic."""

    def __init__(self):
        self.user_repo = UserRepository()
        self.notifications = NotificationService()

    async def register(
        self,
        db: AsyncSession,
        *,
        email: str,
        password: str,
        full_name: Optional[str] = None,
    ) -> TokenResponse:
        """
        Register a new user and return tokens.

        Raises:
            EmailAlreadyExistsException: If email is already registered.
        """
        email = sanitize_email(email, "email")
        if await self.user_repo.email_exists(db, email):
            raise EmailAlreadyExistsException()

        user = await self.user_repo.create(
            db,
            email=email,
            password_hash=hash_password(password),
            full_name=strict_text(full_name, "full_name", max_length=100) or None,
        )
        await self.notifications.notify(
            db,
            user.id,
            NotificationType.SYSTEM_ANNOUNCEMENT,
            "Welcome to ResumeForge",
            "Start by creating your first resume.",
            action_url="/resumes/new",
        )
        await db.commit()
        logger.info("user_registered", user_id=str(user.id))

        return self._generate_tokens(user)

    async def login(
        self,
        db: AsyncSession,
        *,
        email: str,
        password: str,
    ) -> TokenResponse:
        """
        Authenticate user and return tokens.

        After `max_failed_logins` consecutive failures the account is locked
        for `lockout_minutes`; a successful login resets the counter.

        Raises:
            InvalidCredentialsException: If email/password is wrong.
            AccountLockedException: While the account is locked.
        """
        user = await self.user_repo.get_by_email(db, email.strip().lower())
        if not user or not user.is_active:
            raise InvalidCredentialsException()

        now = datetime.now(timezone.utc)
        remaining = lockout_remaining_minutes(user.lockout_until, now)
        if remaining:
            logger.warning("login_while_locked", user_id=str(user.id), minutes=remaining)
            raise AccountLockedException(remaining)

        if not verify_password(password, user.password_hash):
            attempts = (user.failed_login_attempts or 0) + 1
            lockout_until = next_lockout(attempts, now)
            if lockout_until:
                user.failed_login_attempts = 0
                user.lockout_until = lockout_until
            else:
                user.failed_login_attempts = attempts
            await db.commit()

            logger.warning("login_failed", user_id=str(user.id), attempts=attempts)
            if lockout_until:
                logger.warning("account_locked", user_id=str(user.id))
                raise AccountLockedException(settings.lockout_minutes)
            raise InvalidCredentialsException()

        user.failed_login_attempts = 0
        user.lockout_until = None
        user.last_seen_at = now
        await db.commit()

        return self._generate_tokens(user)

    async def refresh(
        self,
        db: AsyncSession,
        *,
        refresh_token: str,
    ) -> TokenResponse:
        """
        Issue new tokens using a valid refresh token.

        Raises:
            InvalidTokenException: If refresh token is invalid or expired.
        """
        payload = decode_token(refresh_token)

        if not payload or not verify_token_type(payload, "refresh"):
            raise InvalidTokenException()

        try:
            user_id = UUID(payload.get("sub") or "")
        except ValueError:
            raise InvalidTokenException()

        user = await self.user_repo.get_active_by_id(db, user_id)
        if not user:
            raise InvalidTokenException()

        return self._generate_tokens(user)

    def _generate_tokens(self, user: User) -> TokenResponse:
        """Generate access and refresh tokens for a user."""
        access_token = create_access_token({"sub": str(user.id)})
        refresh_token = create_refresh_token({"sub": str(user.id)})

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=settings.access_token_expire_minutes * 60,
        )
