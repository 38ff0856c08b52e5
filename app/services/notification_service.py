"""
Notification service - in-app notifications.

Other services call `notify()` inside their own transaction; the caller
commits. Read / delete operations commit themselves.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotificationNotFoundException
from app.core.logging import get_logger
from app.models.notification import Notification, NotificationPriority, NotificationType
from app.repositories.notification_repository import NotificationRepository
from app.schemas.base import PaginatedResponse
from app.schemas.notification import NotificationResponse

logger = get_logger(__name__)

DEFAULT_TTL_DAYS = 90


class NotificationService:
    """Creates, lists and expires a user's notifications."""

    def __init__(self):
        self.notification_repo = NotificationRepository()

    async def notify(
        self,
        db: AsyncSession,
        user_id: UUID,
        type: NotificationType,
        title: str,
        message: str,
        *,
        priority: NotificationPriority = NotificationPriority.NORMAL,
        data: Optional[Dict[str, Any]] = None,
        action_url: Optional[str] = None,
        ttl_days: Optional[int] = DEFAULT_TTL_DAYS,
    ) -> Notification:
        """Add a notification to the session without committing."""
        expires_at = None
        if ttl_days:
            expires_at = datetime.now(timezone.utc) + timedelta(days=ttl_days)

        notification = await self.notification_repo.create(
            db,
            user_id=user_id,
            type=type.value,
            priority=priority.value,
            title=title,
            message=message,
            data=data or {},
            action_url=action_url,
            expires_at=expires_at,
        )
        logger.info("notification_created", user_id=str(user_id), type=type.value)
        return notification

    async def list_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        *,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[NotificationResponse]:
        filters = [Notification.is_read == False] if unread_only else None
        items, total = await self.notification_repo.find_for_user(
            db,
            user_id,
            filters=filters,
            page=page,
            limit=limit,
            order_by=Notification.created_at.desc(),
        )
        return PaginatedResponse(
            items=[NotificationResponse.model_validate(n) for n in items],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    async def mark_read(
        self,
        db: AsyncSession,
        user_id: UUID,
        notification_id: UUID,
    ) -> NotificationResponse:
        notification = await self._get(db, user_id, notification_id)
        if not notification.is_read:
            notification = await self.notification_repo.update(
                db,
                notification,
                is_read=True,
                read_at=datetime.now(timezone.utc),
            )
            await db.commit()
        return NotificationResponse.model_validate(notification)

    async def mark_all_read(self, db: AsyncSession, user_id: UUID) -> int:
        count = await self.notification_repo.mark_all_read(db, user_id)
        await db.commit()
        return count

    async def delete(self, db: AsyncSession, user_id: UUID, notification_id: UUID) -> None:
        notification = await self._get(db, user_id, notification_id)
        await self.notification_repo.delete(db, notification.id)
        await db.commit()

    async def unread_count(self, db: AsyncSession, user_id: UUID) -> int:
        return await self.notification_repo.count_unread(db, user_id)

    async def purge_expired(self, db: AsyncSession) -> int:
        """Delete notifications past their expiry. Used by the cron task."""
        deleted = await self.notification_repo.delete_expired(db, datetime.now(timezone.utc))
        await db.commit()
        logger.info("notifications_purged", deleted=deleted)
        return deleted

    async def _get(self, db: AsyncSession, user_id: UUID, notification_id: UUID) -> Notification:
        notification = await self.notification_repo.get_for_user(db, notification_id, user_id)
        if not notification:
            raise NotificationNotFoundException()
        return notification
