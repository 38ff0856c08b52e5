"""
Notification repository.
"""
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.notification import Notification
from app.repositories.base import OwnedRepository


class NotificationRepository(OwnedRepository[Notification]):
    def __init__(self):
        super().__init__(Notification)

    async def count_unread(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """Count unread notifications for a user."""
        result = await db.execute(
            select(func.count()).where(
                Notification.user_id == user_id,
                Notification.is_read == False,
            )
        )
        return result.scalar() or 0

    async def mark_all_read(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        """Mark every unread notification as read. Returns rows changed."""
        result = await db.execute(
            update(Notification)
            .where(
                Notification.user_id == user_id,
                Notification.is_read == False,
            )
            .values(is_read=True, read_at=datetime.now(timezone.utc))
        )
        return result.rowcount

    async def delete_expired(
        self,
        db: AsyncSession,
        now: datetime,
    ) -> int:
        result = await db.execute(
            delete(Notification).where(
                Notification.expires_at.isnot(None),
                Notification.expires_at < now,
            )
        )
        return result.rowcount
