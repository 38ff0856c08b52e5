"""
Subscription repository.
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.subscription import Subscription, SubscriptionStatus
from app.repositories.base import OwnedRepository

_LIVE_STATUSES = (SubscriptionStatus.ACTIVE.value, SubscriptionStatus.GRACE_PERIOD.value)


class SubscriptionRepository(OwnedRepository[Subscription]):
    def __init__(self):
        super().__init__(Subscription)

    async def get_current(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Optional[Subscription]:
        """The user's ACTIVE or GRACE_PERIOD subscription with the latest end date."""
        result = await db.execute(
            select(Subscription)
            .where(
                Subscription.user_id == user_id,
                Subscription.status.in_(_LIVE_STATUSES),
            )
            .order_by(Subscription.end_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def find_ended(
        self,
        db: AsyncSession,
        *,
        status: str,
        ended_before: datetime,
    ) -> List[Subscription]:
        """Subscriptions in `status` whose end date is before `ended_before`."""
        result = await db.execute(
            select(Subscription).where(
                Subscription.status == status,
                Subscription.end_date < ended_before,
            )
        )
        return list(result.scalars().all())

    async def count_by_status(self, db: AsyncSession, status: str) -> int:
        result = await db.execute(
            select(func.count()).select_from(Subscription).where(Subscription.status == status)
        )
        return result.scalar() or 0
