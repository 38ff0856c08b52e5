"""
Billing details repository.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.billing_details import BillingDetails
from app.repositories.base import BaseRepository


class BillingRepository(BaseRepository[BillingDetails]):
    def __init__(self):
        super().__init__(BillingDetails)

    async def get_by_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Optional[BillingDetails]:
        result = await db.execute(
            select(BillingDetails).where(BillingDetails.user_id == user_id)
        )
        return result.scalar_one_or_none()
