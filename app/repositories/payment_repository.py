"""
Payment transaction and webhook event repositories.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.payment_transaction import PaymentTransaction, TransactionStatus
from app.models.payment_webhook_event import PaymentWebhookEvent
from app.repositories.base import BaseRepository, OwnedRepository


class PaymentTransactionRepository(OwnedRepository[PaymentTransaction]):
    def __init__(self):
        super().__init__(PaymentTransaction)

    async def get_by_gateway_order(
        self,
        db: AsyncSession,
        gateway: str,
        order_id: str,
    ) -> Optional[PaymentTransaction]:
        result = await db.execute(
            select(PaymentTransaction).where(
                PaymentTransaction.gateway == gateway,
                PaymentTransaction.gateway_order_id == order_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_stale_pending(
        self,
        db: AsyncSession,
        created_before: datetime,
    ) -> List[PaymentTransaction]:
        """PENDING transactions created before the cutoff."""
        result = await db.execute(
            select(PaymentTransaction).where(
                PaymentTransaction.status == TransactionStatus.PENDING.value,
                PaymentTransaction.created_at < created_before,
            )
        )
        return list(result.scalars().all())

    async def revenue_by_currency(self, db: AsyncSession) -> dict:
        """Sum of COMPLETED amounts keyed by currency."""
        result = await db.execute(
            select(PaymentTransaction.currency, func.coalesce(func.sum(PaymentTransaction.amount), 0))
            .where(PaymentTransaction.status == TransactionStatus.COMPLETED.value)
            .group_by(PaymentTransaction.currency)
        )
        return {currency: Decimal(str(total)) for currency, total in result.all()}


class WebhookEventRepository(BaseRepository[PaymentWebhookEvent]):
    def __init__(self):
        super().__init__(PaymentWebhookEvent)

    async def get_by_event(
        self,
        db: AsyncSession,
        gateway: str,
        event_id: str,
    ) -> Optional[PaymentWebhookEvent]:
        result = await db.execute(
            select(PaymentWebhookEvent).where(
                PaymentWebhookEvent.gateway == gateway,
                PaymentWebhookEvent.event_id == event_id,
            )
        )
        return result.scalar_one_or_none()
