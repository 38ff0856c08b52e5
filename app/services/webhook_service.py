"""
Webhook service - verified, de-duplicated payment events from vendors.

Each event is stored once per (gateway, event_id). A redelivery of an
event that was already processed is acknowledged without being applied
again; one that failed earlier is retried.
"""
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.models.payment_transaction import TransactionStatus
from app.payments import WebhookEvent, get_gateway_by_name
from app.repositories.payment_repository import PaymentTransactionRepository, WebhookEventRepository
from app.schemas.payment import WebhookAck
from app.services.payment_service import PaymentService

logger = get_logger(__name__)


class WebhookService:
    def __init__(self):
        self.event_repo = WebhookEventRepository()
        self.transaction_repo = PaymentTransactionRepository()
        self.payments = PaymentService()

    async def handle(
        self,
        db: AsyncSession,
        gateway_name: str,
        payload: bytes,
        signature: Optional[str],
    ) -> WebhookAck:
        """
        Raises:
            WebhookSignatureError: Signature missing or invalid
        """
        event = get_gateway_by_name(gateway_name).parse_webhook(payload, signature)

        record = await self.event_repo.get_by_event(db, event.gateway, event.event_id)
        if record and record.processed:
            logger.info("webhook_duplicate", gateway=event.gateway, event_id=event.event_id)
            return WebhookAck(duplicate=True)

        if record is None:
            try:
                record = await self.event_repo.create(
                    db,
                    gateway=event.gateway,
                    event_id=event.event_id,
                    event_type=event.event_type,
                    payload=event.payload,
                )
            except IntegrityError:
                # Concurrent delivery of the same event won the insert
                await db.rollback()
                logger.info("webhook_duplicate", gateway=event.gateway, event_id=event.event_id)
                return WebhookAck(duplicate=True)

        try:
            await self._apply(db, event)
        except Exception as exc:
            await db.rollback()
            await self._record_failure(db, event, str(exc))
            logger.error(
                "webhook_processing_failed",
                gateway=event.gateway,
                event_id=event.event_id,
                error=str(exc),
            )
            raise

        await self.event_repo.update(
            db,
            record,
            processed=True,
            processed_at=datetime.now(timezone.utc),
            error_message=None,
        )
        await db.commit()

        logger.info(
            "webhook_processed",
            gateway=event.gateway,
            event_type=event.event_type,
            outcome=event.outcome,
        )
        return WebhookAck()

    async def _apply(self, db: AsyncSession, event: WebhookEvent) -> None:
        if event.outcome == "ignored" or not event.order_id:
            return

        transaction = await self.transaction_repo.get_by_gateway_order(db, event.gateway, event.order_id)
        if transaction is None:
            logger.warning("webhook_unknown_order", gateway=event.gateway, order_id=event.order_id)
            return
        if transaction.status != TransactionStatus.PENDING.value:
            return

        if event.outcome == "completed":
            await self.payments.complete_transaction(db, transaction, payment_id=event.payment_id)
        elif event.outcome == "failed":
            await self.payments.fail_transaction(db, transaction, reason=event.event_type)

    async def _record_failure(self, db: AsyncSession, event: WebhookEvent, error: str) -> None:
        record = await self.event_repo.get_by_event(db, event.gateway, event.event_id)
        if record is None:
            record = await self.event_repo.create(
                db,
                gateway=event.gateway,
                event_id=event.event_id,
                event_type=event.event_type,
                payload=event.payload,
            )
        await self.event_repo.update(db, record, error_message=error[:2000])
        await db.commit()
