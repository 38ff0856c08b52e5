"""
Celery tasks for scheduled maintenance.

Tasks are thin entry points:
  1. Create a DB session (we're outside FastAPI's request cycle)
  2. Call a service method
  3. Return the result
"""
import asyncio

from app.workers.celery_app import celery_app
from app.core.database import async_session_maker
from app.core.logging import get_logger

logger = get_logger(__name__)


def run_async(coro):
    """
    Run async service code inside a synchronous Celery task.

    Each call gets a fresh event loop, closed afterwards.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@celery_app.task(bind=True, max_retries=3)
def validate_pending_transactions(self):
    """Fail PENDING payments the customer never completed."""
    return run_async(_validate_pending_transactions())


async def _validate_pending_transactions():
    from app.services.payment_service import PaymentService

    async with async_session_maker() as db:
        return await PaymentService().validate_pending_transactions(db)


@celery_app.task(bind=True, max_retries=3)
def expire_subscriptions(self):
    """Move ended subscriptions into the grace period, then to EXPIRED."""
    return run_async(_expire_subscriptions())


async def _expire_subscriptions():
    from app.services.payment_service import PaymentService

    async with async_session_maker() as db:
        return await PaymentService().expire_subscriptions(db)


@celery_app.task
def purge_expired_notifications():
    return run_async(_purge_expired_notifications())


async def _purge_expired_notifications():
    from app.services.notification_service import NotificationService

    async with async_session_maker() as db:
        deleted = await NotificationService().purge_expired(db)
        return {"deleted": deleted}


# Job name (as used in URLs and by scripts/cron_jobs.py) → task
CRON_TASKS = {
    "validate-transactions": validate_pending_transactions,
    "expire-subscriptions": expire_subscriptions,
    "purge-notifications": purge_expired_notifications,
}
