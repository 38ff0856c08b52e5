"""
Workers package - Celery app and maintenance tasks.
"""
from app.workers.celery_app import celery_app
from app.workers.tasks import (
    CRON_TASKS,
    expire_subscriptions,
    purge_expired_notifications,
    validate_pending_transactions,
)

__all__ = [
    "celery_app",
    "CRON_TASKS",
    "expire_subscriptions",
    "purge_expired_notifications",
    "validate_pending_transactions",
]
