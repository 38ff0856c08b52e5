"""
Celery application configuration.

Redis is both broker and result backend. There is no beat schedule:
maintenance tasks are enqueued by scripts/cron_jobs.py (run from the host
crontab) or by an admin through the API.
"""
from celery import Celery

from app.core.config import settings

celery_app = Celery(
    "resumeforge",
    broker=settings.redis_url,
    backend=f"{settings.redis_url}/1",  # Use different DB for results
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],

    # Timezone
    timezone="UTC",
    enable_utc=True,

    # Task settings
    task_track_started=True,
    task_time_limit=300,
    task_soft_time_limit=240,

    # Worker settings
    worker_prefetch_multiplier=1,
    task_acks_late=True,

    result_expires=3600,

    task_default_retry_delay=60,
    task_max_retries=3,
)

celery_app.autodiscover_tasks(["app.workers"])
