"""
Enqueue maintenance tasks from the host crontab.

Usage:
    python -m scripts.cron_jobs validate-transactions
    python -m scripts.cron_jobs expire-subscriptions purge-notifications
    python -m scripts.cron_jobs all

Example crontab:
    */30 * * * *  cd /srv/resumeforge && python -m scripts.cron_jobs validate-transactions
    15 0 * * *    cd /srv/resumeforge && python -m scripts.cron_jobs expire-subscriptions purge-notifications
"""
import sys
import os

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.logging import get_logger, setup_logging
from app.workers.tasks import CRON_TASKS

logger = get_logger(__name__)


def main(argv: list) -> int:
    jobs = list(CRON_TASKS) if argv == ["all"] else argv
    if not jobs:
        print(f"Usage: python -m scripts.cron_jobs <{'|'.join(CRON_TASKS)}|all> ...")
        return 2

    unknown = [job for job in jobs if job not in CRON_TASKS]
    if unknown:
        print(f"Unknown job(s): {', '.join(unknown)}")
        return 2

    for job in jobs:
        result = CRON_TASKS[job].delay()
        logger.info("cron_job_queued", job=job, task_id=result.id)
        print(f"  Queued {job} ({result.id})")
    return 0


if __name__ == "__main__":
    setup_logging()
    sys.exit(main(sys.argv[1:]))
