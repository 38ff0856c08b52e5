"""
Admin service - platform statistics, user management and cron triggers.
"""
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, NotFoundException, UserNotFoundException
from app.core.logging import get_logger
from app.models.subscription import SubscriptionStatus
from app.models.user import User
from app.repositories.cover_letter_repository import CoverLetterRepository
from app.repositories.job_application_repository import JobApplicationRepository
from app.repositories.payment_repository import PaymentTransactionRepository
from app.repositories.resume_repository import ResumeRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.user_repository import UserRepository
from app.schemas.admin import AdminStatsResponse, AdminUserUpdate, CronRunResponse
from app.schemas.base import PaginatedResponse
from app.schemas.user import UserResponse

logger = get_logger(__name__)


class AdminService:
    def __init__(self):
        self.user_repo = UserRepository()
        self.resume_repo = ResumeRepository()
        self.cover_letter_repo = CoverLetterRepository()
        self.application_repo = JobApplicationRepository()
        self.subscription_repo = SubscriptionRepository()
        self.transaction_repo = PaymentTransactionRepository()

    async def get_stats(self, db: AsyncSession) -> AdminStatsResponse:
        return AdminStatsResponse(
            users_total=await self.user_repo.count(db),
            users_active=await self.user_repo.count_active(db),
            resumes_total=await self.resume_repo.count(db),
            cover_letters_total=await self.cover_letter_repo.count(db),
            job_applications_total=await self.application_repo.count(db),
            subscriptions_active=await self.subscription_repo.count_by_status(
                db, SubscriptionStatus.ACTIVE.value
            ),
            subscriptions_grace_period=await self.subscription_repo.count_by_status(
                db, SubscriptionStatus.GRACE_PERIOD.value
            ),
            revenue=await self.transaction_repo.revenue_by_currency(db),
        )

    async def list_users(
        self,
        db: AsyncSession,
        *,
        query: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[UserResponse]:
        users, total = await self.user_repo.search(
            db, query=query, is_active=is_active, page=page, limit=limit
        )
        return PaginatedResponse(
            items=[UserResponse.model_validate(u) for u in users],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    async def update_user(
        self,
        db: AsyncSession,
        admin: User,
        user_id: UUID,
        data: AdminUserUpdate,
    ) -> UserResponse:
        """Toggle a user's active / admin flags. Admins cannot demote or disable themselves."""
        user = await self.user_repo.get_by_id(db, user_id)
        if not user:
            raise UserNotFoundException()

        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        if user.id == admin.id and (updates.get("is_active") is False or updates.get("is_admin") is False):
            raise BadRequestException("You cannot disable or demote your own account")

        if updates:
            user = await self.user_repo.update(db, user, **updates)
            await db.commit()
            logger.info("admin_user_updated", admin_id=str(admin.id), user_id=str(user.id), **updates)
        return UserResponse.model_validate(user)

    def run_cron(self, job: str) -> CronRunResponse:
        """Enqueue a maintenance task by its job name."""
        from app.workers.tasks import CRON_TASKS

        task = CRON_TASKS.get(job)
        if task is None:
            raise NotFoundException(f"Unknown cron job: {job}", code="CRON_JOB_NOT_FOUND")

        result = task.delay()
        logger.info("cron_job_queued", job=job, task_id=result.id)
        return CronRunResponse(job=job, task_id=result.id)
