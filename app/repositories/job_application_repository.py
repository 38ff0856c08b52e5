"""
Job application repository.
"""
from typing import Dict, List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.job_application import JobApplication
from app.repositories.base import OwnedRepository


class JobApplicationRepository(OwnedRepository[JobApplication]):
    def __init__(self):
        super().__init__(JobApplication)

    async def get_all_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> List[JobApplication]:
        """Every application for the Kanban board, most recently moved first."""
        result = await db.execute(
            select(JobApplication)
            .where(JobApplication.user_id == user_id)
            .order_by(JobApplication.updated_at.desc())
        )
        return list(result.scalars().all())

    async def count_by_status(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> Dict[str, int]:
        result = await db.execute(
            select(JobApplication.status, func.count())
            .where(JobApplication.user_id == user_id)
            .group_by(JobApplication.status)
        )
        return {status: count for status, count in result.all()}
