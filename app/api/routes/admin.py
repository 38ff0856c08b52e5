"""
Admin routes - platform statistics, user management and cron triggers.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_admin_user
from app.models.user import User
from app.schemas.admin import AdminStatsResponse, AdminUserUpdate, CronRunResponse
from app.schemas.base import PaginatedResponse
from app.schemas.user import UserResponse
from app.services.admin_service import AdminService

router = APIRouter(prefix="/admin", tags=["admin"])

admin_service = AdminService()


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    admin: User = Depends(get_admin_user),
    db: AsyncSession = Depends(get_db),
):
    """Platform-wide counts and completed revenue per currency."""
    return await admin_service.get_stats(db)


@router.get("/users", response_model=PaginatedResponse[UserResponse])
async def list_users(
    q: Optional[str] = Query(None, max_length=100, description="Email or name contains"),
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    admin: User = Depends(get_admin_user),
    db: AsyncSession = Depends(get_db),
):
    return await admin_service.list_users(db, query=q, is_active=is_active, page=page, limit=limit)


@router.patch("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    data: AdminUserUpdate,
    admin: User = Depends(get_admin_user),
    db: AsyncSession = Depends(get_db),
):
    return await admin_service.update_user(db, admin, user_id, data)


@router.post("/cron/{job}/run", response_model=CronRunResponse)
async def run_cron_job(
    job: str,
    admin: User = Depends(get_admin_user),
):
    """Queue a maintenance task: validate-transactions, expire-subscriptions, purge-notifications."""
    return admin_service.run_cron(job)
