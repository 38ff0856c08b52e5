"""
Job application tracker routes.

Create / update bodies are plain JSON objects: they go through the
job-application sanitizer, which rejects unknown fields and injection
signatures before anything is stored.
"""
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user
from app.models.job_application import ApplicationPriority, ApplicationStatus
from app.models.user import User
from app.schemas.base import PaginatedResponse
from app.schemas.job_application import (
    JOB_APPLICATION_EXAMPLE,
    BoardResponse,
    JobApplicationResponse,
    JobApplicationStats,
    StatusUpdateRequest,
)
from app.services.job_application_service import JobApplicationService

router = APIRouter(prefix="/job-applications", tags=["job-applications"])

application_service = JobApplicationService()


@router.get("/board", response_model=BoardResponse)
async def get_board(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Kanban board: one column per status, in pipeline order."""
    return await application_service.get_board(db, current_user)


@router.get("/stats", response_model=JobApplicationStats)
async def get_stats(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.get_stats(db, current_user)


@router.get("", response_model=PaginatedResponse[JobApplicationResponse])
async def list_applications(
    status_filter: Optional[ApplicationStatus] = Query(None, alias="status"),
    priority: Optional[ApplicationPriority] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.list_applications(
        db, current_user, status=status_filter, priority=priority, page=page, limit=limit
    )


@router.post("", response_model=JobApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    data: Dict[str, Any] = Body(..., examples=[JOB_APPLICATION_EXAMPLE]),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.create_application(db, current_user, data)


@router.get("/{application_id}", response_model=JobApplicationResponse)
async def get_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.get_application(db, current_user, application_id)


@router.patch("/{application_id}", response_model=JobApplicationResponse)
async def update_application(
    application_id: UUID,
    data: Dict[str, Any] = Body(..., examples=[{"notes": "Second round booked"}]),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Partial update; a changed status is recorded in the history."""
    return await application_service.update_application(db, current_user, application_id, data)


@router.patch("/{application_id}/status", response_model=JobApplicationResponse)
async def move_application(
    application_id: UUID,
    data: StatusUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Move a card to another column and append to its status history."""
    return await application_service.update_status(
        db, current_user, application_id, status=data.status, note=data.note
    )


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await application_service.delete_application(db, current_user, application_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
