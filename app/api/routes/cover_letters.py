"""
Cover letter routes.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.rate_limit import limiter, RATE_AI, RATE_EXPORT
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.base import PaginatedResponse
from app.schemas.cover_letter import (
    CoverLetterCreate,
    CoverLetterGenerateRequest,
    CoverLetterResponse,
    CoverLetterUpdate,
)
from app.schemas.resume import DocumentResponse
from app.services.cover_letter_service import CoverLetterService

router = APIRouter(prefix="/cover-letters", tags=["cover-letters"])

cover_letter_service = CoverLetterService()


@router.post("/generate", response_model=CoverLetterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_AI)
async def generate_cover_letter(
    request: Request,
    data: CoverLetterGenerateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Draft a cover letter from a job description (and optionally a saved resume)."""
    return await cover_letter_service.generate_cover_letter(db, current_user, data)


@router.get("", response_model=PaginatedResponse[CoverLetterResponse])
async def list_cover_letters(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await cover_letter_service.list_cover_letters(db, current_user, page=page, limit=limit)


@router.post("", response_model=CoverLetterResponse, status_code=status.HTTP_201_CREATED)
async def create_cover_letter(
    data: CoverLetterCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await cover_letter_service.create_cover_letter(db, current_user, data)


@router.get("/{letter_id}", response_model=CoverLetterResponse)
async def get_cover_letter(
    letter_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await cover_letter_service.get_cover_letter(db, current_user, letter_id)


@router.patch("/{letter_id}", response_model=CoverLetterResponse)
async def update_cover_letter(
    letter_id: UUID,
    data: CoverLetterUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await cover_letter_service.update_cover_letter(db, current_user, letter_id, data)


@router.delete("/{letter_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cover_letter(
    letter_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await cover_letter_service.delete_cover_letter(db, current_user, letter_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{letter_id}/text", response_model=DocumentResponse)
@limiter.limit(RATE_EXPORT)
async def export_text(
    request: Request,
    letter_id: UUID,
    template: Optional[str] = Query(None, max_length=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await cover_letter_service.render_text(db, current_user, letter_id, template)
