"""
Resume routes - CRUD plus LaTeX / text / PDF export.
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.rate_limit import limiter, RATE_EXPORT
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.base import PaginatedResponse
from app.schemas.resume import (
    DocumentResponse,
    ResumeCreate,
    ResumeListItem,
    ResumePreviewRequest,
    ResumeResponse,
    ResumeUpdate,
    TemplateListResponse,
)
from app.services.resume_service import ResumeService

router = APIRouter(prefix="/resumes", tags=["resumes"])

resume_service = ResumeService()


@router.get("/templates", response_model=TemplateListResponse)
async def list_templates(
    kind: Optional[str] = Query(None, pattern="^(latex|text|cover_letter)$"),
):
    """Available layouts; `kind` narrows to latex, text or cover_letter."""
    return resume_service.list_templates(kind)


@router.post("/preview/latex", response_model=DocumentResponse)
@limiter.limit(RATE_EXPORT)
async def preview_latex(
    request: Request,
    data: ResumePreviewRequest,
    current_user: User = Depends(get_current_user),
):
    """Render unsaved resume content as LaTeX."""
    return resume_service.preview_latex(data.content, data.template)


@router.get("", response_model=PaginatedResponse[ResumeListItem])
async def list_resumes(
    drafts: Optional[bool] = Query(None, description="Only drafts (true) or only finished (false)"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await resume_service.list_resumes(db, current_user, drafts=drafts, page=page, limit=limit)


@router.post("", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def create_resume(
    data: ResumeCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await resume_service.create_resume(db, current_user, data)


@router.get("/{resume_id}", response_model=ResumeResponse)
async def get_resume(
    resume_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await resume_service.get_resume(db, current_user, resume_id)


@router.patch("/{resume_id}", response_model=ResumeResponse)
async def update_resume(
    resume_id: UUID,
    data: ResumeUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await resume_service.update_resume(db, current_user, resume_id, data)


@router.delete("/{resume_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_resume(
    resume_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await resume_service.delete_resume(db, current_user, resume_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{resume_id}/latex", response_model=DocumentResponse)
@limiter.limit(RATE_EXPORT)
async def export_latex(
    request: Request,
    resume_id: UUID,
    template: Optional[str] = Query(None, max_length=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """LaTeX source; unknown template ids fall back to "professional"."""
    return await resume_service.render_latex(db, current_user, resume_id, template)


@router.get("/{resume_id}/text", response_model=DocumentResponse)
@limiter.limit(RATE_EXPORT)
async def export_text(
    request: Request,
    resume_id: UUID,
    template: Optional[str] = Query(None, max_length=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await resume_service.render_text(db, current_user, resume_id, template)


@router.get("/{resume_id}/pdf")
@limiter.limit(RATE_EXPORT)
async def export_pdf(
    request: Request,
    resume_id: UUID,
    template: Optional[str] = Query(None, max_length=50),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    pdf, filename = await resume_service.render_pdf(db, current_user, resume_id, template)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
