"""
Resume service - CRUD over stored resumes and document rendering.

Content is sanitized field by field before it is stored, so the
renderers only ever see cleaned data.
"""
import re
from typing import Any, Dict, Mapping, Optional, Tuple
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ResumeNotFoundException
from app.core.logging import get_logger
from app.documents import registry
from app.models.notification import NotificationType
from app.models.resume import Resume
from app.models.user import User
from app.repositories.resume_repository import ResumeRepository
from app.sanitization import sanitize_resume_data, strict_text, validate_resume_structure
from app.sanitization.text import slug_text
from app.schemas.base import PaginatedResponse
from app.schemas.resume import (
    DocumentResponse,
    ResumeCreate,
    ResumeListItem,
    ResumeResponse,
    ResumeUpdate,
    TemplateInfo,
    TemplateListResponse,
)
from app.services.notification_service import NotificationService

logger = get_logger(__name__)

_FILENAME_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


def prepare_content(content: Mapping[str, Any], target_job_title: Optional[str]) -> Dict[str, Any]:
    """Validate and sanitize resume content; the row's job title wins."""
    data = dict(content or {})
    if target_job_title:
        data["target_job_title"] = target_job_title
    validate_resume_structure(data)
    return sanitize_resume_data(data)


class ResumeService:
    """Resume CRUD and LaTeX / text / PDF generation."""

    def __init__(self):
        self.resume_repo = ResumeRepository()
        self.notifications = NotificationService()

    async def list_resumes(
        self,
        db: AsyncSession,
        user: User,
        *,
        drafts: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[ResumeListItem]:
        filters = [Resume.is_draft == drafts] if drafts is not None else None
        items, total = await self.resume_repo.find_for_user(
            db, user.id, filters=filters, page=page, limit=limit
        )
        return PaginatedResponse(
            items=[ResumeListItem.model_validate(r) for r in items],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    async def get_resume(self, db: AsyncSession, user: User, resume_id: UUID) -> ResumeResponse:
        return ResumeResponse.model_validate(await self._get(db, user, resume_id))

    async def create_resume(
        self,
        db: AsyncSession,
        user: User,
        data: ResumeCreate,
    ) -> ResumeResponse:
        content = prepare_content(data.content, data.target_job_title)
        resume = await self.resume_repo.create(
            db,
            user_id=user.id,
            title=strict_text(data.title, "title") or "Untitled Resume",
            target_job_title=content["target_job_title"],
            template=slug_text(data.template, "template") or registry.DEFAULT_RESUME_TEMPLATE,
            is_draft=data.is_draft,
            content=content,
        )
        await self.notifications.notify(
            db,
            user.id,
            NotificationType.RESUME_CREATED,
            "Resume created",
            f'"{resume.title}" is ready to edit.',
            data={"resume_id": str(resume.id)},
            action_url=f"/resumes/{resume.id}",
        )
        await db.commit()

        logger.info("resume_created", user_id=str(user.id), resume_id=str(resume.id))
        return ResumeResponse.model_validate(resume)

    async def update_resume(
        self,
        db: AsyncSession,
        user: User,
        resume_id: UUID,
        data: ResumeUpdate,
    ) -> ResumeResponse:
        resume = await self._get(db, user, resume_id)
        fields = data.model_dump(exclude_unset=True)
        updates: Dict[str, Any] = {}

        if fields.get("title") is not None:
            updates["title"] = strict_text(fields["title"], "title", required=True)
        if fields.get("template") is not None:
            updates["template"] = slug_text(fields["template"], "template") or resume.template
        if fields.get("is_draft") is not None:
            updates["is_draft"] = fields["is_draft"]

        if fields.get("content") is not None or fields.get("target_job_title"):
            content = fields.get("content")
            if content is None:
                content = resume.content
            target = fields.get("target_job_title") or content.get("target_job_title") or resume.target_job_title
            updates["content"] = prepare_content(content, target)
            updates["target_job_title"] = updates["content"]["target_job_title"]

        if updates:
            resume = await self.resume_repo.update(db, resume, **updates)
            await db.commit()
        return ResumeResponse.model_validate(resume)

    async def delete_resume(self, db: AsyncSession, user: User, resume_id: UUID) -> None:
        resume = await self._get(db, user, resume_id)
        await self.resume_repo.delete(db, resume.id)
        await db.commit()
        logger.info("resume_deleted", user_id=str(user.id), resume_id=str(resume_id))

    # ── Rendering ────────────────────────────────────────────────────────────

    async def render_latex(
        self,
        db: AsyncSession,
        user: User,
        resume_id: UUID,
        template: Optional[str] = None,
    ) -> DocumentResponse:
        resume = await self._get(db, user, resume_id)
        template_id = registry.resolve_template_id("latex", template or resume.template)
        return DocumentResponse(
            template=template_id,
            format="latex",
            content=registry.generate_latex_resume(resume.content, template_id),
        )

    async def render_text(
        self,
        db: AsyncSession,
        user: User,
        resume_id: UUID,
        template: Optional[str] = None,
    ) -> DocumentResponse:
        resume = await self._get(db, user, resume_id)
        template_id = registry.resolve_template_id("text", template or resume.template)
        return DocumentResponse(
            template=template_id,
            format="text",
            content=registry.generate_text_resume(resume.content, template_id),
        )

    async def render_pdf(
        self,
        db: AsyncSession,
        user: User,
        resume_id: UUID,
        template: Optional[str] = None,
    ) -> Tuple[bytes, str]:
        """PDF bytes plus a download filename."""
        resume = await self._get(db, user, resume_id)
        pdf = registry.generate_resume_pdf(resume.content, template or resume.template)
        filename = _FILENAME_UNSAFE.sub("-", resume.title).strip("-").lower() or "resume"
        logger.info("resume_pdf_rendered", resume_id=str(resume.id), size=len(pdf))
        return pdf, f"{filename}.pdf"

    def preview_latex(self, content: Mapping[str, Any], template: Optional[str]) -> DocumentResponse:
        """Render unsaved content; sanitized the same way as a save."""
        cleaned = prepare_content(content, content.get("target_job_title") if content else None)
        template_id = registry.resolve_template_id("latex", template)
        return DocumentResponse(
            template=template_id,
            format="latex",
            content=registry.generate_latex_resume(cleaned, template_id),
        )

    def list_templates(self, kind: Optional[str] = None) -> TemplateListResponse:
        return TemplateListResponse(
            templates=[TemplateInfo(**info) for info in registry.list_templates(kind)]
        )

    async def _get(self, db: AsyncSession, user: User, resume_id: UUID) -> Resume:
        resume = await self.resume_repo.get_for_user(db, resume_id, user.id)
        if not resume:
            raise ResumeNotFoundException()
        return resume
