"""
Cover letter service - CRUD, plain-text rendering and AI drafting.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core import ai
from app.core.exceptions import CoverLetterNotFoundException, ResumeNotFoundException
from app.core.logging import get_logger
from app.documents import registry
from app.models.cover_letter import CoverLetter
from app.models.notification import NotificationType
from app.models.user import User
from app.repositories.cover_letter_repository import CoverLetterRepository
from app.repositories.resume_repository import ResumeRepository
from app.sanitization import clean_text, sanitize_job_description, strict_text
from app.sanitization.text import slug_text
from app.schemas.base import PaginatedResponse
from app.schemas.cover_letter import (
    CoverLetterCreate,
    CoverLetterGenerateRequest,
    CoverLetterResponse,
    CoverLetterUpdate,
)
from app.schemas.resume import DocumentResponse
from app.services.notification_service import NotificationService

logger = get_logger(__name__)

MAX_BODY = 10000

_STRICT = {"title": 200, "company": 200, "recipient_name": 100, "job_title": 200}


def _clean_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for name, max_length in _STRICT.items():
        if name in fields:
            cleaned[name] = strict_text(
                fields[name], name, max_length=max_length, required=name == "title"
            ) or None
    if "body" in fields:
        cleaned["body"] = clean_text(fields["body"], "body", max_length=MAX_BODY)
    if fields.get("template") is not None:
        cleaned["template"] = registry.resolve_template_id(
            "cover_letter", slug_text(fields["template"], "template")
        )
    if fields.get("is_draft") is not None:
        cleaned["is_draft"] = fields["is_draft"]
    if "resume_id" in fields:
        cleaned["resume_id"] = fields["resume_id"]
    return cleaned


class CoverLetterService:
    """Cover letter CRUD and generation."""

    def __init__(self):
        self.letter_repo = CoverLetterRepository()
        self.resume_repo = ResumeRepository()
        self.notifications = NotificationService()

    async def list_cover_letters(
        self,
        db: AsyncSession,
        user: User,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[CoverLetterResponse]:
        items, total = await self.letter_repo.find_for_user(db, user.id, page=page, limit=limit)
        return PaginatedResponse(
            items=[CoverLetterResponse.model_validate(c) for c in items],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    async def get_cover_letter(
        self, db: AsyncSession, user: User, letter_id: UUID
    ) -> CoverLetterResponse:
        return CoverLetterResponse.model_validate(await self._get(db, user, letter_id))

    async def create_cover_letter(
        self,
        db: AsyncSession,
        user: User,
        data: CoverLetterCreate,
    ) -> CoverLetterResponse:
        fields = _clean_fields(data.model_dump())
        if fields.get("resume_id"):
            await self._check_resume(db, user, fields["resume_id"])
        letter = await self._create(db, user, fields)
        await db.commit()
        return CoverLetterResponse.model_validate(letter)

    async def update_cover_letter(
        self,
        db: AsyncSession,
        user: User,
        letter_id: UUID,
        data: CoverLetterUpdate,
    ) -> CoverLetterResponse:
        letter = await self._get(db, user, letter_id)
        fields = _clean_fields(data.model_dump(exclude_unset=True))
        if fields.get("resume_id"):
            await self._check_resume(db, user, fields["resume_id"])

        if fields:
            letter = await self.letter_repo.update(db, letter, **fields)
            await db.commit()
        return CoverLetterResponse.model_validate(letter)

    async def delete_cover_letter(self, db: AsyncSession, user: User, letter_id: UUID) -> None:
        letter = await self._get(db, user, letter_id)
        await self.letter_repo.delete(db, letter.id)
        await db.commit()

    async def render_text(
        self,
        db: AsyncSession,
        user: User,
        letter_id: UUID,
        template: Optional[str] = None,
    ) -> DocumentResponse:
        """
        Lay the letter out as plain text. Sender details come from the
        linked resume when there is one, otherwise from the account.
        """
        letter = await self._get(db, user, letter_id)
        resume_content: Dict[str, Any] = {}
        if letter.resume_id:
            resume = await self.resume_repo.get_for_user(db, letter.resume_id, user.id)
            resume_content = resume.content if resume else {}

        location = resume_content.get("location") or ", ".join(
            p for p in (resume_content.get("city"), resume_content.get("country")) if p
        )
        template_id = registry.resolve_template_id("cover_letter", template or letter.template)
        content = registry.generate_cover_letter(
            {
                "sender_name": resume_content.get("full_name") or user.full_name,
                "sender_email": resume_content.get("email") or user.email,
                "sender_phone": resume_content.get("phone"),
                "sender_location": location,
                "recipient_name": letter.recipient_name,
                "company": letter.company,
                "job_title": letter.job_title,
                "body": letter.body,
                "date": datetime.now(timezone.utc).strftime("%B %d, %Y"),
            },
            template_id,
        )
        return DocumentResponse(template=template_id, format="text", content=content)

    async def generate_cover_letter(
        self,
        db: AsyncSession,
        user: User,
        data: CoverLetterGenerateRequest,
    ) -> CoverLetterResponse:
        """Draft the body with the LLM and save it as a new draft letter."""
        job_description = sanitize_job_description(data.job_description)
        company = strict_text(data.company, "company", required=True)
        job_title = strict_text(data.job_title, "job_title", required=True)
        recipient = strict_text(data.recipient_name, "recipient_name", max_length=100) or None
        template = registry.resolve_template_id("cover_letter", slug_text(data.template, "template"))

        resume_content = None
        if data.resume_id:
            resume = await self._check_resume(db, user, data.resume_id)
            resume_content = resume.content

        body = await ai.generate_cover_letter_body(
            job_title=job_title,
            company=company,
            job_description=job_description,
            resume=resume_content,
            recipient_name=recipient,
            style=template,
        )
        logger.info("cover_letter_generated", user_id=str(user.id), length=len(body))

        letter = await self._create(
            db,
            user,
            {
                "title": f"{job_title} at {company}"[:200],
                "company": company,
                "job_title": job_title,
                "recipient_name": recipient,
                "body": clean_text(body, "body", max_length=MAX_BODY),
                "template": template,
                "is_draft": True,
                "resume_id": data.resume_id,
            },
        )
        await db.commit()
        return CoverLetterResponse.model_validate(letter)

    async def _create(self, db: AsyncSession, user: User, fields: Dict[str, Any]) -> CoverLetter:
        letter = await self.letter_repo.create(db, user_id=user.id, **fields)
        await self.notifications.notify(
            db,
            user.id,
            NotificationType.COVER_LETTER_CREATED,
            "Cover letter created",
            f'"{letter.title}" has been saved.',
            data={"cover_letter_id": str(letter.id)},
            action_url=f"/cover-letters/{letter.id}",
        )
        logger.info("cover_letter_created", user_id=str(user.id), cover_letter_id=str(letter.id))
        return letter

    async def _check_resume(self, db: AsyncSession, user: User, resume_id: UUID):
        resume = await self.resume_repo.get_for_user(db, resume_id, user.id)
        if not resume:
            raise ResumeNotFoundException()
        return resume

    async def _get(self, db: AsyncSession, user: User, letter_id: UUID) -> CoverLetter:
        letter = await self.letter_repo.get_for_user(db, letter_id, user.id)
        if not letter:
            raise CoverLetterNotFoundException()
        return letter
