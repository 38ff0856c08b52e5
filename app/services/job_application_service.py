"""
Job application service - tracker CRUD and the Kanban board.

Every status change appends {status, changed_at, note} to the row's
status_history, so the board can show how an application moved.
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    CoverLetterNotFoundException,
    JobApplicationNotFoundException,
    ResumeNotFoundException,
    SanitizationError,
)
from app.core.logging import get_logger
from app.models.job_application import ApplicationPriority, ApplicationStatus, JobApplication
from app.models.notification import NotificationType
from app.models.user import User
from app.repositories.cover_letter_repository import CoverLetterRepository
from app.repositories.job_application_repository import JobApplicationRepository
from app.repositories.resume_repository import ResumeRepository
from app.sanitization import (
    clean_text,
    detect_suspicious_job_application_patterns,
    sanitize_job_application,
)
from app.schemas.base import PaginatedResponse
from app.schemas.job_application import (
    BoardColumn,
    BoardResponse,
    JobApplicationResponse,
    JobApplicationStats,
)
from app.services.notification_service import NotificationService

logger = get_logger(__name__)


def _history_entry(status: str, note: Optional[str] = None) -> Dict[str, Any]:
    return {
        "status": status,
        "changed_at": datetime.now(timezone.utc).isoformat(),
        "note": note or None,
    }


def _enum_value(enum_cls, value: str, field: str) -> str:
    try:
        return enum_cls(value.lower()).value
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise SanitizationError(f"Invalid {field}. Must be one of: {allowed}", field=field)


def _uuid(value: Any, field: str) -> Optional[UUID]:
    if value in (None, ""):
        return None
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise SanitizationError(f"Invalid {field}", field=field)


def to_columns(cleaned: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert sanitized strings into the column types of JobApplication."""
    values = dict(cleaned)
    if values.get("status"):
        values["status"] = _enum_value(ApplicationStatus, values["status"], "status")
    elif "status" in values:
        values.pop("status")
    if values.get("priority"):
        values["priority"] = _enum_value(ApplicationPriority, values["priority"], "priority")
    elif "priority" in values:
        values.pop("priority")

    for field in ("applied_date", "deadline"):
        if field in values:
            values[field] = date.fromisoformat(values[field]) if values[field] else None
    if "interview_date" in values:
        day = values["interview_date"]
        values["interview_date"] = (
            datetime.combine(date.fromisoformat(day), datetime.min.time(), tzinfo=timezone.utc)
            if day
            else None
        )
    for field in ("resume_id", "cover_letter_id"):
        if field in values:
            values[field] = _uuid(values[field], field)
    return values


class JobApplicationService:
    """Tracks a user's job applications."""

    def __init__(self):
        self.application_repo = JobApplicationRepository()
        self.resume_repo = ResumeRepository()
        self.cover_letter_repo = CoverLetterRepository()
        self.notifications = NotificationService()

    async def list_applications(
        self,
        db: AsyncSession,
        user: User,
        *,
        status: Optional[ApplicationStatus] = None,
        priority: Optional[ApplicationPriority] = None,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[JobApplicationResponse]:
        filters = []
        if status:
            filters.append(JobApplication.status == status.value)
        if priority:
            filters.append(JobApplication.priority == priority.value)

        items, total = await self.application_repo.find_for_user(
            db, user.id, filters=filters, page=page, limit=limit
        )
        return PaginatedResponse(
            items=[JobApplicationResponse.model_validate(a) for a in items],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    async def get_application(
        self, db: AsyncSession, user: User, application_id: UUID
    ) -> JobApplicationResponse:
        return JobApplicationResponse.model_validate(await self._get(db, user, application_id))

    async def create_application(
        self,
        db: AsyncSession,
        user: User,
        data: Mapping[str, Any],
    ) -> JobApplicationResponse:
        """
        Raises:
            SanitizationError: Unknown fields, missing company / job title,
                or a strict field carrying an injection signature
        """
        values = to_columns(sanitize_job_application(data))
        detect_suspicious_job_application_patterns(values)
        await self._check_links(db, user, values)

        status = values.setdefault("status", ApplicationStatus.APPLIED.value)
        values["status_history"] = [_history_entry(status)]

        application = await self.application_repo.create(db, user_id=user.id, **values)
        await self.notifications.notify(
            db,
            user.id,
            NotificationType.JOB_APPLICATION_CREATED,
            "Application tracked",
            f"{application.job_title} at {application.company} was added to your board.",
            data={"job_application_id": str(application.id)},
            action_url=f"/job-applications/{application.id}",
        )
        await db.commit()

        logger.info("job_application_created", user_id=str(user.id), application_id=str(application.id))
        return JobApplicationResponse.model_validate(application)

    async def update_application(
        self,
        db: AsyncSession,
        user: User,
        application_id: UUID,
        data: Mapping[str, Any],
    ) -> JobApplicationResponse:
        application = await self._get(db, user, application_id)
        values = to_columns(sanitize_job_application(data, partial=True))
        detect_suspicious_job_application_patterns(values)
        await self._check_links(db, user, values)

        for field in ("company", "job_title"):
            if field in values and not values[field]:
                raise SanitizationError(f"{field} is required", field=field)

        new_status = values.get("status")
        if new_status and new_status != application.status:
            values["status_history"] = [*(application.status_history or []), _history_entry(new_status)]

        if values:
            application = await self.application_repo.update(db, application, **values)
            await db.commit()
        return JobApplicationResponse.model_validate(application)

    async def update_status(
        self,
        db: AsyncSession,
        user: User,
        application_id: UUID,
        *,
        status: ApplicationStatus,
        note: Optional[str] = None,
    ) -> JobApplicationResponse:
        """Move an application to another board column."""
        application = await self._get(db, user, application_id)
        note = clean_text(note, "note", max_length=500) or None

        if status.value == application.status and not note:
            return JobApplicationResponse.model_validate(application)

        previous = application.status
        application = await self.application_repo.update(
            db,
            application,
            status=status.value,
            status_history=[*(application.status_history or []), _history_entry(status.value, note)],
        )
        await self.notifications.notify(
            db,
            user.id,
            NotificationType.JOB_APPLICATION_UPDATED,
            "Application moved",
            f"{application.job_title} at {application.company} moved from {previous} to {status.value}.",
            data={"job_application_id": str(application.id), "from": previous, "to": status.value},
            action_url=f"/job-applications/{application.id}",
        )
        await db.commit()

        logger.info(
            "job_application_status_changed",
            application_id=str(application.id),
            from_status=previous,
            to_status=status.value,
        )
        return JobApplicationResponse.model_validate(application)

    async def delete_application(self, db: AsyncSession, user: User, application_id: UUID) -> None:
        application = await self._get(db, user, application_id)
        await self.application_repo.delete(db, application.id)
        await db.commit()

    async def get_board(self, db: AsyncSession, user: User) -> BoardResponse:
        """All applications grouped into one column per status, in pipeline order."""
        applications = await self.application_repo.get_all_for_user(db, user.id)
        grouped: Dict[str, List[JobApplicationResponse]] = {s.value: [] for s in ApplicationStatus}
        for application in applications:
            grouped.setdefault(application.status, []).append(
                JobApplicationResponse.model_validate(application)
            )

        columns = [
            BoardColumn(status=status, count=len(grouped[status.value]), items=grouped[status.value])
            for status in ApplicationStatus
        ]
        return BoardResponse(columns=columns, total=len(applications))

    async def get_stats(self, db: AsyncSession, user: User) -> JobApplicationStats:
        counts = await self.application_repo.count_by_status(db, user.id)
        by_status = {s.value: counts.get(s.value, 0) for s in ApplicationStatus}
        return JobApplicationStats(total=sum(counts.values()), by_status=by_status)

    async def _check_links(self, db: AsyncSession, user: User, values: Mapping[str, Any]) -> None:
        if values.get("resume_id"):
            if not await self.resume_repo.get_for_user(db, values["resume_id"], user.id):
                raise ResumeNotFoundException()
        if values.get("cover_letter_id"):
            if not await self.cover_letter_repo.get_for_user(db, values["cover_letter_id"], user.id):
                raise CoverLetterNotFoundException()

    async def _get(self, db: AsyncSession, user: User, application_id: UUID) -> JobApplication:
        application = await self.application_repo.get_for_user(db, application_id, user.id)
        if not application:
            raise JobApplicationNotFoundException()
        return application
