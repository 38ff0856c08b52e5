"""
Job application schemas.
"""
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field
from app.models.job_application import ApplicationPriority, ApplicationStatus
from app.schemas.base import BaseSchema, TimestampSchema, IDSchema


class StatusHistoryEntry(BaseSchema):
    status: ApplicationStatus
    changed_at: datetime
    note: Optional[str] = None


class JobApplicationResponse(IDSchema, TimestampSchema):
    user_id: UUID
    company: str
    job_title: str
    status: ApplicationStatus
    status_history: List[StatusHistoryEntry] = []
    priority: ApplicationPriority
    location: Optional[str] = None
    job_url: Optional[str] = None
    salary: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: Optional[str] = None
    applied_date: Optional[date] = None
    deadline: Optional[date] = None
    interview_date: Optional[datetime] = None
    interview_notes: Optional[str] = None
    resume_id: Optional[UUID] = None
    cover_letter_id: Optional[UUID] = None


class StatusUpdateRequest(BaseSchema):
    """Kanban move: new column plus an optional note for the history."""

    status: ApplicationStatus
    note: Optional[str] = Field(None, max_length=500)


class BoardColumn(BaseSchema):
    status: ApplicationStatus
    count: int
    items: List[JobApplicationResponse]


class BoardResponse(BaseSchema):
    columns: List[BoardColumn]
    total: int


class JobApplicationStats(BaseSchema):
    total: int
    by_status: Dict[str, int]


# Create / update bodies are sanitized as raw dicts (unknown keys are
# rejected there), so routes accept Dict[str, Any] and document the shape
# with this example.
JOB_APPLICATION_EXAMPLE: Dict[str, Any] = {
    "company": "Acme Corp",
    "job_title": "Backend Engineer",
    "status": "applied",
    "priority": "high",
    "job_url": "https://acme.example.com/jobs/42",
    "applied_date": "2024-05-01",
    "notes": "Referred by a former colleague",
}
