"""
Resume schemas.
"""
from typing import Any, Dict, List, Optional
from uuid import UUID
from pydantic import Field
from app.schemas.base import BaseSchema, TimestampSchema, IDSchema


class ResumeCreate(BaseSchema):
    """
    Resume request body.

    `content` is the structured resume document (see
    app.documents.base.ResumeData for the keys); it is sanitized
    field by field before it is stored.
    """

    title: str = Field("Untitled Resume", max_length=200)
    target_job_title: str = Field(..., min_length=1, max_length=200)
    template: str = Field("professional", max_length=50)
    is_draft: bool = True
    content: Dict[str, Any] = Field(default_factory=dict)


class ResumeUpdate(BaseSchema):
    title: Optional[str] = Field(None, max_length=200)
    target_job_title: Optional[str] = Field(None, min_length=1, max_length=200)
    template: Optional[str] = Field(None, max_length=50)
    is_draft: Optional[bool] = None
    content: Optional[Dict[str, Any]] = None


class ResumeListItem(IDSchema, TimestampSchema):
    title: str
    target_job_title: str
    template: str
    is_draft: bool


class ResumeResponse(ResumeListItem):
    user_id: UUID
    content: Dict[str, Any]


class ResumePreviewRequest(BaseSchema):
    """Unsaved resume content to render."""

    template: str = Field("professional", max_length=50)
    content: Dict[str, Any]


class TemplateInfo(BaseSchema):
    kind: str
    id: str
    name: str
    description: str
    format: str


class DocumentResponse(BaseSchema):
    """Generated document as text (LaTeX source or plain text)."""

    template: str
    format: str
    content: str


class TemplateListResponse(BaseSchema):
    templates: List[TemplateInfo]
