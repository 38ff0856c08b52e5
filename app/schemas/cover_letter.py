"""
Cover letter schemas.
"""
from typing import Optional
from uuid import UUID
from pydantic import Field
from app.schemas.base import BaseSchema, TimestampSchema, IDSchema


class CoverLetterCreate(BaseSchema):
    title: str = Field(..., min_length=1, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    recipient_name: Optional[str] = Field(None, max_length=100)
    job_title: Optional[str] = Field(None, max_length=200)
    body: str = Field("", max_length=10000)
    template: str = Field("standard", max_length=50)
    is_draft: bool = True
    resume_id: Optional[UUID] = None


class CoverLetterUpdate(BaseSchema):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    recipient_name: Optional[str] = Field(None, max_length=100)
    job_title: Optional[str] = Field(None, max_length=200)
    body: Optional[str] = Field(None, max_length=10000)
    template: Optional[str] = Field(None, max_length=50)
    is_draft: Optional[bool] = None
    resume_id: Optional[UUID] = None


class CoverLetterResponse(IDSchema, TimestampSchema):
    user_id: UUID
    resume_id: Optional[UUID] = None
    title: str
    company: Optional[str] = None
    recipient_name: Optional[str] = None
    job_title: Optional[str] = None
    body: str
    template: str
    is_draft: bool


class CoverLetterGenerateRequest(BaseSchema):
    """Ask the LLM to draft a cover letter and save it."""

    job_title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    job_description: str
    recipient_name: Optional[str] = Field(None, max_length=100)
    resume_id: Optional[UUID] = None
    template: str = Field("standard", max_length=50)
