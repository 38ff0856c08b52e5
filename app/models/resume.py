"""
Resume model - structured resume content plus its chosen layout.
"""
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import BaseModel

if TYPE_CHECKING:
    from app.models.user import User


class Resume(BaseModel):
    """
    Resume entity.

    `content` holds the whole resume document (contact details, summary,
    skills, work experience, education, projects, certifications,
    publications, skill categories, job description). Keys follow
    app.documents.base.ResumeData.
    """

    __tablename__ = "resumes"

    __table_args__ = (
        Index("ix_resumes_user_updated", "user_id", "updated_at"),
    )

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False, default="Untitled Resume")
    target_job_title: Mapped[str] = mapped_column(String(200), nullable=False)
    template: Mapped[str] = mapped_column(String(50), nullable=False, default="professional")
    is_draft: Mapped[bool] = mapped_column(Boolean, default=True)

    content: Mapped[dict] = mapped_column(JSONB, default=dict, nullable=False)

    user: Mapped["User"] = relationship("User", back_populates="resumes")

    def __repr__(self) -> str:
        return f"<Resume {self.title} ({self.template})>"
