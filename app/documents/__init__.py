"""
Resume and cover-letter document generation.
"""
from app.documents.base import CoverLetterData, ResumeData
from app.documents.latex import escape_latex, format_latex_date
from app.documents.registry import (
    generate_cover_letter,
    generate_latex_resume,
    generate_resume_pdf,
    generate_text_resume,
    get_template,
    list_templates,
    resolve_template_id,
)

__all__ = [
    "CoverLetterData",
    "ResumeData",
    "escape_latex",
    "format_latex_date",
    "generate_cover_letter",
    "generate_latex_resume",
    "generate_resume_pdf",
    "generate_text_resume",
    "get_template",
    "list_templates",
    "resolve_template_id",
]
