"""
PDF rendering with reportlab.

The server does not ship a TeX toolchain, so PDF export is drawn directly
from ``ResumeData``. Palettes follow the LaTeX layout of the same id.
"""
import html
import io
from typing import Any, Dict, List

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer

from app.documents.base import ResumeData
from app.documents.latex import date_range

PDF_LAYOUTS: Dict[str, Dict[str, Any]] = {
    "professional": {
        "pagesize": LETTER,
        "accent": colors.HexColor("#111111"),
        "line": colors.HexColor("#444444"),
        "font": "Times-Roman",
        "bold": "Times-Bold",
        "centered_header": True,
    },
    "modern": {
        "pagesize": A4,
        "accent": colors.HexColor("#1f4e79"),
        "line": colors.HexColor("#c9d3de"),
        "font": "Helvetica",
        "bold": "Helvetica-Bold",
        "centered_header": False,
    },
}


def _styles(layout: Dict[str, Any]) -> Dict[str, ParagraphStyle]:
    base = getSampleStyleSheet()["Normal"]
    return {
        "name": ParagraphStyle(
            "name", parent=base, fontName=layout["bold"], fontSize=20, leading=24,
            alignment=TA_CENTER if layout["centered_header"] else TA_LEFT,
            textColor=layout["accent"],
        ),
        "contact": ParagraphStyle(
            "contact", parent=base, fontName=layout["font"], fontSize=9, leading=12,
            alignment=TA_CENTER if layout["centered_header"] else TA_LEFT,
        ),
        "section": ParagraphStyle(
            "section", parent=base, fontName=layout["bold"], fontSize=12, leading=15,
            spaceBefore=8, textColor=layout["accent"],
        ),
        "heading": ParagraphStyle(
            "heading", parent=base, fontName=layout["bold"], fontSize=10, leading=13,
        ),
        "meta": ParagraphStyle(
            "meta", parent=base, fontName=layout["font"], fontSize=9, leading=11,
            textColor=colors.HexColor("#555555"),
        ),
        "body": ParagraphStyle(
            "body", parent=base, fontName=layout["font"], fontSize=10, leading=13,
        ),
        "bullet": ParagraphStyle(
            "bullet", parent=base, fontName=layout["font"], fontSize=10, leading=13,
            leftIndent=12, bulletIndent=2,
        ),
    }


def _p(text: str, style: ParagraphStyle, **kwargs) -> Paragraph:
    return Paragraph(html.escape(text), style, **kwargs)


def render_resume_pdf(data: ResumeData, template_id: str = "professional") -> bytes:
    """Draw the resume and return the PDF bytes. Unknown ids use professional."""
    layout = PDF_LAYOUTS.get(template_id, PDF_LAYOUTS["professional"])
    styles = _styles(layout)

    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=layout["pagesize"],
        leftMargin=44,
        rightMargin=44,
        topMargin=40,
        bottomMargin=34,
        title=f"{data.full_name or 'Resume'}",
    )

    story: List[Any] = [_p(data.full_name or "Your Name", styles["name"])]
    contact = [c for c in (data.email, data.phone, data.display_location,
                           data.linkedin_url, data.portfolio_url) if c]
    if contact:
        story.append(_p(" | ".join(contact), styles["contact"]))
    story.append(HRFlowable(width="100%", color=layout["line"], thickness=0.9,
                            spaceBefore=4, spaceAfter=6))

    def section(title: str) -> None:
        story.append(_p(title, styles["section"]))
        story.append(HRFlowable(width="100%", color=layout["line"], thickness=0.5,
                                spaceBefore=1, spaceAfter=4))

    def bullets(items: List[str]) -> None:
        for item in items:
            story.append(_p(item, styles["bullet"], bulletText="•"))

    if data.summary:
        section("Summary")
        story.append(_p(data.summary, styles["body"]))

    if data.has_skills:
        section("Skills")
        for label, items in (("Technical Skills", data.technical_skills),
                             ("Soft Skills", data.soft_skills),
                             ("Other Skills", data.skills)):
            if items:
                story.append(_p(f"{label}: {', '.join(items)}", styles["body"]))

    if data.work_experience:
        section("Experience")
        for exp in data.work_experience:
            story.append(_p(" - ".join(p for p in (exp.position, exp.company) if p), styles["heading"]))
            meta = " | ".join(p for p in (exp.location, date_range(exp.start_date, exp.end_date, exp.current, sep=" - ")) if p)
            if meta:
                story.append(_p(meta, styles["meta"]))
            bullets(exp.achievements or ([exp.description] if exp.description else []))
            story.append(Spacer(1, 4))

    if data.education:
        section("Education")
        for edu in data.education:
            degree = f"{edu.degree} in {edu.field_of_study}" if edu.field_of_study else edu.degree
            story.append(_p(", ".join(p for p in (degree, edu.institution) if p), styles["heading"]))
            dates = date_range(edu.start_date, edu.end_date, edu.current, sep=" - ")
            if dates:
                story.append(_p(dates, styles["meta"]))
            if edu.description:
                story.append(_p(edu.description, styles["body"]))

    if data.projects:
        section("Projects")
        for project in data.projects:
            story.append(_p(project.name, styles["heading"]))
            if project.description:
                story.append(_p(project.description, styles["body"]))
            if project.technologies:
                bullets([f"Technologies: {', '.join(project.technologies)}"])

    if data.publications:
        section("Publications")
        bullets([", ".join(p for p in (pub.title, pub.publisher) if p) for pub in data.publications])

    if data.certifications:
        section("Certifications")
        bullets([", ".join(p for p in (cert.name, cert.issuer) if p) for cert in data.certifications])

    doc.build(story)
    return output.getvalue()
