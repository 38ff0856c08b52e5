"""
Plain-text resume layouts.

The six layouts differ only in heading style, bullet glyph, header shape and
section order, so a single renderer is driven by a ``TextLayout`` config.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from app.documents.base import BaseTemplate, ResumeData
from app.documents.latex import date_range


def _upper(title: str) -> str:
    return title.upper()


def _underlined(title: str) -> str:
    return f"{title}\n{'-' * len(title)}"


def _boxed(title: str) -> str:
    bar = "=" * (len(title) + 4)
    return f"{bar}\n| {title.upper()} |\n{bar}"


def _arrow(title: str) -> str:
    return f">> {title}"


def _spaced(title: str) -> str:
    return " ".join(title.upper())


DEFAULT_ORDER = ("summary", "skills", "experience", "education", "projects",
                 "certifications", "publications")


@dataclass(frozen=True)
class TextLayout:
    heading: Callable[[str], str] = _upper
    bullet: str = "-"
    contact_sep: str = " | "
    section_order: Tuple[str, ...] = DEFAULT_ORDER
    name_upper: bool = False
    rule: str = ""
    titles: Dict[str, str] = field(default_factory=lambda: {
        "summary": "Summary",
        "skills": "Skills",
        "experience": "Experience",
        "education": "Education",
        "projects": "Projects",
        "certifications": "Certifications",
        "publications": "Publications",
    })


def _dates(start: str, end: str, current: bool) -> str:
    return date_range(start, end, current, sep=" - ")


class PlainTextTemplate(BaseTemplate):
    """Render a resume as plain text according to a ``TextLayout``."""

    output_format = "text"
    layout = TextLayout()

    def render(self, data: ResumeData) -> str:
        blocks = [self._header(data)]
        for key in self.layout.section_order:
            body = getattr(self, f"_section_{key}")(data)
            if body:
                blocks.append(f"{self.layout.heading(self.layout.titles[key])}\n{body}")
        sep = f"\n\n{self.layout.rule}\n\n" if self.layout.rule else "\n\n"
        return sep.join(blocks).rstrip() + "\n"

    def _item(self, text: str, indent: int = 2) -> str:
        return f"{' ' * indent}{self.layout.bullet} {text}"

    def _header(self, r: ResumeData) -> str:
        name = r.full_name or "Your Name"
        if self.layout.name_upper:
            name = name.upper()
        contact = [r.email or "email@example.com", r.phone or "Phone"]
        if r.display_location:
            contact.append(r.display_location)
        lines = [name]
        if r.target_job_title:
            lines.append(r.target_job_title)
        lines.append(self.layout.contact_sep.join(contact))
        links = [u for u in (r.linkedin_url, r.portfolio_url) if u]
        if links:
            lines.append(self.layout.contact_sep.join(links))
        return "\n".join(lines)

    def _section_summary(self, r: ResumeData) -> str:
        return r.summary

    def _section_skills(self, r: ResumeData) -> str:
        lines = []
        if r.technical_skills:
            lines.append(f"Technical Skills: {', '.join(r.technical_skills)}")
        if r.soft_skills:
            lines.append(f"Soft Skills: {', '.join(r.soft_skills)}")
        if r.skills:
            lines.append(f"Other Skills: {', '.join(r.skills)}")
        for category in r.skill_categories:
            if category.skills:
                lines.append(f"{category.name}: {', '.join(category.skills)}")
        return "\n".join(lines)

    def _section_experience(self, r: ResumeData) -> str:
        entries = []
        for exp in r.work_experience:
            head = ", ".join(p for p in (exp.position, exp.company) if p)
            meta = " | ".join(
                p for p in (exp.location, _dates(exp.start_date, exp.end_date, exp.current)) if p
            )
            lines = [head, meta] if meta else [head]
            points = exp.achievements or ([exp.description] if exp.description else [])
            lines.extend(self._item(p) for p in points)
            entries.append("\n".join(lines))
        return "\n\n".join(entries)

    def _section_education(self, r: ResumeData) -> str:
        entries = []
        for edu in r.education:
            degree = edu.degree
            if edu.field_of_study:
                degree = f"{degree} in {edu.field_of_study}" if degree else edu.field_of_study
            lines = [", ".join(p for p in (edu.institution, edu.location) if p)]
            dates = _dates(edu.start_date, edu.end_date, edu.current)
            lines.append(", ".join(p for p in (degree, dates) if p))
            if edu.gpa:
                lines.append(f"GPA: {edu.gpa}")
            if edu.description:
                lines.append(self._item(edu.description))
            entries.append("\n".join(l for l in lines if l))
        return "\n\n".join(entries)

    def _section_projects(self, r: ResumeData) -> str:
        entries = []
        for project in r.projects:
            lines = [project.name]
            if project.description:
                lines.append(project.description)
            if project.technologies:
                lines.append(self._item(f"Technologies: {', '.join(project.technologies)}"))
            if project.url:
                lines.append(self._item(project.url))
            entries.append("\n".join(lines))
        return "\n\n".join(entries)

    def _section_certifications(self, r: ResumeData) -> str:
        lines = []
        for cert in r.certifications:
            parts = [cert.name]
            if cert.issuer:
                parts.append(cert.issuer)
            if cert.date:
                parts.append(date_range("", cert.date, sep=" - "))
            lines.append(self._item(", ".join(parts), indent=0))
        return "\n".join(lines)

    def _section_publications(self, r: ResumeData) -> str:
        lines = []
        for pub in r.publications:
            parts = [pub.title]
            if pub.publisher:
                parts.append(pub.publisher)
            if pub.publication_date:
                parts.append(date_range("", pub.publication_date, sep=" - "))
            lines.append(self._item(", ".join(parts), indent=0))
        return "\n".join(lines)


class ProfessionalTextTemplate(PlainTextTemplate):
    template_id = "professional"
    name = "Professional"
    description = "Classic uppercase headings."


class MinimalistTextTemplate(PlainTextTemplate):
    template_id = "minimalist"
    name = "Minimalist"
    description = "Sparse layout with bullet dots."
    layout = TextLayout(heading=_underlined, bullet="•")


class ElegantTextTemplate(PlainTextTemplate):
    template_id = "elegant"
    name = "Elegant"
    description = "Letter-spaced headings separated by rules."
    layout = TextLayout(heading=_spaced, bullet="◦", rule="~" * 40, name_upper=True)


class CorporateTextTemplate(PlainTextTemplate):
    template_id = "corporate"
    name = "Corporate"
    description = "Boxed headings, experience before skills."
    layout = TextLayout(
        heading=_boxed,
        bullet="*",
        section_order=("summary", "experience", "education", "skills", "certifications",
                       "projects", "publications"),
        name_upper=True,
    )


class ModernTextTemplate(PlainTextTemplate):
    template_id = "modern"
    name = "Modern"
    description = "Education and projects first, arrow headings."
    layout = TextLayout(
        heading=_arrow,
        bullet="▸",
        contact_sep=" · ",
        section_order=("summary", "education", "projects", "experience", "publications",
                       "skills", "certifications"),
    )


class CreativeTextTemplate(PlainTextTemplate):
    template_id = "creative"
    name = "Creative"
    description = "Projects up front with friendlier section titles."
    layout = TextLayout(
        heading=_arrow,
        bullet="★",
        section_order=("summary", "projects", "skills", "experience", "education",
                       "certifications", "publications"),
        titles={
            "summary": "About Me",
            "skills": "What I Do Best",
            "experience": "Where I've Worked",
            "education": "Where I've Studied",
            "projects": "Things I've Built",
            "certifications": "Credentials",
            "publications": "Writing",
        },
    )


TEXT_TEMPLATE_CLASSES: List[type] = [
    ProfessionalTextTemplate,
    MinimalistTextTemplate,
    ElegantTextTemplate,
    CorporateTextTemplate,
    ModernTextTemplate,
    CreativeTextTemplate,
]
