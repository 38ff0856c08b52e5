"""
Base classes for document templates.

Resume content arrives as the JSON document stored on a Resume row.
``ResumeData.from_dict`` normalises it into dataclasses so every template
reads the same shape regardless of which optional keys were sent.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup

_BLOCK_TAGS = ("p", "li", "br")


def _str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _rich(value: Any) -> str:
    """
    Stored rich-text fields (summary, descriptions) carry a small HTML
    allow-list; documents want plain text with one line per block.
    """
    text = _str(value)
    if "<" not in text and "&" not in text:
        return text
    soup = BeautifulSoup(text, "html.parser")
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_after("\n")
    lines = (" ".join(line.split()) for line in soup.get_text().splitlines())
    return "\n".join(line for line in lines if line)


def _str_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, str):
        value = [value]
    return [s for s in (_str(v) for v in value) if s]


@dataclass
class WorkExperience:
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    achievements: List[str] = field(default_factory=list)


@dataclass
class Education:
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    gpa: str = ""
    description: str = ""


@dataclass
class Project:
    name: str = ""
    description: str = ""
    technologies: List[str] = field(default_factory=list)
    url: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False


@dataclass
class Certification:
    name: str = ""
    issuer: str = ""
    date: str = ""
    expires: bool = False
    expiry_date: str = ""
    url: str = ""


@dataclass
class Publication:
    title: str = ""
    publisher: str = ""
    publication_date: str = ""
    authors: str = ""
    url: str = ""
    description: str = ""


@dataclass
class SkillCategory:
    name: str = ""
    skills: List[str] = field(default_factory=list)


@dataclass
class ResumeData:
    """Normalised resume content handed to every template."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    city: str = ""
    state: str = ""
    country: str = ""
    linkedin_url: str = ""
    portfolio_url: str = ""
    target_job_title: str = ""
    summary: str = ""
    skills: List[str] = field(default_factory=list)
    technical_skills: List[str] = field(default_factory=list)
    soft_skills: List[str] = field(default_factory=list)
    skill_categories: List[SkillCategory] = field(default_factory=list)
    work_experience: List[WorkExperience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    publications: List[Publication] = field(default_factory=list)

    @property
    def display_location(self) -> str:
        """Explicit location, else "city, country", else whichever exists."""
        if self.location:
            return self.location
        if self.city and self.country:
            return f"{self.city}, {self.country}"
        return self.city or self.country

    @property
    def has_skills(self) -> bool:
        return bool(self.technical_skills or self.soft_skills or self.skills)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ResumeData":
        data = data or {}

        def entries(key: str) -> List[Mapping[str, Any]]:
            return [e for e in (data.get(key) or []) if isinstance(e, Mapping)]

        return cls(
            full_name=_str(data.get("full_name")),
            email=_str(data.get("email")),
            phone=_str(data.get("phone")),
            location=_str(data.get("location")),
            city=_str(data.get("city")),
            state=_str(data.get("state")),
            country=_str(data.get("country")),
            linkedin_url=_str(data.get("linkedin_url")),
            portfolio_url=_str(data.get("portfolio_url")),
            target_job_title=_str(data.get("target_job_title")),
            summary=_rich(data.get("summary")),
            skills=_str_list(data.get("skills")),
            technical_skills=_str_list(data.get("technical_skills")),
            soft_skills=_str_list(data.get("soft_skills")),
            skill_categories=[
                SkillCategory(name=_str(c.get("name")), skills=_str_list(c.get("skills")))
                for c in entries("skill_categories")
            ],
            work_experience=[
                WorkExperience(
                    company=_str(e.get("company")),
                    position=_str(e.get("position")),
                    location=_str(e.get("location")),
                    start_date=_str(e.get("start_date")),
                    end_date=_str(e.get("end_date")),
                    current=bool(e.get("current")),
                    description=_rich(e.get("description")),
                    achievements=_str_list(e.get("achievements")),
                )
                for e in entries("work_experience")
            ],
            education=[
                Education(
                    institution=_str(e.get("institution")),
                    degree=_str(e.get("degree")),
                    field_of_study=_str(e.get("field_of_study")),
                    location=_str(e.get("location")),
                    start_date=_str(e.get("start_date")),
                    end_date=_str(e.get("end_date")),
                    current=bool(e.get("current")),
                    gpa=_str(e.get("gpa")),
                    description=_rich(e.get("description")),
                )
                for e in entries("education")
            ],
            projects=[
                Project(
                    name=_str(e.get("name")),
                    description=_rich(e.get("description")),
                    technologies=_str_list(e.get("technologies")),
                    url=_str(e.get("url")),
                    start_date=_str(e.get("start_date")),
                    end_date=_str(e.get("end_date")),
                    current=bool(e.get("current")),
                )
                for e in entries("projects")
            ],
            certifications=[
                Certification(
                    name=_str(e.get("name")),
                    issuer=_str(e.get("issuer")),
                    date=_str(e.get("date")),
                    expires=bool(e.get("expires")),
                    expiry_date=_str(e.get("expiry_date")),
                    url=_str(e.get("url")),
                )
                for e in entries("certifications")
            ],
            publications=[
                Publication(
                    title=_str(e.get("title")),
                    publisher=_str(e.get("publisher")),
                    publication_date=_str(e.get("publication_date")),
                    authors=_str(e.get("authors")),
                    url=_str(e.get("url")),
                    description=_rich(e.get("description")),
                )
                for e in entries("publications")
            ],
        )


@dataclass
class CoverLetterData:
    """Fields a cover letter layout can use."""

    sender_name: str = ""
    sender_email: str = ""
    sender_phone: str = ""
    sender_location: str = ""
    recipient_name: str = ""
    company: str = ""
    job_title: str = ""
    body: str = ""
    date: str = ""

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CoverLetterData":
        data = data or {}
        return cls(**{name: _str(data.get(name)) for name in cls.__dataclass_fields__})


class BaseTemplate(ABC):
    """
    Base class for every registered layout.

    Subclasses set ``template_id`` and ``name`` and implement ``render``.
    """

    template_id: str = ""
    name: str = ""
    description: str = ""
    output_format: str = "text"  # 'latex', 'text'

    @abstractmethod
    def render(self, data: Any) -> str:
        """Render the document for already-normalised data."""
        pass

    def info(self) -> Dict[str, str]:
        return {
            "id": self.template_id,
            "name": self.name,
            "description": self.description,
            "format": self.output_format,
        }
