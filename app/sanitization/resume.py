"""
Resume content sanitization.

The resume `content` JSON document is rebuilt key by key: anything not
listed here is dropped, every string goes through a field policy, and
every list is capped.
"""
import json
from typing import Any, Callable, Dict, List, Mapping

from app.core.exceptions import SanitizationError
from app.core.logging import get_logger
from app.sanitization.text import (
    clean_html,
    clean_string_list,
    clean_text,
    detect_suspicious_patterns,
    sanitize_date,
    sanitize_email,
    sanitize_phone,
    sanitize_url,
    slug_text,
    strict_text,
)

logger = get_logger(__name__)

MAX_RESUME_BYTES = 1024 * 1024

MAX_WORK_EXPERIENCE = 20
MAX_EDUCATION = 10
MAX_PROJECTS = 15
MAX_CERTIFICATIONS = 20
MAX_PUBLICATIONS = 15
MAX_SKILL_CATEGORIES = 20
MAX_SKILLS = 50


def _entries(value: Any, limit: int, field: str) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    if len(value) > limit:
        logger.info("list_truncated", field=field, count=len(value), max_items=limit)
    return [e for e in value[:limit] if isinstance(e, Mapping)]


def _date(value: Any, field: str) -> str:
    """Dates inside resume entries may be partial (YYYY-MM); keep them that way."""
    text = clean_text(value, field, max_length=20)
    if not text:
        return ""
    normalised = sanitize_date(text, field)
    return normalised[:7] if len(text) == 7 else normalised


def _section(
    value: Any,
    limit: int,
    field: str,
    build: Callable[[Mapping[str, Any], str], Dict[str, Any]],
) -> List[Dict[str, Any]]:
    return [build(e, f"{field}[{i}]") for i, e in enumerate(_entries(value, limit, field))]


def _work_experience(e: Mapping[str, Any], f: str) -> Dict[str, Any]:
    return {
        "company": strict_text(e.get("company"), f"{f}.company", max_length=200, required=True),
        "position": strict_text(e.get("position"), f"{f}.position", max_length=200, required=True),
        "location": clean_text(e.get("location"), f"{f}.location", max_length=200),
        "start_date": _date(e.get("start_date"), f"{f}.start_date"),
        "end_date": _date(e.get("end_date"), f"{f}.end_date"),
        "current": bool(e.get("current")),
        "description": clean_html(e.get("description"), f"{f}.description", max_length=2000),
        "achievements": clean_string_list(
            e.get("achievements"), f"{f}.achievements", max_items=20, max_length=500
        ),
    }


def _education(e: Mapping[str, Any], f: str) -> Dict[str, Any]:
    return {
        "institution": strict_text(e.get("institution"), f"{f}.institution", max_length=200, required=True),
        "degree": strict_text(e.get("degree"), f"{f}.degree", max_length=200, required=True),
        "field_of_study": clean_text(e.get("field_of_study"), f"{f}.field_of_study", max_length=200),
        "location": clean_text(e.get("location"), f"{f}.location", max_length=200),
        "start_date": _date(e.get("start_date"), f"{f}.start_date"),
        "end_date": _date(e.get("end_date"), f"{f}.end_date"),
        "current": bool(e.get("current")),
        "gpa": clean_text(e.get("gpa"), f"{f}.gpa", max_length=20),
        "description": clean_html(e.get("description"), f"{f}.description", max_length=1000),
    }


def _project(e: Mapping[str, Any], f: str) -> Dict[str, Any]:
    return {
        "name": strict_text(e.get("name"), f"{f}.name", max_length=200, required=True),
        "description": clean_html(e.get("description"), f"{f}.description", max_length=1500),
        "technologies": clean_string_list(
            e.get("technologies"), f"{f}.technologies", max_items=20, max_length=50
        ),
        "url": sanitize_url(e.get("url"), f"{f}.url"),
        "start_date": _date(e.get("start_date"), f"{f}.start_date"),
        "end_date": _date(e.get("end_date"), f"{f}.end_date"),
        "current": bool(e.get("current")),
    }


def _certification(e: Mapping[str, Any], f: str) -> Dict[str, Any]:
    return {
        "name": strict_text(e.get("name"), f"{f}.name", max_length=200, required=True),
        "issuer": strict_text(e.get("issuer"), f"{f}.issuer", max_length=200),
        "date": _date(e.get("date"), f"{f}.date"),
        "expires": bool(e.get("expires")),
        "expiry_date": _date(e.get("expiry_date"), f"{f}.expiry_date"),
        "url": sanitize_url(e.get("url"), f"{f}.url"),
    }


def _publication(e: Mapping[str, Any], f: str) -> Dict[str, Any]:
    return {
        "title": strict_text(e.get("title"), f"{f}.title", max_length=300, required=True),
        "publisher": strict_text(e.get("publisher"), f"{f}.publisher", max_length=200),
        "publication_date": _date(e.get("publication_date"), f"{f}.publication_date"),
        "authors": clean_text(e.get("authors"), f"{f}.authors", max_length=500),
        "url": sanitize_url(e.get("url"), f"{f}.url"),
        "description": clean_html(e.get("description"), f"{f}.description", max_length=1000),
    }


def _skill_category(e: Mapping[str, Any], f: str) -> Dict[str, Any]:
    return {
        "name": strict_text(e.get("name"), f"{f}.name", max_length=100, required=True),
        "skills": clean_string_list(e.get("skills"), f"{f}.skills", max_items=50, max_length=50),
    }


def sanitize_resume_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Return a cleaned copy of resume content.

    Raises:
        SanitizationError: A strict field carries an attack signature, a
            required field is empty, or a typed value is invalid
    """
    if not isinstance(data, Mapping):
        raise SanitizationError("Resume data must be an object")

    cleaned = {
        "full_name": strict_text(data.get("full_name"), "full_name", max_length=100),
        "email": sanitize_email(data.get("email")),
        "phone": sanitize_phone(data.get("phone")),
        "target_job_title": strict_text(
            data.get("target_job_title"), "target_job_title", max_length=200, required=True
        ),
        "job_description": clean_html(data.get("job_description"), "job_description", max_length=10000),
        "summary": clean_html(data.get("summary"), "summary", max_length=1000),
        "city": clean_text(data.get("city"), "city", max_length=100),
        "state": clean_text(data.get("state"), "state", max_length=100),
        "country": clean_text(data.get("country"), "country", max_length=100),
        "location": clean_text(data.get("location"), "location", max_length=200),
        "linkedin_url": sanitize_url(
            data.get("linkedin_url"), "linkedin_url", allowed_domains=["linkedin.com"]
        ),
        "portfolio_url": sanitize_url(data.get("portfolio_url"), "portfolio_url"),
        "skills": clean_string_list(data.get("skills"), "skills", max_items=MAX_SKILLS),
        "technical_skills": clean_string_list(
            data.get("technical_skills"), "technical_skills", max_items=MAX_SKILLS
        ),
        "soft_skills": clean_string_list(data.get("soft_skills"), "soft_skills", max_items=MAX_SKILLS),
        "work_experience": _section(
            data.get("work_experience"), MAX_WORK_EXPERIENCE, "work_experience", _work_experience
        ),
        "education": _section(data.get("education"), MAX_EDUCATION, "education", _education),
        "projects": _section(data.get("projects"), MAX_PROJECTS, "projects", _project),
        "certifications": _section(
            data.get("certifications"), MAX_CERTIFICATIONS, "certifications", _certification
        ),
        "publications": _section(
            data.get("publications"), MAX_PUBLICATIONS, "publications", _publication
        ),
        "skill_categories": _section(
            data.get("skill_categories"), MAX_SKILL_CATEGORIES, "skill_categories", _skill_category
        ),
        "current_step": slug_text(data.get("current_step"), "current_step"),
    }
    return cleaned


def validate_resume_structure(data: Any) -> None:
    """
    Reject resume payloads that are not objects, lack a target job title,
    exceed 1MB serialised, or carry obfuscated attack patterns.
    """
    if not isinstance(data, Mapping):
        raise SanitizationError("Resume data must be an object")
    if not str(data.get("target_job_title") or "").strip():
        raise SanitizationError("target_job_title is required", field="target_job_title")

    serialised = json.dumps(data, default=str)
    if len(serialised) > MAX_RESUME_BYTES:
        raise SanitizationError("Resume data too large")

    warnings = []
    for key in ("full_name", "target_job_title"):
        value = data.get(key)
        if isinstance(value, str):
            warnings.extend(detect_suspicious_patterns(value, key))
    if warnings:
        logger.warning("resume_suspicious_patterns", warnings=warnings)
        raise SanitizationError(f"Security check failed: {', '.join(warnings)}")
