"""
Job application input sanitization.

Company, job title, contact name and status are strict fields: a SQL
signature rejects the whole request. Notes are free text.
"""
from typing import Any, Dict, List, Mapping

from app.core.exceptions import SanitizationError
from app.core.logging import get_logger
from app.sanitization.text import (
    clean_text,
    detect_suspicious_patterns,
    sanitize_date,
    sanitize_email,
    sanitize_phone,
    sanitize_url,
    strict_text,
)

logger = get_logger(__name__)

REQUIRED_FIELDS = ("company", "job_title")
ALLOWED_FIELDS = frozenset({
    "company",
    "job_title",
    "status",
    "priority",
    "location",
    "job_url",
    "salary",
    "notes",
    "contact_name",
    "contact_email",
    "contact_phone",
    "applied_date",
    "deadline",
    "interview_date",
    "interview_notes",
    "resume_id",
    "cover_letter_id",
})

_STRICT_FIELDS = {"company": 200, "job_title": 200, "contact_name": 100, "status": 50, "priority": 20}
_TEXT_FIELDS = {"location": 200, "salary": 100, "notes": 2000, "interview_notes": 2000}
_DATE_FIELDS = ("applied_date", "deadline", "interview_date")
_CHECKED_FIELDS = ("company", "job_title", "notes", "contact_name")


def validate_job_application_structure(data: Any, *, partial: bool = False) -> None:
    """
    Reject payloads with unknown keys or, unless `partial`, missing
    company / job title.
    """
    if not isinstance(data, Mapping):
        raise SanitizationError("Job application data must be an object")

    if not partial:
        for field in REQUIRED_FIELDS:
            value = data.get(field)
            if not isinstance(value, str) or not value.strip():
                logger.warning("job_application_missing_field", field=field)
                raise SanitizationError(f"Required field missing: {field}", field=field)

    unexpected = sorted(set(data) - ALLOWED_FIELDS)
    if unexpected:
        logger.warning("job_application_unexpected_fields", fields=unexpected)
        raise SanitizationError(f"Unexpected fields detected: {', '.join(unexpected)}")


def sanitize_job_application(data: Mapping[str, Any], *, partial: bool = False) -> Dict[str, Any]:
    """
    Clean a job application payload.

    With `partial=True` only keys present in `data` are returned, so the
    result can be applied as an update.
    """
    validate_job_application_structure(data, partial=partial)

    cleaned: Dict[str, Any] = {}
    for field, max_length in _STRICT_FIELDS.items():
        if partial and field not in data:
            continue
        required = field in REQUIRED_FIELDS and not partial
        cleaned[field] = strict_text(
            data.get(field), field, max_length=max_length, required=required
        )
    if not partial and not cleaned.get("status"):
        cleaned["status"] = "applied"

    for field, max_length in _TEXT_FIELDS.items():
        if field in data:
            cleaned[field] = clean_text(data.get(field), field, max_length=max_length) or None

    for field in _DATE_FIELDS:
        if field in data:
            cleaned[field] = sanitize_date(data.get(field), field) or None

    if "job_url" in data:
        cleaned["job_url"] = sanitize_url(data.get("job_url"), "job_url") or None
    if "contact_email" in data:
        cleaned["contact_email"] = sanitize_email(data.get("contact_email"), "contact_email") or None
    if "contact_phone" in data:
        cleaned["contact_phone"] = sanitize_phone(data.get("contact_phone"), "contact_phone") or None

    for field in ("resume_id", "cover_letter_id"):
        if field in data:
            cleaned[field] = data.get(field) or None

    return cleaned


def detect_suspicious_job_application_patterns(data: Mapping[str, Any]) -> List[str]:
    """Collect obfuscation warnings across the free-form text fields."""
    warnings: List[str] = []
    for field in _CHECKED_FIELDS:
        value = data.get(field)
        if isinstance(value, str):
            warnings.extend(detect_suspicious_patterns(value, field))
    if warnings:
        logger.warning("job_application_suspicious_patterns", warnings=warnings)
    return warnings
