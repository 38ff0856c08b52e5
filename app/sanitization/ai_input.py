"""
Guards for text sent to and received from the LLM.
"""
import re
from typing import Any, Dict, List

from app.core.exceptions import SanitizationError
from app.core.keywords import CATEGORIES
from app.core.logging import get_logger
from app.sanitization.patterns import PROMPT_INJECTION_PATTERNS, matches_any
from app.sanitization.text import strip_tags

logger = get_logger(__name__)

MIN_JOB_DESCRIPTION = 50
MAX_JOB_DESCRIPTION = 5000
MAX_PROMPT = 2000
MAX_RESPONSE_ITEMS = 100
MAX_RESPONSE_ITEM_LENGTH = 200

_DANGEROUS_CONTENT = [
    re.compile(r"<(script|iframe|object|embed)[^>]*>", re.IGNORECASE),
    re.compile(r"javascript:|vbscript:|data:text/html|data:.*base64", re.IGNORECASE),
    re.compile(r"\bunion\s+select\b|\bdrop\s+table\b|\bdelete\s+from\b|\binsert\s+into\b", re.IGNORECASE),
    re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f\u200b-\u200d\ufeff]"),
]
_RESPONSE_SCRUB = re.compile(r"<script|javascript:|data:text/html|\bon\w+\s*=", re.IGNORECASE)


def _check_injection(text: str, field: str) -> None:
    if matches_any(PROMPT_INJECTION_PATTERNS, text):
        logger.warning("prompt_injection_attempt", field=field, preview=text[:100])
        raise SanitizationError("Prompt injection attempt detected", field=field)
    if matches_any(_DANGEROUS_CONTENT, text):
        logger.warning("ai_dangerous_content", field=field, preview=text[:100])
        raise SanitizationError("Dangerous content detected", field=field)


def sanitize_job_description(value: Any) -> str:
    """
    Validate a job description before keyword extraction.

    Raises:
        SanitizationError: Empty, shorter than 50 or longer than 5000
            chars, repetitive, or carrying injection / dangerous content
    """
    text = str(value or "").strip()
    if not text:
        raise SanitizationError("Job description is required", field="job_description")

    _check_injection(text, "job_description")
    cleaned = strip_tags(text).strip()

    if len(cleaned) > MAX_JOB_DESCRIPTION:
        raise SanitizationError(
            f"Job description too long ({len(cleaned)}/{MAX_JOB_DESCRIPTION})",
            field="job_description",
        )
    if len(cleaned) < MIN_JOB_DESCRIPTION:
        raise SanitizationError(
            f"Job description too short for analysis (minimum {MIN_JOB_DESCRIPTION} characters)",
            field="job_description",
        )

    unique_chars = len(set(cleaned.lower()))
    if unique_chars < 10 and len(cleaned) > 100:
        logger.warning("ai_repetitive_content", unique_chars=unique_chars, length=len(cleaned))
        raise SanitizationError(
            "Content appears to be repetitive or low-quality", field="job_description"
        )
    return cleaned


def sanitize_prompt(value: Any, field: str = "prompt") -> str:
    """Free-form instructions to the LLM; truncated to 2000 chars."""
    text = str(value or "").strip()
    if not text:
        return ""
    _check_injection(text, field)
    cleaned = strip_tags(text).strip()
    if len(cleaned) > MAX_PROMPT:
        logger.info("ai_prompt_truncated", field=field, length=len(cleaned))
    return cleaned[:MAX_PROMPT]


def _clean_item(item: Any) -> str:
    text = strip_tags(str(item)).strip()
    return _RESPONSE_SCRUB.sub("", text)[:MAX_RESPONSE_ITEM_LENGTH]


def sanitize_ai_response(response: Any) -> Dict[str, List[str]]:
    """
    Restrict a parsed keyword reply to the known categories.

    Unknown keys are dropped, non-list values become empty lists and each
    item is a tag-free string of at most 200 chars.
    """
    result: Dict[str, List[str]] = {c: [] for c in CATEGORIES}
    if not isinstance(response, dict):
        return result

    for key, value in response.items():
        if key not in result:
            logger.info("ai_response_field_removed", field=key)
            continue
        if not isinstance(value, list):
            continue
        items = [_clean_item(v) for v in value[:MAX_RESPONSE_ITEMS] if isinstance(v, (str, int, float))]
        result[key] = [i for i in items if i]
    return result
