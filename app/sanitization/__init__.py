"""
Input sanitization applied before anything is persisted or sent to the LLM.
"""
from app.sanitization.ai_input import sanitize_ai_response, sanitize_job_description, sanitize_prompt
from app.sanitization.job_application import (
    detect_suspicious_job_application_patterns,
    sanitize_job_application,
    validate_job_application_structure,
)
from app.sanitization.resume import sanitize_resume_data, validate_resume_structure
from app.sanitization.text import (
    clean_html,
    clean_string_list,
    clean_text,
    detect_suspicious_patterns,
    sanitize_date,
    sanitize_email,
    sanitize_phone,
    sanitize_url,
    strict_text,
)

__all__ = [
    "clean_html",
    "clean_string_list",
    "clean_text",
    "detect_suspicious_job_application_patterns",
    "detect_suspicious_patterns",
    "sanitize_ai_response",
    "sanitize_date",
    "sanitize_email",
    "sanitize_job_application",
    "sanitize_job_description",
    "sanitize_phone",
    "sanitize_prompt",
    "sanitize_resume_data",
    "sanitize_url",
    "strict_text",
    "validate_job_application_structure",
    "validate_resume_structure",
]
