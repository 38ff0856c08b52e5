"""
OpenAI helpers for keyword analysis and content generation.

All OpenAI calls go through this module so we can:
  - Centralise API key management and model selection
  - Enforce input truncation (cost control)
  - Validate LLM JSON replies, falling back to the rule-based categorizer
  - Turn vendor errors into AIServiceError (503, generic message)

Functions:
  analyze_job_description:    job description → seven keyword categories
  generate_cover_letter_body: job + resume summary → letter body text
  enhance_summary:            resume summary → rewritten summary
  enhance_experience_points:  work experience entry → achievement bullets
  enhance_project:            project entry → rewritten description
"""
import json
import re
from typing import Any, Dict, List, Optional

import openai
from openai import AsyncOpenAI

from app.core.config import settings
from app.core.exceptions import AIServiceError
from app.core.keywords import CATEGORIES, process_keywords_for_ats, simple_categorize
from app.core.logging import get_logger

logger = get_logger(__name__)

_MAX_JD_CHARS = 5_000
_MAX_RESUME_CHARS = 1_500
_MAX_SUMMARY_CHARS = 2_000

_CODE_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

_LETTER_STYLES = {
    "standard": "Write in a formal, professional tone appropriate for traditional industries.",
    "formal": "Write in a precise, formal tone with conservative phrasing.",
    "modern": "Write in a modern, conversational tone that balances professionalism with approachability.",
}


def _client() -> AsyncOpenAI:
    """Create an OpenAI async client (lightweight, re-created per call)."""
    if not settings.openai_api_key:
        logger.error("openai_not_configured")
        raise AIServiceError()
    return AsyncOpenAI(
        api_key=settings.openai_api_key,
        timeout=settings.openai_timeout_seconds,
    )


def _truncate(text: str, max_chars: int) -> str:
    """Truncate text to max_chars, appending indicator if truncated."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "\n... [truncated]"


def _strip_fences(raw: str) -> str:
    return _CODE_FENCE.sub("", raw.strip()).strip()


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _safe_parse_json(raw: str, fallback: Any) -> Any:
    """Parse JSON from an LLM reply, tolerating markdown fences."""
    try:
        return json.loads(_strip_fences(raw))
    except (json.JSONDecodeError, TypeError) as exc:
        logger.warning("llm_json_parse_error", error=str(exc), raw_head=(raw or "")[:200])
        return fallback


async def _chat(
    endpoint: str,
    system: str,
    user: str,
    *,
    max_tokens: int,
    temperature: float,
    json_mode: bool = False,
) -> str:
    """Single chat completion; vendor failures become AIServiceError."""
    kwargs: Dict[str, Any] = {}
    if json_mode:
        kwargs["response_format"] = {"type": "json_object"}
    try:
        client = _client()
        response = await client.chat.completions.create(
            model=settings.openai_chat_model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            **kwargs,
        )
        return response.choices[0].message.content or ""
    except openai.RateLimitError as exc:
        logger.error("openai_rate_limit", endpoint=endpoint)
        raise AIServiceError() from exc
    except openai.APIError as exc:
        logger.error("openai_api_error", endpoint=endpoint, error=str(exc))
        raise AIServiceError() from exc


# ── Keyword analysis ──────────────────────────────────────────────────────────


async def analyze_job_description(job_description: str) -> Dict[str, List[str]]:
    """
    Categorize a job description's keywords into the seven ATS categories.

    The LLM is asked for the categorized object directly. When the reply
    cannot be parsed into that shape, any flat keyword list found in it is
    categorized by the rule-based fallback instead.

    Returns:
        {"technicalSkills": [...], "softSkills": [...], ..., "certifications": [...]}
    """
    jd = _truncate(job_description.strip(), _MAX_JD_CHARS)
    keys = ", ".join(f'"{c}"' for c in CATEGORIES)
    raw = await _chat(
        "analyze_job_description",
        (
            "As a professional resume optimization expert, extract relevant keywords "
            "from the job description. Focus only on skills, technologies, "
            "qualifications and job-related terms. Keep each keyword short "
            "(1-4 words). Return ONLY a JSON object with these exact keys, each "
            f"an array of strings: {keys}. "
            "Do not include any markdown, code fences, or explanation."
        ),
        jd,
        max_tokens=settings.openai_max_tokens_keywords,
        temperature=0.0,
        json_mode=True,
    )
    parsed = _safe_parse_json(raw, None)

    if isinstance(parsed, dict) and any(isinstance(parsed.get(c), list) for c in CATEGORIES):
        result = {
            c: [k.strip() for k in _as_list(parsed.get(c)) if isinstance(k, str) and k.strip()]
            for c in CATEGORIES
        }
        return process_keywords_for_ats(result)

    flat: List[str] = []
    if isinstance(parsed, list):
        flat = [k for k in parsed if isinstance(k, str)]
    elif isinstance(parsed, dict) and isinstance(parsed.get("keywords"), list):
        flat = [k for k in parsed["keywords"] if isinstance(k, str)]
    logger.info("keyword_analysis_fallback", keywords=len(flat))
    return simple_categorize(flat)


# ── Generation ────────────────────────────────────────────────────────────────


def _resume_summary(resume: Optional[Dict[str, Any]]) -> str:
    """Compact text view of the resume parts a cover letter can draw on."""
    if not resume:
        return ""
    lines = [f"Applicant Name: {resume.get('full_name') or ''}"]
    if resume.get("summary"):
        lines.append(f"Summary: {resume['summary']}")
    for exp in (resume.get("work_experience") or [])[:2]:
        end = "Present" if exp.get("current") else exp.get("end_date") or ""
        lines.append(
            f"{exp.get('position', '')} at {exp.get('company', '')} "
            f"({exp.get('start_date') or ''} - {end})"
        )
        lines.extend((exp.get("achievements") or [])[:2])
    for edu in (resume.get("education") or [])[:1]:
        lines.append(
            f"{edu.get('degree', '')} in {edu.get('field_of_study', '')} from {edu.get('institution', '')}"
        )
    skills = resume.get("skills") or resume.get("technical_skills") or []
    if skills:
        lines.append("Key Skills: " + ", ".join(skills[:10]))
    return "\n".join(lines)


async def generate_cover_letter_body(
    *,
    job_title: str,
    company: str,
    job_description: str,
    resume: Optional[Dict[str, Any]] = None,
    recipient_name: Optional[str] = None,
    style: str = "standard",
) -> str:
    """
    Write the body paragraphs of a cover letter. The salutation and
    sign-off are added by the cover letter layout, not the model.
    """
    jd = _truncate(job_description.strip(), 2_500)
    background = _truncate(_resume_summary(resume), _MAX_RESUME_CHARS)
    tone = _LETTER_STYLES.get(style, _LETTER_STYLES["standard"])

    prompt = (
        f"Generate only the BODY CONTENT for a personalized cover letter for a "
        f"{job_title} position at {company}.\n\n{tone}\n\n"
        "Structure: a brief opening paragraph naming the position and company, "
        "two body paragraphs highlighting only the most relevant qualifications, "
        "and a concise closing paragraph with a call to action.\n"
        "Constraints: at most 300 words; no salutation, no signature, no "
        "placeholders; never invent experience that is not in the background.\n\n"
        f"## Job Description\n{jd}\n\n"
        f"## Applicant Background\n{background or 'Not provided'}"
    )
    if recipient_name:
        prompt += f"\n\nThe letter is addressed to {recipient_name}."

    body = await _chat(
        "generate_cover_letter",
        (
            "You are an expert career coach who writes persuasive, tailored cover "
            "letters that fit on a single page."
        ),
        prompt,
        max_tokens=settings.openai_max_tokens_generate,
        temperature=0.7,
    )
    return body.strip()


async def enhance_summary(summary: str, target_job_title: str = "") -> str:
    """Rewrite a resume summary to 3-4 sentences; never adds new facts."""
    text = _truncate(summary.strip(), _MAX_SUMMARY_CHARS)
    target = f" for a {target_job_title} role" if target_job_title else ""
    enhanced = await _chat(
        "enhance_summary",
        (
            "You are a professional resume writer. Rewrite the summary in 3-4 "
            "sentences using strong, ATS-friendly language. NEVER fabricate "
            "experience, employers, or credentials. Return only the rewritten "
            "summary text."
        ),
        f"Rewrite this professional summary{target}:\n\n{text}",
        max_tokens=300,
        temperature=0.7,
    )
    return enhanced.strip() or summary


# ── Experience and project rewriting ──────────────────────────────────────────

_BULLET_MARKER = re.compile(r"^[-•*]\s+")


def role_overlap(position: str, job_title: str) -> float:
    """
    Percentage of shared title words (longer than three characters),
    measured against the shorter of the two titles.
    """
    position_words = [w for w in position.lower().split() if len(w) > 3]
    title_words = [w for w in job_title.lower().split() if len(w) > 3]
    if not position_words or not title_words:
        return 0.0
    shared = sum(1 for w in position_words if w in title_words)
    return min(shared / len(position_words), shared / len(title_words)) * 100


def _bullets(reply: str) -> List[str]:
    lines = (_BULLET_MARKER.sub("", line.strip()) for line in reply.splitlines())
    return [line.strip() for line in lines if line.strip()]


async def enhance_experience_points(
    *,
    job_title: str,
    job_description: str,
    experience: Dict[str, Any],
    context: str = "",
) -> List[str]:
    """
    Rewrite one work experience entry as 3-5 achievement bullets aimed at
    the target job.

    Roles that barely overlap the target title (under 30%) get a
    career-change prompt that leans on transferable skills.
    """
    position = experience.get("position") or ""
    overlap = role_overlap(position, job_title)
    achievements = "\n".join(f"- {a}" for a in experience.get("achievements") or [])
    entry = (
        f"Position: {position}\n"
        f"Company: {experience.get('company') or ''}\n"
        f"Description: {experience.get('description') or ''}\n"
        f"Current achievements:\n{achievements or 'None listed'}"
    )
    if overlap < 30:
        framing = (
            f"The candidate is changing careers into a {job_title} role. Reframe "
            "this experience around transferable skills the target role values."
        )
    else:
        if overlap > 70:
            alignment = "highly similar"
        elif overlap > 50:
            alignment = "related"
        else:
            alignment = "somewhat related"
        framing = (
            f"This {alignment} role should be presented as direct preparation for "
            f"a {job_title} position, using the job description's terminology."
        )

    prompt = (
        f"{framing}\n\n## Experience\n{entry}\n\n"
        f"## Job Description\n{_truncate(job_description.strip(), 2_000)}"
    )
    if context:
        prompt += f"\n\n## Additional Context\n{_truncate(context.strip(), 500)}"

    reply = await _chat(
        "enhance_experience",
        (
            "You are a professional resume writer. Return 3-5 concise achievement "
            "bullet points, one per line, starting with strong action verbs. NEVER "
            "fabricate employers, numbers, or credentials. Return only the bullets."
        ),
        prompt,
        max_tokens=500,
        temperature=0.7,
    )
    return _bullets(reply)


async def enhance_project(
    *,
    job_title: str,
    job_description: str,
    project: Dict[str, Any],
) -> str:
    """Rewrite a project description as one 60-100 word paragraph."""
    technologies = ", ".join(project.get("technologies") or [])
    prompt = (
        f"Rewrite this project description for a {job_title} application.\n\n"
        f"Project: {project.get('name') or ''}\n"
        f"Description: {project.get('description') or ''}\n"
        f"Technologies: {technologies or 'Not listed'}\n\n"
        f"## Job Description\n{_truncate(job_description.strip(), 2_000)}"
    )
    reply = await _chat(
        "enhance_project",
        (
            "You are a professional resume writer. Write a single paragraph of "
            "60-100 words that highlights the skills the job values. NEVER invent "
            "features, results, or technologies. Return only the paragraph."
        ),
        prompt,
        max_tokens=350,
        temperature=0.7,
    )
    return reply.strip() or (project.get("description") or "")
