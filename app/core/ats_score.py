"""
Rule-based ATS compatibility scoring.

A resume is scored out of 100 across five weighted categories:

    Keyword Match                40
    Keyword Placement            20
    Formatting Compliance        15
    Experience Relevance         15
    Education & Certifications   10

Each category also reports its own score on a 0-100 scale with feedback
text and a priority. When categorized job keywords are supplied (see
``app.core.ai.analyze_job_description``) a separate weighted job-specific
score lists which of them the resume contains.

Nothing here calls the LLM; the same resume always gets the same score.
"""
import re
from dataclasses import asdict
from typing import Any, Dict, Iterator, List, Mapping, Optional

from app.core.keywords import CATEGORIES
from app.documents.base import ResumeData

EMPTY_RESUME_SCORE = 5

GENERAL_KEYWORDS = (
    "communication", "teamwork", "leadership", "project management", "problem solving",
    "time management", "analytical", "collaborative", "innovative", "detail-oriented",
)

# Job keyword categories that weigh more (or less) in the job-specific score
CATEGORY_WEIGHTS: Dict[str, float] = {
    "technicalSkills": 1.5,
    "softSkills": 1.0,
    "industryTerms": 1.4,
    "tools": 1.3,
    "responsibilities": 1.2,
    "certifications": 1.1,
    "education": 0.9,
}

# Spelling variants counted as the same keyword
TERM_VARIATIONS: Dict[str, tuple] = {
    "javascript": ("js",),
    "typescript": ("ts",),
    "react": ("reactjs", "react.js", "react js"),
    "node": ("nodejs", "node.js", "node js"),
    "vue": ("vuejs", "vue.js", "vue js"),
    "angular": ("angularjs", "angular.js", "angular js"),
    "c#": ("csharp", "c sharp"),
    "c++": ("cpp", "cplusplus"),
    "product management": ("product manager", "managing products"),
    "project management": ("project manager", "managing projects"),
    "machine learning": ("ml",),
    "artificial intelligence": ("ai",),
    "user experience": ("ux",),
    "user interface": ("ui",),
    "amazon web services": ("aws",),
    "microsoft azure": ("azure",),
    "continuous integration": ("ci",),
    "continuous deployment": ("cd",),
}

TITLE_MISMATCH_SUGGESTION = (
    "Your work experience job titles don't directly match your target position. "
    "Consider adding a 'Key Skills' section that explicitly mentions skills "
    "relevant to the target job."
)
MISSING_KEYWORDS_SUGGESTION = (
    "Your resume is missing several keywords from the job description. Review "
    "the keywords list and incorporate more of them in your resume where appropriate."
)
LOOKS_GOOD_SUGGESTION = (
    "Overall, your resume looks good! Consider revisiting your professional "
    "summary to ensure it aligns with your target position."
)

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def _entry(category: str, points: float, out_of: float, feedback: str, high: float, medium: float) -> Dict[str, Any]:
    if points < high:
        priority = "high"
    elif points < medium:
        priority = "medium"
    else:
        priority = "low"
    return {
        "category": category,
        "score": round(points / out_of * 100, 1),
        "feedback": feedback,
        "priority": priority,
    }


def _flatten(value: Any) -> Iterator[str]:
    if isinstance(value, str):
        yield value
    elif isinstance(value, Mapping):
        for item in value.values():
            yield from _flatten(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from _flatten(item)


def resume_text(resume: ResumeData) -> str:
    """Every text value in the resume, lowercased, one per line."""
    return "\n".join(s for s in _flatten(asdict(resume)) if s).lower()


def normalize_text(text: str) -> str:
    return _WHITESPACE.sub(" ", _PUNCTUATION.sub(" ", text.lower())).strip()


def all_skills(resume: ResumeData) -> List[str]:
    skills = list(resume.skills) + list(resume.technical_skills) + list(resume.soft_skills)
    for category in resume.skill_categories:
        skills.extend(category.skills)
    return skills


def title_words(title: str) -> List[str]:
    """Words longer than three characters; short words carry no signal."""
    return [w for w in title.lower().split() if len(w) > 3]


def _has_term(text: str, term: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(term)}(?!\w)", text) is not None


def keyword_found(text: str, normalized: str, keyword: str) -> bool:
    """
    Whether a job keyword appears in the resume.

    Besides a plain substring match, singular/plural forms, known spelling
    variants ("React.js" for "React"), hyphenated or joined forms and
    spelled-out acronyms all count.
    """
    lowered = keyword.lower().strip()
    if not lowered:
        return False
    if lowered in text:
        return True

    norm = normalize_text(keyword)
    if norm and norm in normalized:
        return True
    if norm:
        variant = norm[:-1] if norm.endswith("s") else norm + "s"
        if _has_term(normalized, variant):
            return True

    for base, variants in TERM_VARIATIONS.items():
        terms = (base,) + variants
        if any(_has_term(lowered, t) for t in terms) and any(_has_term(text, t) for t in terms):
            return True

    if len(keyword) > 3 and keyword.isalpha() and keyword.isupper():
        expanded = r"\w+ ".join(rf"\b{c}" for c in keyword.lower()) + r"\w+\b"
        if re.search(expanded, text):
            return True

    if "-" in lowered or " " in lowered:
        joined = re.sub(r"[-\s]", "", lowered)
        spaced = lowered.replace("-", " ")
        if joined in text or spaced in text:
            return True

    return False


def has_minimal_content(resume: ResumeData) -> bool:
    return bool(
        resume.work_experience
        or resume.education
        or all_skills(resume)
        or len(resume.summary.strip()) > 30
    )


# ── General score ─────────────────────────────────────────────────────────────


def _empty_resume_feedback() -> List[Dict[str, Any]]:
    return [
        {
            "category": "Content Completeness",
            "score": EMPTY_RESUME_SCORE,
            "feedback": (
                "Your resume needs more content. Add your work experience, "
                "education, skills, and a professional summary."
            ),
            "priority": "high",
        },
        {
            "category": "ATS Compatibility",
            "score": EMPTY_RESUME_SCORE,
            "feedback": (
                "Most ATS systems require detailed professional information "
                "to properly evaluate your resume."
            ),
            "priority": "high",
        },
        {
            "category": "Resume Structure",
            "score": EMPTY_RESUME_SCORE,
            "feedback": "Create a complete resume with standard sections to improve your score.",
            "priority": "high",
        },
    ]


def _keyword_match(resume: ResumeData, skills: List[str], text: str) -> tuple:
    matched = [k for k in GENERAL_KEYWORDS if k in text]
    points = min(len(skills), 20) / 20 * 25
    points += len(matched) / len(GENERAL_KEYWORDS) * 15
    if resume.technical_skills and resume.soft_skills and len(skills) > 5:
        points += 5
    points = min(40.0, points)

    if points < 25:
        missing = [k for k in GENERAL_KEYWORDS if k not in matched][:5]
        feedback = (
            "Add more relevant skills and industry keywords. Consider including: "
            + ", ".join(missing) + "."
        )
    elif points < 35:
        feedback = (
            "Good keyword inclusion. Consider organizing your skills into "
            "technical and soft skill categories."
        )
    else:
        feedback = "Excellent keyword match with a good balance of technical and soft skills."
    return points, _entry("Keyword Match", points, 40, feedback, 25, 35)


def _keyword_placement(resume: ResumeData, skills: List[str]) -> tuple:
    lowered = [s.lower() for s in skills]

    def hits(section: str) -> int:
        section = section.lower()
        return sum(1 for skill in lowered if skill in section)

    count = hits(resume.summary) if resume.summary else 0
    for exp in resume.work_experience:
        count += hits(exp.position)
        count += sum(hits(a) for a in exp.achievements)
        count += hits(exp.description)

    points = min(20.0, count / len(skills) * 20) if skills else 0.0
    if points < 10:
        feedback = (
            "Improve your score by including more skills in your summary "
            "and work experience descriptions."
        )
    elif points < 15:
        feedback = (
            "Good keyword placement. Add more skills to your professional "
            "summary for better visibility."
        )
    else:
        feedback = "Excellent keyword placement throughout critical resume sections."
    return points, _entry("Keyword Placement", points, 20, feedback, 10, 15)


def _date_shape(value: str) -> str:
    return f"{len(value)}{'/' if '/' in value else ''}{'-' if '-' in value else ''}{' ' if ' ' in value else ''}"


def _formatting(resume: ResumeData, skills: List[str]) -> tuple:
    points = 15.0
    issues: List[str] = []

    missing_sections = [
        name for name, present in (
            ("summary", len(resume.summary) > 30),
            ("experience", bool(resume.work_experience)),
            ("education", bool(resume.education)),
            ("skills", bool(skills)),
        )
        if not present
    ]
    if missing_sections:
        issues.append("Missing standard sections: " + ", ".join(missing_sections))
        points -= min(3, len(missing_sections) * 3)

    missing_contact = [
        name for name, valid in (
            ("full_name", len(resume.full_name) >= 3),
            ("email", "@" in resume.email),
            ("phone", len(resume.phone) >= 5),
        )
        if not valid
    ]
    if missing_contact:
        issues.append("Missing contact details: " + ", ".join(missing_contact))
        points -= min(3, len(missing_contact) * 1.5)

    experience = resume.work_experience
    if len(experience) > 1:
        shapes = {_date_shape(e.start_date) for e in experience if e.start_date}
        if len(shapes) > 1:
            issues.append("Inconsistent date formats in work experience")
            points -= 3

        with_achievements = sum(1 for e in experience if e.achievements)
        with_description = sum(1 for e in experience if e.description.strip())
        if with_achievements and with_description and with_achievements != len(experience):
            issues.append("Inconsistent use of bullet points across experience entries")
            points -= 3

    points = max(0.0, points)
    if issues:
        feedback = "Format issues: " + ". ".join(issues[:2])
    else:
        feedback = "Excellent formatting. Your resume follows standard ATS-friendly structure."
    return points, _entry("Formatting Compliance", points, 15, feedback, 10, 12)


def position_matches(position: str, target: str) -> bool:
    position = position.lower()
    target = target.lower()
    if not position or not target:
        return False
    target_words = title_words(target)
    position_words = title_words(position)
    return (
        any(w in position_words for w in target_words)
        or target in position
        or position in target
    )


def _experience_relevance(resume: ResumeData, target_title: str) -> tuple:
    experience = resume.work_experience
    points = 0.0
    if experience:
        if target_title:
            relevant = sum(1 for e in experience if position_matches(e.position, target_title))
        else:
            # Without a target, reward detailed entries instead
            relevant = sum(
                1 for e in experience
                if len(e.achievements) >= 3 or len(e.description) > 100
            )
        points = min(15.0, relevant / len(experience) * 15)

    if points < 8:
        feedback = (
            "Your work experience could better align with your target role. "
            "Add more relevant positions or emphasize transferable skills."
        )
    elif points < 12:
        feedback = (
            "Good job experience relevance. Consider highlighting more specific "
            "achievements relevant to your target role."
        )
    else:
        feedback = "Excellent job experience alignment with your target role."
    return points, _entry("Experience Relevance", points, 15, feedback, 8, 12)


def _education_certifications(resume: ResumeData) -> tuple:
    points = 0.0
    if resume.education:
        points += 5
        complete = all(
            e.institution and e.degree and e.field_of_study and (e.start_date or e.end_date)
            for e in resume.education
        )
        if complete:
            points += 2
    points += min(3, len(resume.certifications))
    points = min(10.0, points)

    if points < 5:
        feedback = "Add more detail to your education section. Include institutions, degrees, and dates."
    elif points < 8:
        feedback = (
            "Good education details. Consider adding relevant certifications "
            "to strengthen your qualifications."
        )
    else:
        feedback = "Excellent education and certification details."
    return points, _entry("Education & Certifications", points, 10, feedback, 5, 8)


def general_score(resume: ResumeData, target_title: str = "") -> Dict[str, Any]:
    """Score a resume on its own; ``target_title`` only affects experience relevance."""
    if not has_minimal_content(resume):
        return {"score": EMPTY_RESUME_SCORE, "feedback": _empty_resume_feedback()}

    skills = all_skills(resume)
    text = resume_text(resume)
    parts = [
        _keyword_match(resume, skills, text),
        _keyword_placement(resume, skills),
        _formatting(resume, skills),
        _experience_relevance(resume, target_title or resume.target_job_title),
        _education_certifications(resume),
    ]
    return {
        "score": round(sum(points for points, _ in parts)),
        "feedback": [entry for _, entry in parts],
    }


# ── Job-specific score ────────────────────────────────────────────────────────


def job_specific_score(resume: ResumeData, job_keywords: Mapping[str, List[str]]) -> Dict[str, Any]:
    """
    Weighted share of the job's keywords present in the resume.

    Returns:
        {"score": 0-100, "found": [...], "missing": [...],
         "categories": {category: {"found": [...], "missing": [...]}}}
    """
    text = resume_text(resume)
    normalized = normalize_text(text)
    categories: Dict[str, Dict[str, List[str]]] = {}
    weighted_found = 0.0
    weighted_total = 0.0

    for category in CATEGORIES:
        keywords = [k for k in job_keywords.get(category) or [] if k.strip()]
        found = [k for k in keywords if keyword_found(text, normalized, k)]
        missing = [k for k in keywords if k not in found]
        categories[category] = {"found": found, "missing": missing}
        weight = CATEGORY_WEIGHTS.get(category, 1.0)
        weighted_found += len(found) * weight
        weighted_total += len(keywords) * weight

    score = round(weighted_found / weighted_total * 100) if weighted_total else 0
    return {
        "score": score,
        "found": [k for c in categories.values() for k in c["found"]],
        "missing": [k for c in categories.values() for k in c["missing"]],
        "categories": categories,
    }


# ── Combined ──────────────────────────────────────────────────────────────────


def job_title_mismatch(resume: ResumeData, job_title: str) -> bool:
    """True when no position shares a meaningful word with the job title."""
    if not job_title or not resume.work_experience:
        return False
    wanted = title_words(job_title)
    return not any(
        any(w in title_words(e.position) for w in wanted) for e in resume.work_experience
    )


def overall_suggestions(
    feedback: List[Dict[str, Any]],
    job_score: Optional[int],
    title_mismatch: bool,
) -> List[str]:
    suggestions = [f["feedback"] for f in feedback if f["priority"] == "high"]
    if title_mismatch:
        suggestions.append(TITLE_MISMATCH_SUGGESTION)
    if job_score is not None and job_score < 50:
        suggestions.append(MISSING_KEYWORDS_SUGGESTION)
    if len(suggestions) < 2:
        medium = [f["feedback"] for f in feedback if f["priority"] == "medium"]
        suggestions.extend(medium[: 2 - len(suggestions)])
    if not suggestions:
        suggestions.append(LOOKS_GOOD_SUGGESTION)
    return suggestions


def calculate_ats_score(
    resume: ResumeData,
    job_title: str = "",
    job_keywords: Optional[Mapping[str, List[str]]] = None,
) -> Dict[str, Any]:
    """
    Full ATS report for a resume.

    ``job_keywords`` are the categorized keywords of a job description;
    without them no job-specific score or keyword lists are returned.
    """
    general = general_score(resume, job_title)
    job = job_specific_score(resume, job_keywords) if job_keywords else None
    job_score = job["score"] if job else None
    return {
        "general_score": general["score"],
        "job_specific_score": job_score,
        "feedback": general["feedback"],
        "keywords": job,
        "suggestions": overall_suggestions(
            general["feedback"], job_score, job_title_mismatch(resume, job_title)
        ),
    }
