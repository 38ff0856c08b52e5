"""
Keyword service - ATS keyword categorization, resume scoring and AI
writing helpers.
"""
from typing import Any, Dict, List, Mapping

from app.core import ai
from app.core.ats_score import calculate_ats_score
from app.core.keywords import categorize_keywords
from app.core.logging import get_logger
from app.documents.base import ResumeData
from app.sanitization import (
    clean_string_list,
    clean_text,
    sanitize_ai_response,
    sanitize_job_description,
    sanitize_prompt,
    strict_text,
)
from app.schemas.keyword import (
    ATSScoreResponse,
    EnhanceExperienceResponse,
    EnhanceProjectResponse,
    EnhanceSummaryResponse,
    ExperienceEntry,
    KeywordCategories,
    ProjectEntry,
)
from app.services.resume_service import prepare_content

logger = get_logger(__name__)


class KeywordService:
    """Stateless; no database access."""

    def categorize(self, keywords: List[str]) -> KeywordCategories:
        """Rule-based categorization of keywords the client already has."""
        cleaned = clean_string_list(keywords, "keywords", max_items=200, max_length=100)
        return KeywordCategories(**categorize_keywords(cleaned))

    async def _job_keywords(self, job_description: str) -> Dict[str, List[str]]:
        text = sanitize_job_description(job_description)
        return sanitize_ai_response(await ai.analyze_job_description(text))

    async def analyze(self, job_description: str) -> KeywordCategories:
        """Extract and categorize keywords from a job description via the LLM."""
        result = await self._job_keywords(job_description)
        logger.info(
            "job_description_analyzed",
            length=len(job_description),
            keywords=sum(len(v) for v in result.values()),
        )
        return KeywordCategories(**result)

    async def ats_score(
        self,
        content: Mapping[str, Any],
        job_title: str = "",
        job_description: str = "",
    ) -> ATSScoreResponse:
        """
        Score resume content for ATS compatibility.

        The content is sanitized the same way as a save. Only the optional
        job description goes to the LLM (for keyword extraction); the
        scoring itself is rule-based.
        """
        title = strict_text(job_title, "job_title", max_length=200)
        content = content or {}
        cleaned = prepare_content(content, content.get("target_job_title") or title)
        job_keywords = await self._job_keywords(job_description) if job_description.strip() else None

        report = calculate_ats_score(ResumeData.from_dict(cleaned), title, job_keywords)
        logger.info(
            "ats_score_calculated",
            general_score=report["general_score"],
            job_specific_score=report["job_specific_score"],
        )
        return ATSScoreResponse(**report)

    async def enhance_summary(self, summary: str, target_job_title: str = "") -> EnhanceSummaryResponse:
        text = sanitize_prompt(summary, "summary")
        target = strict_text(target_job_title, "target_job_title")
        enhanced = await ai.enhance_summary(text, target)
        return EnhanceSummaryResponse(summary=clean_text(enhanced, "summary", max_length=1000))

    async def enhance_experience(
        self,
        job_title: str,
        job_description: str,
        experience: ExperienceEntry,
        context: str = "",
    ) -> EnhanceExperienceResponse:
        entry = {
            "position": strict_text(experience.position, "experience.position", max_length=200, required=True),
            "company": strict_text(experience.company, "experience.company", max_length=200),
            "description": sanitize_prompt(experience.description, "experience.description"),
            "achievements": clean_string_list(
                experience.achievements, "experience.achievements", max_items=20, max_length=500
            ),
        }
        bullets = await ai.enhance_experience_points(
            job_title=strict_text(job_title, "job_title", max_length=200, required=True),
            job_description=sanitize_job_description(job_description),
            experience=entry,
            context=sanitize_prompt(context, "context"),
        )
        return EnhanceExperienceResponse(
            achievements=clean_string_list(bullets, "achievements", max_items=10, max_length=500)
        )

    async def enhance_project(
        self,
        job_title: str,
        job_description: str,
        project: ProjectEntry,
    ) -> EnhanceProjectResponse:
        entry = {
            "name": strict_text(project.name, "project.name", max_length=200, required=True),
            "description": sanitize_prompt(project.description, "project.description"),
            "technologies": clean_string_list(
                project.technologies, "project.technologies", max_items=30, max_length=100
            ),
        }
        description = await ai.enhance_project(
            job_title=strict_text(job_title, "job_title", max_length=200, required=True),
            job_description=sanitize_job_description(job_description),
            project=entry,
        )
        return EnhanceProjectResponse(
            description=clean_text(description, "description", max_length=2000)
        )
