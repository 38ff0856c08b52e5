"""
Keyword analysis and AI helper schemas.
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import Field
from app.schemas.base import BaseSchema


class CategorizeRequest(BaseSchema):
    keywords: List[str] = Field(..., max_length=200)


class AnalyzeRequest(BaseSchema):
    job_description: str


class KeywordCategories(BaseSchema):
    """The seven ATS keyword categories, keyed as the frontend expects."""

    technicalSkills: List[str] = []
    softSkills: List[str] = []
    education: List[str] = []
    responsibilities: List[str] = []
    industryTerms: List[str] = []
    tools: List[str] = []
    certifications: List[str] = []


class EnhanceSummaryRequest(BaseSchema):
    summary: str = Field(..., min_length=1, max_length=2000)
    target_job_title: str = Field("", max_length=200)


class EnhanceSummaryResponse(BaseSchema):
    summary: str


class ATSScoreRequest(BaseSchema):
    """
    Resume content to score. With a job description the report also
    lists which of the job's keywords the resume contains.
    """

    content: Dict[str, Any]
    job_title: str = Field("", max_length=200)
    job_description: str = Field("", max_length=10000)


class ATSCategoryFeedback(BaseSchema):
    category: str
    score: float
    feedback: str
    priority: Literal["high", "medium", "low"]


class KeywordMatchGroup(BaseSchema):
    found: List[str] = []
    missing: List[str] = []


class JobKeywordMatch(KeywordMatchGroup):
    score: int
    categories: Dict[str, KeywordMatchGroup] = {}


class ATSScoreResponse(BaseSchema):
    general_score: int
    job_specific_score: Optional[int] = None
    feedback: List[ATSCategoryFeedback]
    keywords: Optional[JobKeywordMatch] = None
    suggestions: List[str]


class ExperienceEntry(BaseSchema):
    position: str = Field(..., min_length=1, max_length=200)
    company: str = Field("", max_length=200)
    description: str = Field("", max_length=2000)
    achievements: List[str] = Field(default_factory=list, max_length=20)


class EnhanceExperienceRequest(BaseSchema):
    job_title: str = Field(..., min_length=1, max_length=200)
    job_description: str
    experience: ExperienceEntry
    context: str = Field("", max_length=2000)


class EnhanceExperienceResponse(BaseSchema):
    achievements: List[str]


class ProjectEntry(BaseSchema):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = Field("", max_length=2000)
    technologies: List[str] = Field(default_factory=list, max_length=30)


class EnhanceProjectRequest(BaseSchema):
    job_title: str = Field(..., min_length=1, max_length=200)
    job_description: str
    project: ProjectEntry


class EnhanceProjectResponse(BaseSchema):
    description: str
