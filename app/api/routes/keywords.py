"""
Keyword analysis and AI writing helper routes.
"""
from fastapi import APIRouter, Depends, Request

from app.core.rate_limit import limiter, RATE_AI
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.keyword import (
    AnalyzeRequest,
    ATSScoreRequest,
    ATSScoreResponse,
    CategorizeRequest,
    EnhanceExperienceRequest,
    EnhanceExperienceResponse,
    EnhanceProjectRequest,
    EnhanceProjectResponse,
    EnhanceSummaryRequest,
    EnhanceSummaryResponse,
    KeywordCategories,
)
from app.services.keyword_service import KeywordService

router = APIRouter(prefix="/keywords", tags=["keywords"])
ai_router = APIRouter(prefix="/ai", tags=["ai"])

keyword_service = KeywordService()


@router.post("/categorize", response_model=KeywordCategories)
async def categorize_keywords(
    data: CategorizeRequest,
    current_user: User = Depends(get_current_user),
):
    """Sort keywords into the seven ATS categories without calling the LLM."""
    return keyword_service.categorize(data.keywords)


@router.post("/analyze", response_model=KeywordCategories)
@limiter.limit(RATE_AI)
async def analyze_job_description(
    request: Request,
    data: AnalyzeRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Extract ATS keywords from a job description.

    Falls back to rule-based categorization when the model's reply is
    not the expected JSON.
    """
    return await keyword_service.analyze(data.job_description)


@ai_router.post("/enhance-summary", response_model=EnhanceSummaryResponse)
@limiter.limit(RATE_AI)
async def enhance_summary(
    request: Request,
    data: EnhanceSummaryRequest,
    current_user: User = Depends(get_current_user),
):
    return await keyword_service.enhance_summary(data.summary, data.target_job_title)


@ai_router.post("/ats-score", response_model=ATSScoreResponse)
@limiter.limit(RATE_AI)
async def ats_score(
    request: Request,
    data: ATSScoreRequest,
    current_user: User = Depends(get_current_user),
):
    """
    Rule-based ATS report for resume content.

    The job description is optional; when sent, its keywords are extracted
    by the LLM and matched against the resume.
    """
    return await keyword_service.ats_score(data.content, data.job_title, data.job_description)


@ai_router.post("/enhance-experience", response_model=EnhanceExperienceResponse)
@limiter.limit(RATE_AI)
async def enhance_experience(
    request: Request,
    data: EnhanceExperienceRequest,
    current_user: User = Depends(get_current_user),
):
    return await keyword_service.enhance_experience(
        data.job_title, data.job_description, data.experience, data.context
    )


@ai_router.post("/enhance-project", response_model=EnhanceProjectResponse)
@limiter.limit(RATE_AI)
async def enhance_project(
    request: Request,
    data: EnhanceProjectRequest,
    current_user: User = Depends(get_current_user),
):
    return await keyword_service.enhance_project(data.job_title, data.job_description, data.project)
