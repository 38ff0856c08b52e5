"""
API Routes package.
"""
from fastapi import APIRouter

from app.api.routes.admin import router as admin_router
from app.api.routes.auth import router as auth_router
from app.api.routes.cover_letters import router as cover_letters_router
from app.api.routes.health import router as health_router
from app.api.routes.job_applications import router as job_applications_router
from app.api.routes.keywords import ai_router, router as keywords_router
from app.api.routes.notifications import router as notifications_router
from app.api.routes.payments import router as payments_router
from app.api.routes.resumes import router as resumes_router
from app.api.routes.users import router as users_router
from app.api.routes.webhooks import router as webhooks_router

# Main API router
api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(resumes_router)
api_router.include_router(cover_letters_router)
api_router.include_router(job_applications_router)
api_router.include_router(notifications_router)
api_router.include_router(keywords_router)
api_router.include_router(ai_router)
api_router.include_router(payments_router)
api_router.include_router(webhooks_router)
api_router.include_router(admin_router)

__all__ = ["api_router"]
