"""
Service layer - business logic and orchestration.

RULE: Routes call services. Services call repositories. Never the reverse.
"""
from app.services.admin_service import AdminService
from app.services.auth_service import AuthService
from app.services.cover_letter_service import CoverLetterService
from app.services.job_application_service import JobApplicationService
from app.services.keyword_service import KeywordService
from app.services.notification_service import NotificationService
from app.services.payment_service import PaymentService
from app.services.resume_service import ResumeService
from app.services.user_service import UserService
from app.services.webhook_service import WebhookService

__all__ = [
    "AdminService",
    "AuthService",
    "CoverLetterService",
    "JobApplicationService",
    "KeywordService",
    "NotificationService",
    "PaymentService",
    "ResumeService",
    "UserService",
    "WebhookService",
]
