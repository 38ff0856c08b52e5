"""
Repository layer - data access abstraction.

Repositories handle all database queries, keeping SQL/ORM logic
out of the service and route layers.
"""
from app.repositories.base import BaseRepository, OwnedRepository
from app.repositories.billing_repository import BillingRepository
from app.repositories.cover_letter_repository import CoverLetterRepository
from app.repositories.job_application_repository import JobApplicationRepository
from app.repositories.notification_repository import NotificationRepository
from app.repositories.payment_repository import PaymentTransactionRepository, WebhookEventRepository
from app.repositories.resume_repository import ResumeRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "OwnedRepository",
    "BillingRepository",
    "CoverLetterRepository",
    "JobApplicationRepository",
    "NotificationRepository",
    "PaymentTransactionRepository",
    "ResumeRepository",
    "SubscriptionRepository",
    "UserRepository",
    "WebhookEventRepository",
]
