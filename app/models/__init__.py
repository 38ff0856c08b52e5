"""
Database models for ResumeForge.

All models use UUID primary keys and include created_at/updated_at timestamps.
"""
from app.models.base import BaseModel, TimestampMixin, UUIDMixin
from app.models.user import User
from app.models.resume import Resume
from app.models.cover_letter import CoverLetter
from app.models.job_application import ApplicationPriority, ApplicationStatus, JobApplication
from app.models.billing_details import BillingDetails
from app.models.subscription import Subscription, SubscriptionStatus
from app.models.payment_transaction import PaymentTransaction, TransactionStatus
from app.models.payment_webhook_event import PaymentWebhookEvent
from app.models.notification import Notification, NotificationPriority, NotificationType

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "UUIDMixin",
    "User",
    "Resume",
    "CoverLetter",
    "JobApplication",
    "ApplicationStatus",
    "ApplicationPriority",
    "BillingDetails",
    "Subscription",
    "SubscriptionStatus",
    "PaymentTransaction",
    "TransactionStatus",
    "PaymentWebhookEvent",
    "Notification",
    "NotificationType",
    "NotificationPriority",
]
