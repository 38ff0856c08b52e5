"""
Pydantic schemas for API validation and serialization.
"""
from app.schemas.base import (
    BaseSchema,
    PaginatedResponse,
    MessageResponse,
)
from app.schemas.auth import (
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    RefreshTokenRequest,
    ChangePasswordRequest,
)
from app.schemas.user import (
    UserUpdate,
    UserResponse,
    UserProfileResponse,
    BillingDetailsUpdate,
    BillingDetailsResponse,
)
from app.schemas.resume import (
    ResumeCreate,
    ResumeUpdate,
    ResumeListItem,
    ResumeResponse,
    ResumePreviewRequest,
    DocumentResponse,
    TemplateInfo,
    TemplateListResponse,
)
from app.schemas.cover_letter import (
    CoverLetterCreate,
    CoverLetterUpdate,
    CoverLetterResponse,
    CoverLetterGenerateRequest,
)
from app.schemas.job_application import (
    JobApplicationResponse,
    StatusUpdateRequest,
    BoardResponse,
)
from app.schemas.notification import NotificationResponse, UnreadCountResponse
from app.schemas.payment import (
    GatewayResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    SubscriptionResponse,
    TransactionResponse,
    WebhookAck,
)
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
from app.schemas.admin import AdminStatsResponse, AdminUserUpdate, CronRunResponse

__all__ = [
    # Base
    "BaseSchema",
    "PaginatedResponse",
    "MessageResponse",
    # Auth
    "LoginRequest",
    "RegisterRequest",
    "TokenResponse",
    "RefreshTokenRequest",
    "ChangePasswordRequest",
    # User
    "UserUpdate",
    "UserResponse",
    "UserProfileResponse",
    "BillingDetailsUpdate",
    "BillingDetailsResponse",
    # Resume
    "ResumeCreate",
    "ResumeUpdate",
    "ResumeListItem",
    "ResumeResponse",
    "ResumePreviewRequest",
    "DocumentResponse",
    "TemplateInfo",
    "TemplateListResponse",
    # Cover letter
    "CoverLetterCreate",
    "CoverLetterUpdate",
    "CoverLetterResponse",
    "CoverLetterGenerateRequest",
    # Job application
    "JobApplicationResponse",
    "StatusUpdateRequest",
    "BoardResponse",
    # Notification
    "NotificationResponse",
    "UnreadCountResponse",
    # Payment
    "GatewayResponse",
    "PaymentIntentRequest",
    "PaymentIntentResponse",
    "PaymentVerifyRequest",
    "PaymentVerifyResponse",
    "SubscriptionResponse",
    "TransactionResponse",
    "WebhookAck",
    # Keywords / AI
    "AnalyzeRequest",
    "CategorizeRequest",
    "EnhanceSummaryRequest",
    "EnhanceSummaryResponse",
    "KeywordCategories",
    "ATSScoreRequest",
    "ATSScoreResponse",
    "EnhanceExperienceRequest",
    "EnhanceExperienceResponse",
    "EnhanceProjectRequest",
    "EnhanceProjectResponse",
    # Admin
    "AdminStatsResponse",
    "AdminUserUpdate",
    "CronRunResponse",
]
