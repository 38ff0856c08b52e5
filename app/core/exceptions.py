"""
Custom exceptions for the application.
All API exceptions should inherit from APIException for consistent error handling.
"""
from typing import Optional, Any


class APIException(Exception):
    """
    Base exception for all API errors.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Any] = None,
    ):
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details
        super().__init__(self.message)


class BadRequestException(APIException):
    """400 Bad Request"""

    def __init__(
        self,
        message: str = "Bad request",
        code: str = "BAD_REQUEST",
        details: Optional[Any] = None,
    ):
        super().__init__(400, code, message, details)


class UnauthorizedException(APIException):
    """401 Unauthorized"""

    def __init__(self, message: str = "Unauthorized", code: str = "UNAUTHORIZED"):
        super().__init__(401, code, message)


class PaymentRequiredException(APIException):
    """402 Payment Required"""

    def __init__(self, message: str = "Payment required", code: str = "PAYMENT_REQUIRED"):
        super().__init__(402, code, message)


class ForbiddenException(APIException):
    """403 Forbidden"""

    def __init__(self, message: str = "Forbidden", code: str = "FORBIDDEN"):
        super().__init__(403, code, message)


class NotFoundException(APIException):
    """404 Not Found"""

    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND"):
        super().__init__(404, code, message)


class ConflictException(APIException):
    """409 Conflict"""

    def __init__(self, message: str = "Resource conflict", code: str = "CONFLICT"):
        super().__init__(409, code, message)


class ValidationException(APIException):
    """422 Validation Error"""

    def __init__(
        self,
        message: str = "Validation error",
        code: str = "VALIDATION_ERROR",
        details: Optional[Any] = None,
    ):
        super().__init__(422, code, message, details)


class InternalServerException(APIException):
    """500 Internal Server Error"""

    def __init__(
        self,
        message: str = "Internal server error",
        code: str = "INTERNAL_ERROR",
    ):
        super().__init__(500, code, message)


class ServiceUnavailableException(APIException):
    """503 - an upstream vendor (LLM, payment gateway) failed"""

    def __init__(
        self,
        message: str = "Service temporarily unavailable. Please try again later.",
        code: str = "SERVICE_UNAVAILABLE",
    ):
        super().__init__(503, code, message)


# Authentication specific exceptions
class InvalidCredentialsException(UnauthorizedException):
    """Invalid email or password"""

    def __init__(self):
        super().__init__(
            message="Invalid email or password",
            code="INVALID_CREDENTIALS",
        )


class AccountLockedException(UnauthorizedException):
    """Too many failed logins"""

    def __init__(self, minutes: int):
        super().__init__(
            message=f"Account locked after repeated failed logins. Try again in {minutes} minutes.",
            code="ACCOUNT_LOCKED",
        )


class TokenExpiredException(UnauthorizedException):
    """Token has expired"""

    def __init__(self):
        super().__init__(
            message="Token has expired",
            code="TOKEN_EXPIRED",
        )


class InvalidTokenException(UnauthorizedException):
    """Token is invalid"""

    def __init__(self):
        super().__init__(
            message="Invalid token",
            code="INVALID_TOKEN",
        )


# Resource specific exceptions
class UserNotFoundException(NotFoundException):
    """User not found"""

    def __init__(self):
        super().__init__(message="User not found", code="USER_NOT_FOUND")


class ResumeNotFoundException(NotFoundException):
    """Resume not found"""

    def __init__(self):
        super().__init__(message="Resume not found", code="RESUME_NOT_FOUND")


class CoverLetterNotFoundException(NotFoundException):
    """Cover letter not found"""

    def __init__(self):
        super().__init__(message="Cover letter not found", code="COVER_LETTER_NOT_FOUND")


class JobApplicationNotFoundException(NotFoundException):
    """Job application not found"""

    def __init__(self):
        super().__init__(message="Job application not found", code="JOB_APPLICATION_NOT_FOUND")


class NotificationNotFoundException(NotFoundException):
    """Notification not found"""

    def __init__(self):
        super().__init__(message="Notification not found", code="NOTIFICATION_NOT_FOUND")


class EmailAlreadyExistsException(ConflictException):
    """Email already registered"""

    def __init__(self):
        super().__init__(
            message="Email already registered",
            code="EMAIL_EXISTS",
        )


# Input sanitization
class SanitizationError(BadRequestException):
    """
    Raised when user input matches an attack signature or breaks a
    field rule. Always rendered as 400.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(
            message=message,
            code="SANITIZATION_ERROR",
            details={"field": field} if field else None,
        )


# Payments
class UnsupportedRegionError(BadRequestException):
    """No gateway serves this billing country / currency combination"""

    def __init__(self, message: str):
        super().__init__(message=message, code="UNSUPPORTED_REGION")


class PaymentDeclinedError(PaymentRequiredException):
    """The gateway was reached and refused the payment"""

    def __init__(self, message: str = "Payment was declined", gateway: Optional[str] = None):
        self.gateway = gateway
        super().__init__(message=message, code="PAYMENT_DECLINED")


class GatewayUnavailableError(ServiceUnavailableException):
    """The gateway could not be reached or failed server-side"""

    def __init__(self, gateway: Optional[str] = None):
        self.gateway = gateway
        super().__init__()


class AIServiceError(ServiceUnavailableException):
    """LLM call failed; the real error is logged, not returned"""

    def __init__(self):
        super().__init__()


class WebhookSignatureError(BadRequestException):
    """Webhook payload failed signature verification"""

    def __init__(self, gateway: str):
        super().__init__(
            message="Invalid webhook signature",
            code="INVALID_WEBHOOK_SIGNATURE",
            details={"gateway": gateway},
        )
