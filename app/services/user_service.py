"""
User service - profile, password and billing details.

Routes never touch the database directly - they call methods here.
"""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import hash_password, verify_password
from app.core.exceptions import BadRequestException, UnsupportedRegionError
from app.core.logging import get_logger
from app.models.billing_details import BillingDetails
from app.models.user import User
from app.payments import gateway_name_for_country
from app.payments.selector import REGION_CURRENCY
from app.repositories.billing_repository import BillingRepository
from app.repositories.cover_letter_repository import CoverLetterRepository
from app.repositories.job_application_repository import JobApplicationRepository
from app.repositories.resume_repository import ResumeRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.repositories.user_repository import UserRepository
from app.sanitization import sanitize_phone, strict_text
from app.schemas.user import (
    BillingDetailsResponse,
    BillingDetailsUpdate,
    UserProfileResponse,
    UserResponse,
)

logger = get_logger(__name__)


class UserService:
    """Handles user profile operations."""

    def __init__(self):
        self.user_repo = UserRepository()
        self.billing_repo = BillingRepository()
        self.resume_repo = ResumeRepository()
        self.cover_letter_repo = CoverLetterRepository()
        self.application_repo = JobApplicationRepository()
        self.subscription_repo = SubscriptionRepository()

    async def get_profile(
        self,
        db: AsyncSession,
        user: User,
    ) -> UserProfileResponse:
        """Full user profile with document counts and subscription status."""
        subscription = await self.subscription_repo.get_current(db, user.id)

        return UserProfileResponse(
            **self._to_response(user).model_dump(),
            resumes_count=await self.resume_repo.count_for_user(db, user.id),
            cover_letters_count=await self.cover_letter_repo.count_for_user(db, user.id),
            job_applications_count=await self.application_repo.count_for_user(db, user.id),
            subscription_status=subscription.status if subscription else None,
        )

    async def update_profile(
        self,
        db: AsyncSession,
        user: User,
        *,
        full_name: Optional[str] = None,
    ) -> UserResponse:
        """Update user profile fields."""
        if full_name is not None:
            user = await self.user_repo.update(
                db,
                user,
                full_name=strict_text(full_name, "full_name", max_length=100) or None,
            )
            await db.commit()

        return self._to_response(user)

    async def change_password(
        self,
        db: AsyncSession,
        user: User,
        *,
        current_password: str,
        new_password: str,
    ) -> None:
        """
        Change user's password.

        Raises:
            BadRequestException: If current password is wrong.
        """
        if not verify_password(current_password, user.password_hash):
            raise BadRequestException("Current password is incorrect")

        await self.user_repo.update(db, user, password_hash=hash_password(new_password))
        await db.commit()
        logger.info("password_changed", user_id=str(user.id))

    # ── Billing ─────────────────────────────────────────────────────────────

    async def get_billing(
        self,
        db: AsyncSession,
        user: User,
    ) -> Optional[BillingDetailsResponse]:
        billing = await self.billing_repo.get_by_user(db, user.id)
        if billing is None:
            return None
        return self._billing_response(billing)

    async def update_billing(
        self,
        db: AsyncSession,
        user: User,
        data: BillingDetailsUpdate,
    ) -> BillingDetailsResponse:
        """Create or replace the user's billing details."""
        country = data.country.strip().upper()
        if not country.isalpha():
            raise BadRequestException("Country must be an ISO-3166 alpha-2 code")

        fields = {
            "full_name": strict_text(data.full_name, "full_name", max_length=100, required=True),
            "address_line1": strict_text(data.address_line1, "address_line1", required=True),
            "address_line2": strict_text(data.address_line2, "address_line2") or None,
            "city": strict_text(data.city, "city", max_length=100, required=True),
            "state": strict_text(data.state, "state", max_length=100) or None,
            "country": country,
            "postal_code": strict_text(data.postal_code, "postal_code", max_length=20, required=True),
            "phone": sanitize_phone(data.phone, "phone") or None,
            "tax_id": strict_text(data.tax_id, "tax_id", max_length=50) or None,
        }

        billing = await self.billing_repo.get_by_user(db, user.id)
        if billing is None:
            billing = await self.billing_repo.create(db, user_id=user.id, **fields)
        else:
            billing = await self.billing_repo.update(db, billing, **fields)
        await db.commit()

        logger.info("billing_details_saved", user_id=str(user.id), country=country)
        return self._billing_response(billing)

    def _billing_response(self, billing: BillingDetails) -> BillingDetailsResponse:
        response = BillingDetailsResponse.model_validate(billing)
        try:
            gateway = gateway_name_for_country(billing.country)
        except UnsupportedRegionError:
            # Saved, but checkout will refuse until the region is supported
            return response
        response.gateway = gateway
        response.currency = REGION_CURRENCY[gateway]
        return response

    def _to_response(self, user: User) -> UserResponse:
        return UserResponse.model_validate(user)
