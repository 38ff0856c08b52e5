"""
User routes.

Thin controllers - all business logic lives in UserService.
"""
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.api.deps import get_current_user
from app.models.user import User
from app.services.user_service import UserService
from app.schemas.user import (
    BillingDetailsResponse,
    BillingDetailsUpdate,
    UserResponse,
    UserProfileResponse,
    UserUpdate,
)
from app.schemas.auth import ChangePasswordRequest
from app.schemas.base import MessageResponse

router = APIRouter(prefix="/users", tags=["users"])

user_service = UserService()


@router.get("/me", response_model=UserProfileResponse)
async def get_current_user_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Current user's profile with document counts and subscription status."""
    return await user_service.get_profile(db, current_user)


@router.patch("/me", response_model=UserResponse)
async def update_current_user(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.update_profile(db, current_user, full_name=data.full_name)


@router.put("/me/password", response_model=MessageResponse)
async def change_password(
    data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await user_service.change_password(
        db,
        current_user,
        current_password=data.current_password,
        new_password=data.new_password,
    )
    return MessageResponse(message="Password changed successfully")


@router.get("/me/billing", response_model=Optional[BillingDetailsResponse])
async def get_billing_details(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Saved billing details, or null if none have been entered yet."""
    return await user_service.get_billing(db, current_user)


@router.put("/me/billing", response_model=BillingDetailsResponse)
async def save_billing_details(
    data: BillingDetailsUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create or replace billing details; the country decides the payment gateway."""
    return await user_service.update_billing(db, current_user, data)
