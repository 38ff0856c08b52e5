"""
Payment and subscription routes.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.rate_limit import limiter, RATE_PAYMENT
from app.api.deps import get_current_user
from app.models.user import User
from app.schemas.base import PaginatedResponse
from app.schemas.payment import (
    GatewayResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    PlanResponse,
    SubscriptionResponse,
    TransactionResponse,
)
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])

payment_service = PaymentService()


@router.get("/plans", response_model=List[PlanResponse])
async def list_plans():
    return payment_service.get_plans()


@router.get("/gateway", response_model=GatewayResponse)
async def get_gateway(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Gateway and currency for the user's billing country (400 if unsupported)."""
    return await payment_service.get_gateway(db, current_user)


@router.post("/intent", response_model=PaymentIntentResponse)
@limiter.limit(RATE_PAYMENT)
async def create_payment_intent(
    request: Request,
    data: PaymentIntentRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.create_intent(db, current_user, plan_code=data.plan)


@router.post("/verify", response_model=PaymentVerifyResponse)
@limiter.limit(RATE_PAYMENT)
async def verify_payment(
    request: Request,
    data: PaymentVerifyRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.verify(db, current_user, data)


@router.get("/subscription", response_model=Optional[SubscriptionResponse])
async def get_subscription(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.get_subscription(db, current_user)


@router.post("/subscription/cancel", response_model=SubscriptionResponse)
async def cancel_subscription(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.cancel_subscription(db, current_user)


@router.get("/transactions", response_model=PaginatedResponse[TransactionResponse])
async def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await payment_service.list_transactions(db, current_user, page=page, limit=limit)
