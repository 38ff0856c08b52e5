"""
Vendor webhook receivers.

Signatures are checked against the raw body, so these endpoints read the
bytes themselves instead of declaring a JSON body.
"""
from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.schemas.payment import WebhookAck
from app.services.webhook_service import WebhookService

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

webhook_service = WebhookService()


@router.post("/stripe", response_model=WebhookAck)
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None, alias="Stripe-Signature"),
    db: AsyncSession = Depends(get_db),
):
    payload = await request.body()
    return await webhook_service.handle(db, "stripe", payload, stripe_signature)


@router.post("/razorpay", response_model=WebhookAck)
async def razorpay_webhook(
    request: Request,
    razorpay_signature: str = Header(None, alias="X-Razorpay-Signature"),
    db: AsyncSession = Depends(get_db),
):
    payload = await request.body()
    return await webhook_service.handle(db, "razorpay", payload, razorpay_signature)
