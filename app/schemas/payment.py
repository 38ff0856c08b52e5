"""
Payment and subscription schemas.
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional
from uuid import UUID
from pydantic import Field
from app.schemas.base import BaseSchema, TimestampSchema, IDSchema


class GatewayResponse(BaseSchema):
    """Which gateway and currency apply to the user's billing country."""

    gateway: str
    currency: str
    country: str
    publishable_key: Optional[str] = None


class PlanResponse(BaseSchema):
    code: str
    name: str
    duration_days: int
    prices: Dict[str, Decimal]


class PaymentIntentRequest(BaseSchema):
    plan: str = Field(..., min_length=1, max_length=50)


class PaymentIntentResponse(BaseSchema):
    transaction_id: UUID
    gateway: str
    order_id: str
    amount: Decimal
    currency: str
    client_secret: Optional[str] = None
    approval_url: Optional[str] = None


class PaymentVerifyRequest(BaseSchema):
    """
    Checkout confirmation sent by the client.

    Razorpay: order_id + payment_id + signature. Stripe: order_id is the
    PaymentIntent id. PayPal: order_id is the approved order.
    """

    order_id: str = Field(..., max_length=100)
    payment_id: Optional[str] = Field(None, max_length=100)
    signature: Optional[str] = Field(None, max_length=256)


class PaymentVerifyResponse(BaseSchema):
    verified: bool
    status: str
    subscription_id: Optional[UUID] = None


class TransactionResponse(IDSchema, TimestampSchema):
    amount: Decimal
    currency: str
    gateway: str
    gateway_order_id: Optional[str] = None
    gateway_payment_id: Optional[str] = None
    status: str
    subscription_id: Optional[UUID] = None
    meta: Dict[str, Any] = Field(default_factory=dict, serialization_alias="metadata")


class SubscriptionResponse(IDSchema, TimestampSchema):
    plan: str
    status: str
    gateway: Optional[str] = None
    start_date: datetime
    end_date: datetime
    auto_renew: bool


class WebhookAck(BaseSchema):
    received: bool = True
    duplicate: bool = False
