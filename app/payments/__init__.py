"""
Payment gateway adapters and country-based selection.
"""
from app.payments.base import PaymentGateway, PaymentIntent, WebhookEvent
from app.payments.selector import (
    currency_for_country,
    gateway_name_for_country,
    get_gateway_by_name,
    get_gateway_for_country,
)

__all__ = [
    "PaymentGateway",
    "PaymentIntent",
    "WebhookEvent",
    "currency_for_country",
    "gateway_name_for_country",
    "get_gateway_by_name",
    "get_gateway_for_country",
]
