"""
Billing country → payment gateway.

  IN                 → Razorpay (INR)
  stripe_countries   → Stripe   (USD)
  paypal_countries   → PayPal   (USD)
  anything else      → UnsupportedRegionError
"""
from typing import Dict, Optional, Type

from app.core.config import Settings, settings
from app.core.exceptions import BadRequestException, UnsupportedRegionError
from app.core.logging import get_logger
from app.payments.base import PaymentGateway
from app.payments.paypal_gateway import PayPalGateway
from app.payments.razorpay_gateway import RazorpayGateway
from app.payments.stripe_gateway import StripeGateway

logger = get_logger(__name__)

GATEWAYS: Dict[str, Type[PaymentGateway]] = {
    "razorpay": RazorpayGateway,
    "stripe": StripeGateway,
    "paypal": PayPalGateway,
}

REGION_CURRENCY = {"razorpay": "INR", "stripe": "USD", "paypal": "USD"}


def gateway_name_for_country(country: Optional[str], config: Settings = settings) -> str:
    code = (country or "").strip().upper()
    if not code:
        raise UnsupportedRegionError("Add a billing country before making a payment")
    if code in config.razorpay_countries:
        return "razorpay"
    if code in config.stripe_countries:
        return "stripe"
    if code in config.paypal_countries:
        return "paypal"
    logger.info("payment_region_unsupported", country=code)
    raise UnsupportedRegionError(f"Payments are not yet available in your region ({code})")


def currency_for_country(country: Optional[str], config: Settings = settings) -> str:
    return REGION_CURRENCY[gateway_name_for_country(country, config)]


def get_gateway_for_country(
    country: Optional[str],
    currency: Optional[str] = None,
    config: Settings = settings,
) -> PaymentGateway:
    """
    Pick the adapter for a billing country.

    Raises:
        UnsupportedRegionError: Unknown country, or `currency` is not the
            one charged in that region
    """
    name = gateway_name_for_country(country, config)
    if currency and currency.upper() != REGION_CURRENCY[name]:
        raise UnsupportedRegionError(
            f"{currency.upper()} payments are not supported for your region; "
            f"use {REGION_CURRENCY[name]}"
        )
    return GATEWAYS[name](config)


def get_gateway_by_name(name: str, config: Settings = settings) -> PaymentGateway:
    """Adapter for a stored gateway name (e.g. on a transaction row)."""
    try:
        return GATEWAYS[name.lower()](config)
    except KeyError:
        raise BadRequestException(f"Unknown payment gateway: {name}")
