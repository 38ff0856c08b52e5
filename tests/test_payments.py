import json
from decimal import Decimal

import pytest

from app.core.config import Settings
from app.core.exceptions import (
    BadRequestException,
    GatewayUnavailableError,
    UnsupportedRegionError,
    WebhookSignatureError,
)
from app.payments.base import from_minor_units, to_minor_units
from app.payments.paypal_gateway import PayPalGateway
from app.payments.plans import get_plan, list_plans
from app.payments.razorpay_gateway import RazorpayGateway, hmac_sha256
from app.payments.selector import (
    currency_for_country,
    gateway_name_for_country,
    get_gateway_by_name,
    get_gateway_for_country,
)
from app.payments.stripe_gateway import StripeGateway


@pytest.fixture
def config():
    return Settings(
        razorpay_key_id="rzp_test_key",
        razorpay_key_secret="rzp_test_secret",
        razorpay_webhook_secret="whsec_test",
    )


# ── Plans and amounts ──


def test_plans_catalog():
    assert [p.code for p in list_plans()] == ["pro_monthly", "pro_yearly"]
    assert get_plan("PRO_MONTHLY").price("inr") == Decimal("499.00")
    assert get_plan("pro_yearly").duration_days == 365


def test_unknown_plan():
    with pytest.raises(BadRequestException) as exc_info:
        get_plan("gold")

    assert exc_info.value.code == "UNKNOWN_PLAN"


def test_minor_units_round_half_up():
    assert to_minor_units("12.345") == 1235
    assert to_minor_units(499) == 49900
    assert to_minor_units(Decimal("9.99")) == 999
    assert from_minor_units(49900) == Decimal("499.00")
    assert from_minor_units(None) == Decimal("0.00")


# ── Gateway selection ──


def test_country_routing(config):
    assert gateway_name_for_country("in", config) == "razorpay"
    assert gateway_name_for_country("US", config) == "stripe"
    assert gateway_name_for_country("BR", config) == "paypal"
    assert currency_for_country("IN", config) == "INR"
    assert currency_for_country("GB", config) == "USD"
    assert isinstance(get_gateway_for_country("IN", config=config), RazorpayGateway)


def test_unsupported_region(config):
    with pytest.raises(UnsupportedRegionError) as exc_info:
        gateway_name_for_country("KP", config)

    assert exc_info.value.code == "UNSUPPORTED_REGION"
    with pytest.raises(UnsupportedRegionError):
        gateway_name_for_country("", config)


def test_currency_must_match_region(config):
    with pytest.raises(UnsupportedRegionError):
        get_gateway_for_country("IN", "USD", config)


def test_gateway_by_name(config):
    assert isinstance(get_gateway_by_name("Stripe", config), StripeGateway)
    with pytest.raises(BadRequestException):
        get_gateway_by_name("bitcoin", config)


def test_gateway_rejects_foreign_currency(config):
    with pytest.raises(UnsupportedRegionError):
        RazorpayGateway(config).check_currency("USD")


# ── Razorpay ──


async def test_razorpay_create_intent_sends_minor_units(config, monkeypatch):
    sent = {}

    async def fake_request(method, path, payload=None):
        sent.update(method=method, path=path, payload=payload)
        return {"id": "order_123", "amount": payload["amount"], "status": "created"}

    gateway = RazorpayGateway(config)
    monkeypatch.setattr(gateway, "_request", fake_request)

    intent = await gateway.create_payment_intent(
        Decimal("499.00"), "INR", {"user_id": "u-1", "plan": "pro_monthly", "email": None}
    )

    assert sent["path"] == "orders"
    assert sent["payload"]["amount"] == 49900
    assert sent["payload"]["notes"] == {"user_id": "u-1", "plan": "pro_monthly"}
    assert intent.order_id == "order_123"
    assert intent.amount == Decimal("499.00")
    assert intent.gateway == "razorpay"


async def test_razorpay_create_intent_requires_user_id(config):
    with pytest.raises(ValueError):
        await RazorpayGateway(config).create_payment_intent(100, "INR", {})


async def test_razorpay_verify_signature(config):
    gateway = RazorpayGateway(config)
    signature = hmac_sha256("rzp_test_secret", b"order_1|pay_1")

    assert await gateway.verify_payment("pay_1", signature, "order_1") is True
    assert await gateway.verify_payment("pay_1", "bad", "order_1") is False
    assert await gateway.verify_payment("pay_1", None, "order_1") is False


async def test_razorpay_non_ascii_signature_is_a_mismatch(config):
    assert await RazorpayGateway(config).verify_payment("pay_1", "\u00e9", "order_1") is False


async def test_razorpay_without_keys_is_unavailable():
    gateway = RazorpayGateway(Settings(razorpay_key_id=None, razorpay_key_secret=None))

    with pytest.raises(GatewayUnavailableError):
        await gateway.verify_payment("pay_1", "sig", "order_1")


def _razorpay_body(event):
    return json.dumps({
        "event": event,
        "payload": {
            "payment": {
                "entity": {
                    "id": "pay_9",
                    "order_id": "order_9",
                    "amount": 49900,
                    "currency": "INR",
                    "notes": {"user_id": "u-1"},
                }
            }
        },
    }).encode()


def test_razorpay_webhook_parses_captured_payment(config):
    body = _razorpay_body("payment.captured")
    event = RazorpayGateway(config).parse_webhook(body, hmac_sha256("whsec_test", body))

    assert event.outcome == "completed"
    assert event.event_id == "payment.captured:pay_9"
    assert event.order_id == "order_9"
    assert event.amount == Decimal("499.00")
    assert event.metadata == {"user_id": "u-1"}


def test_razorpay_webhook_failed_and_ignored(config):
    gateway = RazorpayGateway(config)
    failed = _razorpay_body("payment.failed")
    refunded = _razorpay_body("refund.created")

    assert gateway.parse_webhook(failed, hmac_sha256("whsec_test", failed)).outcome == "failed"
    assert gateway.parse_webhook(refunded, hmac_sha256("whsec_test", refunded)).outcome == "ignored"


def test_razorpay_webhook_bad_signature(config):
    body = _razorpay_body("payment.captured")

    with pytest.raises(WebhookSignatureError):
        RazorpayGateway(config).parse_webhook(body, "0" * 64)
    with pytest.raises(WebhookSignatureError):
        RazorpayGateway(config).parse_webhook(body, None)
    with pytest.raises(WebhookSignatureError):
        RazorpayGateway(config).parse_webhook(body, "\u00e9" * 64)


# ── Stripe / PayPal ──


def test_stripe_webhook_without_secret_is_unavailable(config):
    with pytest.raises(GatewayUnavailableError):
        StripeGateway(config).parse_webhook(b"{}", "t=1,v1=abc")


def test_stripe_webhook_bad_signature():
    gateway = StripeGateway(Settings(stripe_webhook_secret="whsec_stripe"))

    with pytest.raises(WebhookSignatureError):
        gateway.parse_webhook(b'{"id": "evt_1"}', "t=1,v1=deadbeef")


def test_paypal_has_no_webhooks(config):
    with pytest.raises(BadRequestException):
        PayPalGateway(config).parse_webhook(b"{}", None)
