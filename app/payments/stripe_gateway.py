"""
Stripe adapter (USD). The stripe SDK is blocking, so calls run in the
threadpool.
"""
from typing import Any, Dict, Optional

import stripe
from starlette.concurrency import run_in_threadpool

from app.core.exceptions import GatewayUnavailableError, PaymentDeclinedError, WebhookSignatureError
from app.core.logging import get_logger
from app.payments.base import PaymentGateway, PaymentIntent, WebhookEvent, from_minor_units, to_minor_units

logger = get_logger(__name__)

_COMPLETED_EVENTS = {"payment_intent.succeeded"}
_FAILED_EVENTS = {"payment_intent.payment_failed", "payment_intent.canceled"}


class StripeGateway(PaymentGateway):
    name = "stripe"
    currencies = ("USD",)

    def _api_key(self) -> str:
        if not self.config.stripe_secret_key:
            logger.error("stripe_not_configured")
            raise GatewayUnavailableError(self.name)
        return self.config.stripe_secret_key

    async def _call(self, operation: str, fn, **kwargs):
        try:
            return await run_in_threadpool(fn, api_key=self._api_key(), **kwargs)
        except (stripe.CardError, stripe.InvalidRequestError) as exc:
            logger.warning("stripe_rejected", operation=operation, code=exc.code, error=str(exc))
            raise PaymentDeclinedError(exc.user_message or "Payment was declined", gateway=self.name) from exc
        except stripe.StripeError as exc:
            logger.error("stripe_unavailable", operation=operation, error=str(exc))
            raise GatewayUnavailableError(self.name) from exc

    async def create_payment_intent(self, amount: Any, currency: str, metadata: Dict[str, Any]) -> PaymentIntent:
        code = self.check_currency(currency)
        intent = await self._call(
            "create_payment_intent",
            stripe.PaymentIntent.create,
            amount=to_minor_units(amount),
            currency=code.lower(),
            metadata={k: str(v) for k, v in metadata.items() if v is not None},
            automatic_payment_methods={"enabled": True},
        )
        logger.info("stripe_intent_created", intent_id=intent["id"], amount=str(amount))
        return PaymentIntent(
            gateway=self.name,
            order_id=intent["id"],
            amount=from_minor_units(intent["amount"]),
            currency=code,
            status=intent["status"],
            client_secret=intent.get("client_secret"),
            raw={"id": intent["id"], "status": intent["status"]},
        )

    async def verify_payment(
        self,
        payment_id: str,
        signature: Optional[str] = None,
        order_id: Optional[str] = None,
    ) -> bool:
        """Retrieve the PaymentIntent and check it has succeeded."""
        intent = await self._call("verify_payment", stripe.PaymentIntent.retrieve, id=order_id or payment_id)
        return intent.get("status") == "succeeded"

    def parse_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        if not self.config.stripe_webhook_secret:
            logger.error("stripe_webhook_secret_missing")
            raise GatewayUnavailableError(self.name)
        try:
            event = stripe.Webhook.construct_event(
                payload=payload,
                sig_header=signature or "",
                secret=self.config.stripe_webhook_secret,
            )
        except (ValueError, stripe.SignatureVerificationError) as exc:
            logger.warning("stripe_webhook_bad_signature", error=str(exc))
            raise WebhookSignatureError(self.name) from exc

        event_type = event["type"]
        obj = event["data"]["object"]
        if event_type in _COMPLETED_EVENTS:
            outcome = "completed"
        elif event_type in _FAILED_EVENTS:
            outcome = "failed"
        else:
            outcome = "ignored"

        amount = obj.get("amount")
        currency = obj.get("currency")
        return WebhookEvent(
            gateway=self.name,
            event_id=event["id"],
            event_type=event_type,
            outcome=outcome,
            order_id=obj.get("id"),
            payment_id=obj.get("latest_charge") or obj.get("id"),
            amount=from_minor_units(amount) if amount is not None else None,
            currency=currency.upper() if currency else None,
            metadata=dict(obj.get("metadata") or {}),
            payload=event.to_dict() if hasattr(event, "to_dict") else dict(event),
        )
