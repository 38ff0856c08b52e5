"""
Razorpay adapter (INR). Talks to the REST API with httpx and basic auth.
"""
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

import httpx

from app.core.exceptions import GatewayUnavailableError, PaymentDeclinedError, WebhookSignatureError
from app.core.logging import get_logger
from app.payments.base import PaymentGateway, PaymentIntent, WebhookEvent, from_minor_units, to_minor_units

logger = get_logger(__name__)

_COMPLETED_EVENTS = {"payment.captured", "payment.authorized", "order.paid"}
_FAILED_EVENTS = {"payment.failed"}


def hmac_sha256(secret: str, message: bytes) -> str:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def signature_matches(expected: str, signature: Optional[str]) -> bool:
    """Constant-time compare; client signatures may hold any characters."""
    if not signature:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8", "replace"))


class RazorpayGateway(PaymentGateway):
    name = "razorpay"
    currencies = ("INR",)

    def _auth(self):
        if not self.config.razorpay_key_id or not self.config.razorpay_key_secret:
            logger.error("razorpay_not_configured")
            raise GatewayUnavailableError(self.name)
        return (self.config.razorpay_key_id, self.config.razorpay_key_secret)

    async def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.config.razorpay_api_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            async with httpx.AsyncClient(timeout=self.config.payment_timeout_seconds) as client:
                response = await client.request(method, url, json=payload, auth=self._auth())
        except httpx.HTTPError as exc:
            logger.error("razorpay_transport_error", path=path, error=str(exc))
            raise GatewayUnavailableError(self.name) from exc

        if response.status_code >= 500:
            logger.error("razorpay_server_error", path=path, status=response.status_code)
            raise GatewayUnavailableError(self.name)
        if response.status_code >= 400:
            try:
                error = response.json().get("error", {})
            except ValueError:
                error = {}
            reason = error.get("description") or "Payment was declined"
            logger.warning("razorpay_rejected", path=path, status=response.status_code, reason=reason)
            raise PaymentDeclinedError(reason, gateway=self.name)
        return response.json()

    async def create_payment_intent(self, amount: Any, currency: str, metadata: Dict[str, Any]) -> PaymentIntent:
        """
        Create a Razorpay order. `metadata["user_id"]` is required and the
        whole metadata dict is forwarded as order notes.
        """
        code = self.check_currency(currency)
        if not metadata.get("user_id"):
            raise ValueError("user_id is required in metadata for Razorpay orders")

        notes = {k: str(v) for k, v in metadata.items() if v is not None}
        order = await self._request(
            "POST",
            "orders",
            {
                "amount": to_minor_units(amount),
                "currency": code,
                "receipt": f"receipt_{int(time.time() * 1000)}",
                "notes": notes,
            },
        )
        logger.info("razorpay_order_created", order_id=order.get("id"), amount=str(amount))
        return PaymentIntent(
            gateway=self.name,
            order_id=order["id"],
            amount=from_minor_units(order.get("amount", to_minor_units(amount))),
            currency=code,
            status=order.get("status", "created"),
            client_secret=order["id"],
            raw=order,
        )

    async def verify_payment(
        self,
        payment_id: str,
        signature: Optional[str] = None,
        order_id: Optional[str] = None,
    ) -> bool:
        """Checkout signature: HMAC-SHA256 of "order_id|payment_id" with the key secret."""
        if not signature or not order_id or not payment_id:
            logger.warning("razorpay_verify_missing_fields", payment_id=payment_id)
            return False
        _, secret = self._auth()
        expected = hmac_sha256(secret, f"{order_id}|{payment_id}".encode("utf-8"))
        valid = signature_matches(expected, signature)
        if not valid:
            logger.warning("razorpay_signature_mismatch", payment_id=payment_id, order_id=order_id)
        return valid

    def parse_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        expected = hmac_sha256(self.config.razorpay_webhook_secret, payload)
        if not signature_matches(expected, signature):
            logger.warning("razorpay_webhook_bad_signature")
            raise WebhookSignatureError(self.name)

        try:
            body = json.loads(payload)
        except ValueError as exc:
            raise WebhookSignatureError(self.name) from exc

        event_type = body.get("event", "")
        entity = (body.get("payload", {}).get("payment") or {}).get("entity") or {}
        order = (body.get("payload", {}).get("order") or {}).get("entity") or {}
        payment_id = entity.get("id")
        order_id = entity.get("order_id") or order.get("id")

        if event_type in _COMPLETED_EVENTS:
            outcome = "completed"
        elif event_type in _FAILED_EVENTS:
            outcome = "failed"
        else:
            outcome = "ignored"

        amount = entity.get("amount", order.get("amount"))
        return WebhookEvent(
            gateway=self.name,
            event_id=f"{event_type}:{payment_id or order_id or body.get('created_at', '')}",
            event_type=event_type,
            outcome=outcome,
            order_id=order_id,
            payment_id=payment_id,
            amount=from_minor_units(amount) if amount is not None else None,
            currency=entity.get("currency") or order.get("currency"),
            metadata=entity.get("notes") or order.get("notes") or {},
            payload=body,
        )
