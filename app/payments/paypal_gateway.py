"""
PayPal adapter (USD) over the Orders v2 REST API.

Flow: create_payment_intent creates an order and returns its approval
link; after the buyer approves, verify_payment captures the order.
"""
from decimal import Decimal
from typing import Any, Dict, Optional

import httpx

from app.core.exceptions import GatewayUnavailableError, PaymentDeclinedError
from app.core.logging import get_logger
from app.payments.base import PaymentGateway, PaymentIntent

logger = get_logger(__name__)


class PayPalGateway(PaymentGateway):
    name = "paypal"
    currencies = ("USD",)

    def _credentials(self):
        if not self.config.paypal_client_id or not self.config.paypal_client_secret:
            logger.error("paypal_not_configured")
            raise GatewayUnavailableError(self.name)
        return (self.config.paypal_client_id, self.config.paypal_client_secret)

    def _check(self, response: httpx.Response, operation: str) -> Dict[str, Any]:
        if response.status_code >= 500:
            logger.error("paypal_server_error", operation=operation, status=response.status_code)
            raise GatewayUnavailableError(self.name)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = {}
            reason = body.get("message") or body.get("error_description") or "Payment was declined"
            logger.warning("paypal_rejected", operation=operation, status=response.status_code, reason=reason)
            raise PaymentDeclinedError(reason, gateway=self.name)
        return response.json()

    async def _send(self, method: str, path: str, operation: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        base = self.config.paypal_api_url
        try:
            async with httpx.AsyncClient(timeout=self.config.payment_timeout_seconds) as client:
                token_response = await client.post(
                    f"{base}/v1/oauth2/token",
                    data={"grant_type": "client_credentials"},
                    auth=self._credentials(),
                )
                token = self._check(token_response, "oauth_token")["access_token"]
                response = await client.request(
                    method,
                    f"{base}{path}",
                    json=payload,
                    headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as exc:
            logger.error("paypal_transport_error", operation=operation, error=str(exc))
            raise GatewayUnavailableError(self.name) from exc
        return self._check(response, operation)

    async def create_payment_intent(self, amount: Any, currency: str, metadata: Dict[str, Any]) -> PaymentIntent:
        code = self.check_currency(currency)
        value = Decimal(str(amount)).quantize(Decimal("0.01"))
        order = await self._send(
            "POST",
            "/v2/checkout/orders",
            "create_order",
            {
                "intent": "CAPTURE",
                "purchase_units": [{
                    "amount": {"currency_code": code, "value": str(value)},
                    "custom_id": str(metadata.get("user_id", "")),
                    "description": str(metadata.get("plan", "Subscription"))[:127],
                }],
            },
        )
        approval_url = next(
            (link["href"] for link in order.get("links", []) if link.get("rel") in ("approve", "payer-action")),
            None,
        )
        logger.info("paypal_order_created", order_id=order.get("id"), amount=str(value))
        return PaymentIntent(
            gateway=self.name,
            order_id=order["id"],
            amount=value,
            currency=code,
            status=order.get("status", "CREATED"),
            approval_url=approval_url,
            raw={"id": order["id"], "status": order.get("status")},
        )

    async def verify_payment(
        self,
        payment_id: str,
        signature: Optional[str] = None,
        order_id: Optional[str] = None,
    ) -> bool:
        """Capture the approved order; True once PayPal reports COMPLETED."""
        target = order_id or payment_id
        result = await self._send("POST", f"/v2/checkout/orders/{target}/capture", "capture_order", {})
        return result.get("status") == "COMPLETED"
