"""
Gateway adapter interface.

Every vendor adapter exposes the same three operations so the payment
service never branches on the vendor:

  create_payment_intent(amount, currency, metadata) -> PaymentIntent
  verify_payment(payment_id, signature=None, order_id=None) -> bool
  parse_webhook(payload, signature) -> WebhookEvent

Amounts are always given in major units (rupees, dollars); adapters
convert to the vendor's minor unit.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Optional, Tuple

from app.core.config import Settings, settings
from app.core.exceptions import BadRequestException, UnsupportedRegionError


@dataclass
class PaymentIntent:
    """Result of creating a payment on the vendor side."""

    gateway: str
    order_id: str
    amount: Decimal
    currency: str
    status: str
    client_secret: Optional[str] = None
    approval_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class WebhookEvent:
    """A verified webhook reduced to what the payment service acts on."""

    gateway: str
    event_id: str
    event_type: str
    outcome: str  # completed, failed, ignored
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    payload: Dict[str, Any] = field(default_factory=dict)


def to_minor_units(amount: Any) -> int:
    """12.345 -> 1235 (paise / cents, half-up)."""
    value = Decimal(str(amount)) * 100
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: Any) -> Decimal:
    return (Decimal(str(amount or 0)) / 100).quantize(Decimal("0.01"))


class PaymentGateway(ABC):
    """Base class for vendor adapters."""

    name: str = ""
    currencies: Tuple[str, ...] = ()

    def __init__(self, config: Settings = settings):
        self.config = config

    def check_currency(self, currency: str) -> str:
        code = (currency or "").upper()
        if code not in self.currencies:
            raise UnsupportedRegionError(
                f"{self.name.title()} does not accept {code or 'this currency'} payments"
            )
        return code

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: Any,
        currency: str,
        metadata: Dict[str, Any],
    ) -> PaymentIntent:
        pass

    @abstractmethod
    async def verify_payment(
        self,
        payment_id: str,
        signature: Optional[str] = None,
        order_id: Optional[str] = None,
    ) -> bool:
        pass

    def parse_webhook(self, payload: bytes, signature: Optional[str]) -> WebhookEvent:
        """Verify and decode a webhook body. Adapters without webhooks refuse."""
        raise BadRequestException(f"{self.name} webhooks are not accepted")
