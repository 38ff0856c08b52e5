"""
PaymentWebhookEvent model - raw webhook log, deduplicated per gateway.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import BaseModel


class PaymentWebhookEvent(BaseModel):
    __tablename__ = "payment_webhook_events"

    # Gateways retry deliveries; one row per event
    __table_args__ = (
        UniqueConstraint("gateway", "event_id", name="uq_webhook_gateway_event"),
    )

    gateway: Mapped[str] = mapped_column(String(20), nullable=False)
    event_id: Mapped[str] = mapped_column(String(200), nullable=False)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    payload: Mapped[dict] = mapped_column(JSONB, default=dict)

    processed: Mapped[bool] = mapped_column(Boolean, default=False)
    processed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<PaymentWebhookEvent {self.gateway}:{self.event_id}>"
