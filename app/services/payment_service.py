"""
Payment service - checkout, verification and subscription lifecycle.

Flow:
  1. Client asks for an intent → PENDING PaymentTransaction + vendor order
  2. Client completes checkout with the vendor
  3. Client calls verify (or the vendor sends a webhook)
     → transaction COMPLETED, subscription ACTIVE, notification

The vendor is picked from the billing country (see app.payments.selector);
this module never branches on which vendor it is talking to.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import NotFoundException, UnsupportedRegionError
from app.core.logging import get_logger
from app.models.notification import NotificationPriority, NotificationType
from app.models.payment_transaction import PaymentTransaction, TransactionStatus
from app.models.subscription import Subscription, SubscriptionStatus
from app.models.user import User
from app.payments import gateway_name_for_country, get_gateway_by_name, get_gateway_for_country
from app.payments.plans import get_plan, list_plans
from app.payments.selector import REGION_CURRENCY
from app.repositories.billing_repository import BillingRepository
from app.repositories.payment_repository import PaymentTransactionRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.schemas.base import PaginatedResponse
from app.schemas.payment import (
    GatewayResponse,
    PaymentIntentResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
    PlanResponse,
    SubscriptionResponse,
    TransactionResponse,
)
from app.services.notification_service import NotificationService

logger = get_logger(__name__)


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class PaymentService:
    """Handles payments and subscriptions."""

    def __init__(self):
        self.billing_repo = BillingRepository()
        self.transaction_repo = PaymentTransactionRepository()
        self.subscription_repo = SubscriptionRepository()
        self.notifications = NotificationService()

    # ── Checkout ────────────────────────────────────────────────────────────

    async def get_gateway(self, db: AsyncSession, user: User) -> GatewayResponse:
        """
        Raises:
            UnsupportedRegionError: No billing details, or the country has
                no gateway
        """
        country = await self._billing_country(db, user)
        name = gateway_name_for_country(country)
        public_keys = {
            "stripe": settings.stripe_publishable_key,
            "razorpay": settings.razorpay_key_id,
            "paypal": settings.paypal_client_id,
        }
        return GatewayResponse(
            gateway=name,
            currency=REGION_CURRENCY[name],
            country=country,
            publishable_key=public_keys[name],
        )

    def get_plans(self) -> List[PlanResponse]:
        return [
            PlanResponse(code=p.code, name=p.name, duration_days=p.duration_days, prices=p.prices)
            for p in list_plans()
        ]

    async def create_intent(
        self,
        db: AsyncSession,
        user: User,
        *,
        plan_code: str,
    ) -> PaymentIntentResponse:
        plan = get_plan(plan_code)
        country = await self._billing_country(db, user)
        gateway = get_gateway_for_country(country)
        currency = REGION_CURRENCY[gateway.name]
        amount = plan.price(currency)

        intent = await gateway.create_payment_intent(
            amount,
            currency,
            {"user_id": str(user.id), "plan": plan.code, "email": user.email},
        )
        transaction = await self.transaction_repo.create(
            db,
            user_id=user.id,
            amount=amount,
            currency=currency,
            gateway=gateway.name,
            gateway_order_id=intent.order_id,
            status=TransactionStatus.PENDING.value,
            meta={"plan": plan.code, "country": country},
        )
        await db.commit()

        logger.info(
            "payment_intent_created",
            user_id=str(user.id),
            gateway=gateway.name,
            amount=str(amount),
            currency=currency,
            order_id=intent.order_id,
        )
        return PaymentIntentResponse(
            transaction_id=transaction.id,
            gateway=gateway.name,
            order_id=intent.order_id,
            amount=amount,
            currency=currency,
            client_secret=intent.client_secret,
            approval_url=intent.approval_url,
        )

    async def verify(
        self,
        db: AsyncSession,
        user: User,
        data: PaymentVerifyRequest,
    ) -> PaymentVerifyResponse:
        """
        Confirm a checkout with the vendor.

        Idempotent: a transaction already COMPLETED (e.g. by a webhook that
        arrived first) is reported as verified without calling the vendor.
        """
        items, _ = await self.transaction_repo.find_for_user(
            db,
            user.id,
            filters=[PaymentTransaction.gateway_order_id == data.order_id],
            limit=1,
        )
        if not items:
            raise NotFoundException("Transaction not found", code="TRANSACTION_NOT_FOUND")
        transaction = items[0]

        if transaction.status != TransactionStatus.PENDING.value:
            return PaymentVerifyResponse(
                verified=transaction.status == TransactionStatus.COMPLETED.value,
                status=transaction.status,
                subscription_id=transaction.subscription_id,
            )

        gateway = get_gateway_by_name(transaction.gateway)
        payment_id = data.payment_id or data.order_id
        verified = await gateway.verify_payment(
            payment_id,
            signature=data.signature,
            order_id=data.order_id,
        )

        if verified:
            await self.complete_transaction(db, transaction, payment_id=payment_id)
        elif data.signature:
            # A signature that does not match is never going to succeed
            await self.fail_transaction(db, transaction, reason="signature_mismatch")
        await db.commit()

        logger.info(
            "payment_verified" if verified else "payment_not_verified",
            transaction_id=str(transaction.id),
            gateway=transaction.gateway,
        )
        return PaymentVerifyResponse(
            verified=verified,
            status=transaction.status,
            subscription_id=transaction.subscription_id,
        )

    # ── Transaction outcomes (shared with webhooks) ─────────────────────────

    async def complete_transaction(
        self,
        db: AsyncSession,
        transaction: PaymentTransaction,
        *,
        payment_id: Optional[str] = None,
    ) -> Subscription:
        """Mark paid and activate or extend the plan. Caller commits."""
        plan = get_plan((transaction.meta or {}).get("plan", ""))
        now = datetime.now(timezone.utc)
        current = await self.subscription_repo.get_current(db, transaction.user_id)

        if current and current.plan == plan.code:
            start = max(now, _aware(current.end_date))
            subscription = await self.subscription_repo.update(
                db,
                current,
                status=SubscriptionStatus.ACTIVE.value,
                end_date=start + timedelta(days=plan.duration_days),
                gateway=transaction.gateway,
            )
        else:
            if current:
                await self.subscription_repo.update(
                    db, current, status=SubscriptionStatus.CANCELLED.value, auto_renew=False
                )
            subscription = await self.subscription_repo.create(
                db,
                user_id=transaction.user_id,
                plan=plan.code,
                status=SubscriptionStatus.ACTIVE.value,
                gateway=transaction.gateway,
                start_date=now,
                end_date=now + timedelta(days=plan.duration_days),
                auto_renew=True,
            )

        await self.transaction_repo.update(
            db,
            transaction,
            status=TransactionStatus.COMPLETED.value,
            gateway_payment_id=payment_id or transaction.gateway_payment_id,
            subscription_id=subscription.id,
        )
        await self.notifications.notify(
            db,
            transaction.user_id,
            NotificationType.PAYMENT_RECEIVED,
            "Payment received",
            f"We received {transaction.amount} {transaction.currency} for {plan.name}.",
            data={"transaction_id": str(transaction.id)},
            action_url="/billing",
        )
        await self.notifications.notify(
            db,
            transaction.user_id,
            NotificationType.SUBSCRIPTION_CREATED,
            f"{plan.name} active",
            f"Your subscription runs until {subscription.end_date:%B %d, %Y}.",
            data={"subscription_id": str(subscription.id)},
            action_url="/billing",
        )
        logger.info(
            "transaction_completed",
            transaction_id=str(transaction.id),
            subscription_id=str(subscription.id),
        )
        return subscription

    async def fail_transaction(
        self,
        db: AsyncSession,
        transaction: PaymentTransaction,
        *,
        reason: str,
        notify: bool = True,
    ) -> None:
        """Mark a transaction FAILED. Caller commits."""
        await self.transaction_repo.update(
            db,
            transaction,
            status=TransactionStatus.FAILED.value,
            meta={**(transaction.meta or {}), "failure_reason": reason},
        )
        if notify:
            await self.notifications.notify(
                db,
                transaction.user_id,
                NotificationType.PAYMENT_FAILED,
                "Payment failed",
                "Your payment could not be completed. No charge was made.",
                priority=NotificationPriority.HIGH,
                data={"transaction_id": str(transaction.id), "reason": reason},
                action_url="/billing",
            )
        logger.warning("transaction_failed", transaction_id=str(transaction.id), reason=reason)

    # ── Subscription ────────────────────────────────────────────────────────

    async def get_subscription(self, db: AsyncSession, user: User) -> Optional[SubscriptionResponse]:
        subscription = await self.subscription_repo.get_current(db, user.id)
        return SubscriptionResponse.model_validate(subscription) if subscription else None

    async def cancel_subscription(self, db: AsyncSession, user: User) -> SubscriptionResponse:
        subscription = await self.subscription_repo.get_current(db, user.id)
        if not subscription:
            raise NotFoundException("No active subscription", code="SUBSCRIPTION_NOT_FOUND")

        subscription = await self.subscription_repo.update(
            db,
            subscription,
            status=SubscriptionStatus.CANCELLED.value,
            auto_renew=False,
        )
        await self.notifications.notify(
            db,
            user.id,
            NotificationType.SUBSCRIPTION_CANCELLED,
            "Subscription cancelled",
            "Your subscription has been cancelled and will not renew.",
            data={"subscription_id": str(subscription.id)},
        )
        await db.commit()
        logger.info("subscription_cancelled", user_id=str(user.id), subscription_id=str(subscription.id))
        return SubscriptionResponse.model_validate(subscription)

    async def list_transactions(
        self,
        db: AsyncSession,
        user: User,
        *,
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[TransactionResponse]:
        items, total = await self.transaction_repo.find_for_user(
            db,
            user.id,
            page=page,
            limit=limit,
            order_by=PaymentTransaction.created_at.desc(),
        )
        return PaginatedResponse(
            items=[TransactionResponse.model_validate(t) for t in items],
            total=total,
            page=page,
            limit=limit,
            pages=(total + limit - 1) // limit if total > 0 else 0,
        )

    # ── Cron jobs ───────────────────────────────────────────────────────────

    async def validate_pending_transactions(self, db: AsyncSession) -> Dict[str, Any]:
        """Fail PENDING transactions older than the timeout."""
        cutoff = datetime.now(timezone.utc) - timedelta(hours=settings.pending_transaction_timeout_hours)
        stale = await self.transaction_repo.find_stale_pending(db, cutoff)
        for transaction in stale:
            await self.fail_transaction(db, transaction, reason="timeout", notify=False)
        await db.commit()

        logger.info("pending_transactions_validated", failed=len(stale))
        return {"failed": len(stale)}

    async def expire_subscriptions(self, db: AsyncSession) -> Dict[str, Any]:
        """
        ACTIVE past end date → GRACE_PERIOD.
        GRACE_PERIOD past the grace window → EXPIRED.
        """
        now = datetime.now(timezone.utc)

        ended = await self.subscription_repo.find_ended(
            db, status=SubscriptionStatus.ACTIVE.value, ended_before=now
        )
        for subscription in ended:
            await self.subscription_repo.update(db, subscription, status=SubscriptionStatus.GRACE_PERIOD.value)
            await self.notifications.notify(
                db,
                subscription.user_id,
                NotificationType.SUBSCRIPTION_EXPIRING,
                "Subscription ended",
                f"Renew within {settings.subscription_grace_days} days to keep your plan.",
                priority=NotificationPriority.HIGH,
                data={"subscription_id": str(subscription.id)},
                action_url="/billing",
            )

        lapsed = await self.subscription_repo.find_ended(
            db,
            status=SubscriptionStatus.GRACE_PERIOD.value,
            ended_before=now - timedelta(days=settings.subscription_grace_days),
        )
        for subscription in lapsed:
            await self.subscription_repo.update(db, subscription, status=SubscriptionStatus.EXPIRED.value)
            await self.notifications.notify(
                db,
                subscription.user_id,
                NotificationType.SUBSCRIPTION_EXPIRING,
                "Subscription expired",
                "Your grace period is over. Subscribe again to restore your plan.",
                data={"subscription_id": str(subscription.id)},
                action_url="/billing",
            )
        await db.commit()

        logger.info("subscriptions_expired", grace_period=len(ended), expired=len(lapsed))
        return {"grace_period": len(ended), "expired": len(lapsed)}

    async def _billing_country(self, db: AsyncSession, user: User) -> str:
        billing = await self.billing_repo.get_by_user(db, user.id)
        if billing is None:
            raise UnsupportedRegionError("Add billing details before making a payment")
        return billing.country
