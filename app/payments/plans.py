"""
Subscription plan catalogue, priced per gateway currency.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List

from app.core.exceptions import BadRequestException


@dataclass(frozen=True)
class Plan:
    code: str
    name: str
    duration_days: int
    prices: Dict[str, Decimal]

    def price(self, currency: str) -> Decimal:
        return self.prices[currency.upper()]


PLANS: Dict[str, Plan] = {
    "pro_monthly": Plan(
        code="pro_monthly",
        name="Pro Monthly",
        duration_days=30,
        prices={"INR": Decimal("499.00"), "USD": Decimal("9.99")},
    ),
    "pro_yearly": Plan(
        code="pro_yearly",
        name="Pro Yearly",
        duration_days=365,
        prices={"INR": Decimal("4999.00"), "USD": Decimal("99.00")},
    ),
}


def get_plan(code: str) -> Plan:
    plan = PLANS.get((code or "").strip().lower())
    if plan is None:
        raise BadRequestException(f"Unknown plan: {code}", code="UNKNOWN_PLAN")
    return plan


def list_plans() -> List[Plan]:
    return list(PLANS.values())
