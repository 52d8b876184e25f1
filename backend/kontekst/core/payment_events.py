"""Payment Events — pure mapping from a provider webhook event to a premium action.

Invariants:
    - payment.succeeded grants premium ONLY when the payment status is "succeeded"
    - Grant expiry = now + period days (yearly vs everything else)
    - refund.succeeded revokes premium and clears the expiry
    - payment.canceled and unknown events change nothing
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from kontekst.core.domain_types import PaymentEvent

YEARLY_PERIOD = "yearly"


class PremiumActionKind(str, Enum):
    GRANT = "grant"
    REVOKE = "revoke"
    NONE = "none"


@dataclass(frozen=True)
class Notice:
    title: str
    message: str
    type: str = "system"
    link: str = "/profile"


@dataclass(frozen=True)
class PremiumAction:
    kind: PremiumActionKind
    premium_expires_at: datetime | None = None
    notice: Notice | None = None


WELCOME_NOTICE = Notice(
    title="Welcome to premium!",
    message="You are now All-Seeing. Unlimited replies and exclusive discussions are yours!",
)
REVOKED_NOTICE = Notice(
    title="Subscription cancelled",
    message="Your premium subscription was cancelled because the payment was refunded.",
)

_NO_ACTION = PremiumAction(kind=PremiumActionKind.NONE)


def premium_expiry(
    now: datetime, period: str, monthly_days: int = 30, yearly_days: int = 365,
) -> datetime:
    days = yearly_days if period == YEARLY_PERIOD else monthly_days
    return now + timedelta(days=days)


def decide_action(
    event: str,
    status: str | None,
    period: str,
    now: datetime,
    *,
    monthly_days: int = 30,
    yearly_days: int = 365,
) -> PremiumAction:
    if event == PaymentEvent.PAYMENT_SUCCEEDED.value:
        if status != "succeeded":
            return _NO_ACTION
        return PremiumAction(
            kind=PremiumActionKind.GRANT,
            premium_expires_at=premium_expiry(now, period, monthly_days, yearly_days),
            notice=WELCOME_NOTICE,
        )
    if event == PaymentEvent.REFUND_SUCCEEDED.value:
        return PremiumAction(kind=PremiumActionKind.REVOKE, notice=REVOKED_NOTICE)
    return _NO_ACTION
