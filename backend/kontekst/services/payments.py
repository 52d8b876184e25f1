"""Payments — idempotent handling of payment provider webhook deliveries.

Invariants:
    - Each (payment_id, event) is processed at most once; redeliveries are
      acknowledged as duplicates without side effects
    - The idempotency row and the premium side effects commit in ONE transaction,
      so a failed attempt leaves nothing behind and the provider's retry reprocesses it
    - Grant: premium on, new expiry, cancellation flag cleared, premium badge upserted,
      welcome notification inserted
    - Revoke: premium off, expiry cleared, premium badge removed, notification inserted

Design Decisions:
    - Missing profile on grant creates one: the payment proves the account exists
      upstream even if the profile row was never written
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.config import Settings
from kontekst.core.domain_types import PREMIUM_BADGE, PaymentEvent
from kontekst.core.errors import InputValidationError
from kontekst.core.payment_events import Notice, PremiumActionKind, decide_action
from kontekst.models.notification import Notification
from kontekst.models.processed_payment_event import ProcessedPaymentEvent
from kontekst.models.profile import Profile
from kontekst.models.user_badge import UserBadge
from kontekst.schemas.payment import PaymentWebhook

logger = logging.getLogger(__name__)


def _parse_user_id(body: PaymentWebhook) -> UUID:
    raw = body.object.metadata.user_id
    if not raw:
        raise InputValidationError("Missing user_id in metadata", "object.metadata.user_id")
    try:
        return UUID(raw)
    except ValueError as e:
        raise InputValidationError(
            "user_id in metadata is not a valid UUID", "object.metadata.user_id",
        ) from e


async def _already_processed(db: AsyncSession, payment_id: str, event: str) -> bool:
    result = await db.execute(
        select(ProcessedPaymentEvent.id).where(
            ProcessedPaymentEvent.payment_id == payment_id,
            ProcessedPaymentEvent.event == event,
        ),
    )
    return result.first() is not None


def _notify(db: AsyncSession, user_id: UUID, notice: Notice) -> None:
    db.add(Notification(
        user_id=user_id, type=notice.type, title=notice.title,
        message=notice.message, link=notice.link,
    ))


async def _grant(
    db: AsyncSession, user_id: UUID, expires_at: datetime, notice: Notice,
) -> None:
    profile = await db.get(Profile, user_id)
    if profile is None:
        profile = Profile(user_id=user_id)
        db.add(profile)
    profile.is_premium = True
    profile.premium_expires_at = expires_at
    profile.subscription_cancelled = False

    badge = await db.execute(
        select(UserBadge).where(
            UserBadge.user_id == user_id, UserBadge.badge_type == PREMIUM_BADGE,
        ),
    )
    if badge.scalar_one_or_none() is None:
        db.add(UserBadge(user_id=user_id, badge_type=PREMIUM_BADGE))
    _notify(db, user_id, notice)


async def _revoke(db: AsyncSession, user_id: UUID, notice: Notice) -> None:
    profile = await db.get(Profile, user_id)
    if profile is not None:
        profile.is_premium = False
        profile.premium_expires_at = None
    await db.execute(
        delete(UserBadge).where(
            UserBadge.user_id == user_id, UserBadge.badge_type == PREMIUM_BADGE,
        ),
    )
    _notify(db, user_id, notice)


async def handle_webhook(
    db: AsyncSession, body: PaymentWebhook, settings: Settings, now: datetime,
) -> dict:
    user_id = _parse_user_id(body)
    payment = body.object
    log_extra = {"payment_id": payment.id, "event": body.event, "user_id": user_id}
    logger.info("Payment webhook received", extra=log_extra)

    if await _already_processed(db, payment.id, body.event):
        logger.info("Duplicate payment webhook ignored", extra=log_extra)
        return {"success": True, "duplicate": True}

    action = decide_action(
        body.event, payment.status, payment.metadata.period, now,
        monthly_days=settings.premium_period_days,
        yearly_days=settings.premium_yearly_days,
    )
    if action.kind == PremiumActionKind.GRANT:
        await _grant(db, user_id, action.premium_expires_at, action.notice)
        logger.info("Premium activated", extra=log_extra)
    elif action.kind == PremiumActionKind.REVOKE:
        await _revoke(db, user_id, action.notice)
        logger.info("Premium revoked after refund", extra=log_extra)
    elif body.event == PaymentEvent.PAYMENT_CANCELED.value:
        logger.warning("Payment canceled", extra=log_extra)

    db.add(ProcessedPaymentEvent(payment_id=payment.id, event=body.event, user_id=user_id))
    await db.commit()
    return {"success": True, "duplicate": False}
