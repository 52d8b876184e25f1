"""Payment Webhook — tests for idempotent premium grants and refunds.

Tests cover:
    - succeeded payment: premium on, expiry set, badge + notification written
    - redelivery acknowledged as duplicate with no second side effect
    - refund: premium off, badge removed
    - missing / malformed user_id → 400
    - non-succeeded status recorded without granting
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from sqlalchemy import func, select

from kontekst.core.clock import ensure_utc
from kontekst.core.domain_types import PREMIUM_BADGE
from kontekst.models.notification import Notification
from kontekst.models.processed_payment_event import ProcessedPaymentEvent
from kontekst.models.profile import Profile
from kontekst.models.user_badge import UserBadge

URL = "/api/v1/payments/webhook"


def _body(user_id, event="payment.succeeded", status="succeeded", payment_id="pay_1", period="monthly"):
    return {
        "event": event,
        "type": "notification",
        "object": {
            "id": payment_id,
            "status": status,
            "amount": {"value": "299.00", "currency": "RUB"},
            "metadata": {"user_id": str(user_id), "plan": "premium", "period": period},
        },
    }


async def _count(db, model, user_id):
    return (await db.execute(
        select(func.count()).select_from(model).where(model.user_id == user_id),
    )).scalar()


async def _profile(db, user_id):
    return (await db.execute(
        select(Profile).where(Profile.user_id == user_id).execution_options(populate_existing=True),
    )).scalar_one_or_none()


# ─── Grant ───────────────────────────────────────────────────────

async def test_succeeded_payment_grants_premium(client, test_db, seed_profile):
    profile = await seed_profile(is_premium=False, subscription_cancelled=True)
    before = datetime.now(timezone.utc)

    response = await client.post(URL, json=_body(profile.user_id))
    assert response.status_code == 200
    assert response.json() == {"success": True, "duplicate": False}

    refreshed = await _profile(test_db, profile.user_id)
    assert refreshed.is_premium is True
    assert refreshed.subscription_cancelled is False
    assert ensure_utc(refreshed.premium_expires_at) >= before + timedelta(days=30)
    assert await _count(test_db, UserBadge, profile.user_id) == 1
    assert await _count(test_db, Notification, profile.user_id) == 1


async def test_yearly_period_extends_a_year(client, test_db, seed_profile):
    profile = await seed_profile(is_premium=False)
    await client.post(URL, json=_body(profile.user_id, period="yearly"))
    refreshed = await _profile(test_db, profile.user_id)
    assert ensure_utc(refreshed.premium_expires_at) > datetime.now(timezone.utc) + timedelta(days=364)


async def test_grant_creates_missing_profile(client, test_db):
    user_id = uuid4()
    await client.post(URL, json=_body(user_id))
    assert (await _profile(test_db, user_id)).is_premium is True


async def test_redelivery_is_duplicate(client, test_db, seed_profile):
    profile = await seed_profile(is_premium=False)
    await client.post(URL, json=_body(profile.user_id))
    response = await client.post(URL, json=_body(profile.user_id))

    assert response.json() == {"success": True, "duplicate": True}
    assert await _count(test_db, Notification, profile.user_id) == 1
    assert await _count(test_db, ProcessedPaymentEvent, profile.user_id) == 1


async def test_pending_status_does_not_grant(client, test_db, seed_profile):
    profile = await seed_profile(is_premium=False)
    response = await client.post(URL, json=_body(profile.user_id, status="pending"))
    assert response.status_code == 200
    assert (await _profile(test_db, profile.user_id)).is_premium is False
    assert await _count(test_db, UserBadge, profile.user_id) == 0


# ─── Revoke ──────────────────────────────────────────────────────

async def test_refund_revokes_premium(client, test_db, seed_profile):
    profile = await seed_profile(is_premium=False)
    await client.post(URL, json=_body(profile.user_id))
    response = await client.post(
        URL, json=_body(profile.user_id, event="refund.succeeded", payment_id="ref_1"),
    )
    assert response.status_code == 200

    refreshed = await _profile(test_db, profile.user_id)
    assert refreshed.is_premium is False
    assert refreshed.premium_expires_at is None
    badges = (await test_db.execute(
        select(UserBadge.badge_type).where(UserBadge.user_id == profile.user_id),
    )).scalars().all()
    assert PREMIUM_BADGE not in badges
    assert await _count(test_db, Notification, profile.user_id) == 2


# ─── Rejections ──────────────────────────────────────────────────

async def test_missing_user_id_rejected(client):
    body = _body(uuid4())
    del body["object"]["metadata"]["user_id"]
    response = await client.post(URL, json=body)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_malformed_user_id_rejected(client):
    response = await client.post(URL, json=_body("not-a-uuid"))
    assert response.status_code == 400
