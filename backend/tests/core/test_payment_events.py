"""Payment Events — tests for the event → premium action mapping.

Tests cover:
    - succeeded payment grants with period-specific expiry
    - non-succeeded status on payment.succeeded does nothing
    - refund revokes
    - canceled and unknown events do nothing
"""

from datetime import datetime, timedelta, timezone

from kontekst.core.payment_events import (
    REVOKED_NOTICE, WELCOME_NOTICE, PremiumActionKind, decide_action,
)

NOW = datetime(2026, 8, 1, tzinfo=timezone.utc)


def test_monthly_grant():
    action = decide_action("payment.succeeded", "succeeded", "monthly", NOW)
    assert action.kind == PremiumActionKind.GRANT
    assert action.premium_expires_at == NOW + timedelta(days=30)
    assert action.notice == WELCOME_NOTICE


def test_yearly_grant():
    action = decide_action("payment.succeeded", "succeeded", "yearly", NOW)
    assert action.premium_expires_at == NOW + timedelta(days=365)


def test_custom_period_lengths():
    action = decide_action(
        "payment.succeeded", "succeeded", "monthly", NOW, monthly_days=31, yearly_days=366,
    )
    assert action.premium_expires_at == NOW + timedelta(days=31)


def test_pending_status_does_not_grant():
    action = decide_action("payment.succeeded", "pending", "monthly", NOW)
    assert action.kind == PremiumActionKind.NONE


def test_refund_revokes():
    action = decide_action("refund.succeeded", "succeeded", "monthly", NOW)
    assert action.kind == PremiumActionKind.REVOKE
    assert action.premium_expires_at is None
    assert action.notice == REVOKED_NOTICE


def test_canceled_and_unknown_do_nothing():
    assert decide_action("payment.canceled", "canceled", "monthly", NOW).kind == PremiumActionKind.NONE
    assert decide_action("payment.waiting", None, "monthly", NOW).kind == PremiumActionKind.NONE
