"""Expiry Claim — tests for pure claim preconditions and outcome messages.

Tests cover:
    - strict expiry (now > ends_at), null ends_at never expires
    - precondition order: not expired → no ballots → latched
    - confirmation message names the winner and nothing else
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

from kontekst.core.domain_types import ClaimOutcomeKind
from kontekst.core.expiry_claim import (
    VoteSnapshot, check_preconditions, failed, generated, is_expired, skipped,
)

NOW = datetime(2026, 6, 1, 18, 0, tzinfo=timezone.utc)


def _snapshot(ends_in=timedelta(hours=-1), ballots=3):
    return VoteSnapshot(vote_id=uuid4(), ends_at=NOW + ends_in, total_ballots=ballots)


# ─── is_expired ──────────────────────────────────────────────────

def test_exact_end_instant_is_not_expired():
    assert is_expired(NOW, NOW) is False


def test_one_second_past_end_is_expired():
    assert is_expired(NOW - timedelta(seconds=1), NOW) is True


def test_null_ends_at_never_expires():
    assert is_expired(None, NOW + timedelta(days=3650)) is False


# ─── check_preconditions ─────────────────────────────────────────

def test_expired_with_ballots_proceeds():
    assert check_preconditions(_snapshot(), NOW, latched=False) is None


def test_open_vote_skipped():
    result = check_preconditions(_snapshot(ends_in=timedelta(hours=2)), NOW, latched=False)
    assert result == ClaimOutcomeKind.SKIPPED_NOT_EXPIRED


def test_zero_ballots_skipped():
    result = check_preconditions(_snapshot(ballots=0), NOW, latched=False)
    assert result == ClaimOutcomeKind.SKIPPED_NO_BALLOTS


def test_latched_vote_skipped():
    result = check_preconditions(_snapshot(), NOW, latched=True)
    assert result == ClaimOutcomeKind.SKIPPED_LATCHED


def test_no_ballots_reported_before_latch():
    result = check_preconditions(_snapshot(ballots=0), NOW, latched=True)
    assert result == ClaimOutcomeKind.SKIPPED_NO_BALLOTS


# ─── outcomes ────────────────────────────────────────────────────

def test_generated_message_names_winner():
    vote_id = uuid4()
    outcome = generated(vote_id, "Yes", "some-slug-abc12345")
    assert outcome.generated
    assert outcome.message == 'Voting finished. An article about "Yes" has been generated.'
    assert outcome.to_dict() == {
        "outcome": "generated",
        "vote_id": str(vote_id),
        "message": outcome.message,
        "winner_text": "Yes",
        "article_slug": "some-slug-abc12345",
    }


def test_skipped_outcome_carries_no_message():
    outcome = skipped(ClaimOutcomeKind.LOST_CLAIM, uuid4())
    assert not outcome.generated
    assert outcome.message is None


def test_failed_message_does_not_leak_internals():
    outcome = failed(uuid4())
    assert outcome.kind == ClaimOutcomeKind.FAILED
    assert "Traceback" not in outcome.message
    assert "vote stays open" in outcome.message
