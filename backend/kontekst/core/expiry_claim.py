"""Expiry Claim — pure decisions for the exactly-once article generation trigger.

Invariants:
    - check_preconditions() is PURE: (snapshot, now, latched) → skip kind or None
    - Order of checks is fixed: not expired → no ballots → latched
      (a vote that never qualified does not consume the session latch)
    - ends_at is None → never expires, never claimed
    - Expired means strictly now > ends_at
    - Outcome messages never carry internals; the winning option text is the only
      vote data a confirmation reveals

Design Decisions:
    - Claim itself lives in the store as a conditional update; core only decides
      whether a claim attempt is worth making and how to phrase the result
    - ClaimOutcome is a value, not an exception: the coordinator never raises into callers
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from kontekst.core.clock import ensure_utc
from kontekst.core.domain_types import ClaimOutcomeKind


@dataclass(frozen=True)
class VoteSnapshot:
    """What an observer currently believes about one vote (may be stale)."""
    vote_id: UUID
    ends_at: datetime | None
    total_ballots: int
    is_active: bool = True


@dataclass(frozen=True)
class ClaimOutcome:
    kind: ClaimOutcomeKind
    vote_id: UUID
    message: str | None = None
    winner_text: str | None = None
    article_slug: str | None = None

    @property
    def generated(self) -> bool:
        return self.kind == ClaimOutcomeKind.GENERATED

    def to_dict(self) -> dict:
        return {
            "outcome": self.kind.value,
            "vote_id": str(self.vote_id),
            "message": self.message,
            "winner_text": self.winner_text,
            "article_slug": self.article_slug,
        }


def is_expired(ends_at: datetime | None, now: datetime) -> bool:
    if ends_at is None:
        return False
    return ensure_utc(now) > ensure_utc(ends_at)


def check_preconditions(
    snapshot: VoteSnapshot, now: datetime, latched: bool,
) -> ClaimOutcomeKind | None:
    """Return the reason to skip, or None when a claim attempt should proceed."""
    if not is_expired(snapshot.ends_at, now):
        return ClaimOutcomeKind.SKIPPED_NOT_EXPIRED
    if snapshot.total_ballots <= 0:
        return ClaimOutcomeKind.SKIPPED_NO_BALLOTS
    if latched:
        return ClaimOutcomeKind.SKIPPED_LATCHED
    return None


def skipped(kind: ClaimOutcomeKind, vote_id: UUID) -> ClaimOutcome:
    return ClaimOutcome(kind=kind, vote_id=vote_id)


def generated(vote_id: UUID, winner_text: str, article_slug: str | None) -> ClaimOutcome:
    return ClaimOutcome(
        kind=ClaimOutcomeKind.GENERATED,
        vote_id=vote_id,
        message=f'Voting finished. An article about "{winner_text}" has been generated.',
        winner_text=winner_text,
        article_slug=article_slug,
    )


def failed(vote_id: UUID) -> ClaimOutcome:
    return ClaimOutcome(
        kind=ClaimOutcomeKind.FAILED,
        vote_id=vote_id,
        message="Article generation failed. The vote stays open for another attempt.",
    )
