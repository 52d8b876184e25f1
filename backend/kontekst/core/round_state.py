"""Round State Resolver — classifies a discussion round and its progress at an instant.

Invariants:
    - resolve() is PURE: same (ends_at, now) always yields the same RoundState
    - ends_at is None → permanently archived: EXPIRED, progress 100, remaining 0
    - ends_at <= now → EXPIRED, progress 100, remaining 0
    - Otherwise ACTIVE with progress = (ROUND_DURATION - remaining) / ROUND_DURATION,
      clamped to [0, 100]
    - PENDING only when the caller passes starts_at and now < starts_at
    - Rounds never move backwards: once EXPIRED for some now, EXPIRED for every later now

Design Decisions:
    - Status derived from time on every call, never persisted (no mutation on expiry)
    - Scheduling is the caller's job: UI timers and API requests re-invoke resolve()
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from kontekst.core.clock import (
    ensure_utc, format_round_countdown, remaining as time_remaining, split_days_hours,
)
from kontekst.core.domain_types import RoundStatus

ROUND_DURATION: timedelta = timedelta(hours=72)
ARCHIVED_LABEL = "archived"


@dataclass(frozen=True)
class RoundState:
    """Presentation state of one round at one instant."""
    status: RoundStatus
    remaining: timedelta
    progress_pct: float
    days_left: int
    hours_left: int

    @property
    def is_active(self) -> bool:
        return self.status == RoundStatus.ACTIVE

    @property
    def countdown(self) -> str:
        """'2d 5h' / '5h' while the round runs; 'archived' afterwards."""
        if self.status == RoundStatus.EXPIRED:
            return ARCHIVED_LABEL
        return format_round_countdown(self.remaining)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "remaining_seconds": int(self.remaining.total_seconds()),
            "progress_pct": round(self.progress_pct, 2),
            "days_left": self.days_left,
            "hours_left": self.hours_left,
            "countdown": self.countdown,
        }


_EXPIRED = RoundState(
    status=RoundStatus.EXPIRED,
    remaining=timedelta(0),
    progress_pct=100.0,
    days_left=0,
    hours_left=0,
)


def resolve(
    ends_at: datetime | None,
    now: datetime,
    *,
    starts_at: datetime | None = None,
    duration: timedelta = ROUND_DURATION,
) -> RoundState:
    """Classify a round as pending/active/expired and compute its progress."""
    if ends_at is None:
        return _EXPIRED

    now = ensure_utc(now)
    ends_at = ensure_utc(ends_at)
    if ends_at <= now:
        return _EXPIRED

    left = time_remaining(ends_at, now)
    days, hours = split_days_hours(left)

    if starts_at is not None and now < ensure_utc(starts_at):
        return RoundState(
            status=RoundStatus.PENDING,
            remaining=left,
            progress_pct=0.0,
            days_left=days,
            hours_left=hours,
        )

    total = duration.total_seconds()
    progress = (total - left.total_seconds()) / total * 100 if total > 0 else 100.0
    return RoundState(
        status=RoundStatus.ACTIVE,
        remaining=left,
        progress_pct=max(0.0, min(100.0, progress)),
        days_left=days,
        hours_left=hours,
    )
