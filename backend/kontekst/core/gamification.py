"""Gamification Ledger Reader — pure aggregation of a user's karma, badges and rankings.

Invariants:
    - top_posts == number of hall-of-fame entries for the user
    - top1_posts == number of those entries with rank == 1
    - Premium users always see the synthetic all-seeing badge, appended once,
      whether or not a badge row exists; it is never persisted
    - Badge order: stored order first, synthetic badge last

Design Decisions:
    - Display-time derivation keeps is_premium as the only source of truth for premium
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from kontekst.core.domain_types import ALL_SEEING_BADGE


class ProfileLike(Protocol):
    karma: int
    is_premium: bool
    banked_premium_months: int
    premium_expires_at: datetime | None
    selected_badge: str | None


class HallEntryLike(Protocol):
    rank: int


@dataclass(frozen=True)
class UserStats:
    karma: int
    badges: list[str]
    top_posts: int
    top1_posts: int
    banked_premium_months: int
    premium_expires_at: datetime | None
    selected_badge: str | None
    is_premium: bool


def with_synthetic_badges(badges: Iterable[str], is_premium: bool) -> list[str]:
    result: list[str] = []
    for tag in badges:
        if tag not in result:
            result.append(tag)
    if is_premium and ALL_SEEING_BADGE not in result:
        result.append(ALL_SEEING_BADGE)
    return result


def compute_user_stats(
    profile: ProfileLike,
    badges: Iterable[str],
    hall_entries: Sequence[HallEntryLike],
) -> UserStats:
    return UserStats(
        karma=profile.karma or 0,
        badges=with_synthetic_badges(badges, bool(profile.is_premium)),
        top_posts=len(hall_entries),
        top1_posts=sum(1 for e in hall_entries if e.rank == 1),
        banked_premium_months=profile.banked_premium_months or 0,
        premium_expires_at=profile.premium_expires_at,
        selected_badge=profile.selected_badge,
        is_premium=bool(profile.is_premium),
    )
