"""Gamification Ledger Reader — tests for pure user stat aggregation.

Tests cover:
    - top_posts / top1_posts counted from hall-of-fame entries
    - synthetic all-seeing badge appended once for premium users only
    - stored badge order preserved, duplicates dropped
    - null counters default to 0
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from kontekst.core.domain_types import ALL_SEEING_BADGE
from kontekst.core.gamification import compute_user_stats, with_synthetic_badges


@dataclass
class _Profile:
    karma: int | None = 42
    is_premium: bool = False
    banked_premium_months: int | None = 0
    premium_expires_at: datetime | None = None
    selected_badge: str | None = None


@dataclass
class _Entry:
    rank: int


# ─── badges ──────────────────────────────────────────────────────

def test_premium_gets_all_seeing_badge():
    assert with_synthetic_badges(["premium"], True) == ["premium", ALL_SEEING_BADGE]


def test_all_seeing_badge_not_duplicated_when_stored():
    assert with_synthetic_badges([ALL_SEEING_BADGE, "first-post"], True) == [
        ALL_SEEING_BADGE, "first-post",
    ]


def test_non_premium_gets_no_synthetic_badge():
    assert with_synthetic_badges(["first-post"], False) == ["first-post"]


def test_duplicate_stored_badges_collapsed():
    assert with_synthetic_badges(["a", "b", "a"], False) == ["a", "b"]


# ─── compute_user_stats ──────────────────────────────────────────

def test_top_post_counts():
    stats = compute_user_stats(_Profile(), [], [_Entry(1), _Entry(3), _Entry(1)])
    assert stats.top_posts == 3
    assert stats.top1_posts == 2


def test_premium_profile_fields_carried():
    expires = datetime(2026, 12, 1, tzinfo=timezone.utc)
    stats = compute_user_stats(
        _Profile(is_premium=True, premium_expires_at=expires, selected_badge="premium"),
        ["premium"],
        [],
    )
    assert stats.is_premium is True
    assert stats.premium_expires_at == expires
    assert stats.selected_badge == "premium"
    assert stats.badges[-1] == ALL_SEEING_BADGE


def test_null_counters_default_to_zero():
    stats = compute_user_stats(_Profile(karma=None, banked_premium_months=None), [], [])
    assert stats.karma == 0
    assert stats.banked_premium_months == 0
    assert stats.top_posts == 0
