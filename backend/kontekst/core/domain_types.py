"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - VoteId, DiscussionId, UserId wrap UUIDs — never use bare UUID in domain logic
    - OptionIndex is a zero-based position in a ContentVote's ordered options
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

VoteId = NewType("VoteId", UUID)
DiscussionId = NewType("DiscussionId", UUID)
UserId = NewType("UserId", UUID)
ArticleId = NewType("ArticleId", UUID)
SessionKey = NewType("SessionKey", str)


# ─── Value Types ─────────────────────────────────────────────────

OptionIndex = NewType("OptionIndex", int)


# ─── Constants ───────────────────────────────────────────────────

PREMIUM_BADGE = "premium"
ALL_SEEING_BADGE = "all-seeing"
ONLINE_CHANNEL = "online-users"


# ─── Enums ───────────────────────────────────────────────────────

class RoundStatus(str, Enum):
    """Discussion round lifecycle — derived from time, never stored."""
    PENDING = "pending"
    ACTIVE = "active"
    EXPIRED = "expired"


class ClaimOutcomeKind(str, Enum):
    """Result of one expiry-coordinator check for one vote."""
    SKIPPED_NOT_EXPIRED = "skipped_not_expired"
    SKIPPED_NO_BALLOTS = "skipped_no_ballots"
    SKIPPED_LATCHED = "skipped_latched"
    SKIPPED_ALREADY_HANDLED = "skipped_already_handled"
    LOST_CLAIM = "lost_claim"
    GENERATED = "generated"
    FAILED = "failed"


class ArticleCategory(str, Enum):
    """Article sections — maps to URL path segment and display name."""
    NEWS = "news"
    ANALYTICS = "analytics"
    OPINIONS = "opinions"


class PaymentEvent(str, Enum):
    """Payment provider webhook events the handler reacts to."""
    PAYMENT_SUCCEEDED = "payment.succeeded"
    PAYMENT_CANCELED = "payment.canceled"
    REFUND_SUCCEEDED = "refund.succeeded"


class PresenceStatus(str, Enum):
    """Channel subscription status reported by the transport."""
    SUBSCRIBED = "SUBSCRIBED"
    CLOSED = "CLOSED"
    CHANNEL_ERROR = "CHANNEL_ERROR"


class SitemapKind(str, Enum):
    STANDARD = "sitemap"
    NEWS = "news"
