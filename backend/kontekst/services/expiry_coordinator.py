"""Expiry Coordinator — runs article generation exactly once per expired content vote.

Invariants:
    - check() NEVER raises: every path ends in a ClaimOutcome
    - Generation is invoked only after store.claim() reported exactly one row changed
    - The latch is set before the claim attempt, so once a check reaches the claim the
      same instance skips that vote while it stays latched, whatever the outcome
    - Checks overlapping in the settle delay both reach the claim; store.claim() lets
      only one of them through
    - A failed generation releases the claim (is_active back to true) so another
      coordinator (another client, or the next watcher pass) may retry

Design Decisions:
    - Fresh is_active read kept ahead of the claim: cheap early exit for the common
      "already handled" case without issuing a write
    - Settle delay before the fresh read lets ballots cast in the last seconds land
    - Latch is in-memory and per instance; the store flag is the authoritative guard
    - Latch is bounded (oldest ids evicted) so the process-wide coordinator does not
      grow with every vote ever checked
"""

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import UUID

from kontekst.core.domain_types import ClaimOutcomeKind
from kontekst.core.expiry_claim import (
    ClaimOutcome, VoteSnapshot, check_preconditions, failed, generated, skipped,
)
from kontekst.core.repository_protocols import ArticleGenerator, ContentVoteStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpiryCoordinator:
    """One observer's view of expiring votes: latch + claim + generate."""

    def __init__(
        self,
        settle_delay_seconds: float = 2.0,
        now: Callable[[], datetime] = _utcnow,
        latch_size: int = 1024,
    ):
        self.settle_delay_seconds = settle_delay_seconds
        self._now = now
        self.latch_size = latch_size
        self._attempted: OrderedDict[UUID, None] = OrderedDict()

    def has_attempted(self, vote_id: UUID) -> bool:
        return vote_id in self._attempted

    def _latch(self, vote_id: UUID) -> None:
        self._attempted[vote_id] = None
        self._attempted.move_to_end(vote_id)
        while len(self._attempted) > self.latch_size:
            self._attempted.popitem(last=False)

    async def check(
        self,
        snapshot: VoteSnapshot,
        store: ContentVoteStore,
        generator: ArticleGenerator,
    ) -> ClaimOutcome:
        vote_id = snapshot.vote_id
        skip = check_preconditions(snapshot, self._now(), self.has_attempted(vote_id))
        if skip is not None:
            return skipped(skip, vote_id)

        if self.settle_delay_seconds > 0:
            await asyncio.sleep(self.settle_delay_seconds)

        try:
            if not await store.read_is_active(vote_id):
                return skipped(ClaimOutcomeKind.SKIPPED_ALREADY_HANDLED, vote_id)

            self._latch(vote_id)
            if not await store.claim(vote_id):
                logger.info("Lost claim race", extra={"vote_id": vote_id})
                return skipped(ClaimOutcomeKind.LOST_CLAIM, vote_id)
        except Exception as e:
            logger.error(
                f"Claim check failed: {e}", extra={"vote_id": vote_id}, exc_info=True,
            )
            return failed(vote_id)

        try:
            result = await generator.generate_for_vote(vote_id)
        except Exception as e:
            logger.error(
                f"Article generation failed: {e}",
                extra={"vote_id": vote_id, "error_code": getattr(e, "code", None)},
                exc_info=True,
            )
            await self._release(store, vote_id)
            return failed(vote_id)

        logger.info(
            "Article generated for expired vote",
            extra={"vote_id": vote_id, "outcome": ClaimOutcomeKind.GENERATED.value},
        )
        return generated(vote_id, result.winner_text, result.article_slug)

    async def _release(self, store: ContentVoteStore, vote_id: UUID) -> None:
        try:
            await store.release(vote_id)
        except Exception as e:
            # Vote stays claimed; it will need a manual reset.
            logger.error(
                f"Failed to release claim: {e}", extra={"vote_id": vote_id}, exc_info=True,
            )
