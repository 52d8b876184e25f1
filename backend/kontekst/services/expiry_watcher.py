"""Expiry Watcher — background loop that drives the coordinator for expired votes.

Invariants:
    - One pass = one fresh ExpiryCoordinator, so a vote released after a failure is
      retried on the next pass, never within the same pass
    - Each candidate vote gets its own database session
    - A failing pass is logged; the loop keeps running until stop()

Design Decisions:
    - Plain asyncio task owned by the FastAPI lifespan; single process, no scheduler lib
    - Session factory and generator factory injected so tests drive run_once() directly
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.core.expiry_claim import ClaimOutcome
from kontekst.core.repository_protocols import ArticleGenerator
from kontekst.services.content_vote_store import SqlContentVoteStore
from kontekst.services.expiry_coordinator import ExpiryCoordinator

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]
GeneratorFactory = Callable[[AsyncSession], ArticleGenerator]


class ExpiryWatcher:
    def __init__(
        self,
        session_factory: SessionFactory,
        generator_factory: GeneratorFactory,
        interval_seconds: float = 60.0,
        settle_delay_seconds: float = 2.0,
    ):
        self.session_factory = session_factory
        self.generator_factory = generator_factory
        self.interval_seconds = interval_seconds
        self.settle_delay_seconds = settle_delay_seconds
        self._task: asyncio.Task | None = None

    async def run_once(self) -> list[ClaimOutcome]:
        now = datetime.now(timezone.utc)
        async with self.session_factory() as db:
            candidates = await SqlContentVoteStore(db).expired_candidates(now)

        coordinator = ExpiryCoordinator(settle_delay_seconds=self.settle_delay_seconds)
        outcomes = []
        for snapshot in candidates:
            async with self.session_factory() as db:
                outcome = await coordinator.check(
                    snapshot, SqlContentVoteStore(db), self.generator_factory(db),
                )
            logger.info(
                "Expiry check finished",
                extra={"vote_id": snapshot.vote_id, "outcome": outcome.kind.value},
            )
            outcomes.append(outcome)
        return outcomes

    async def _loop(self) -> None:
        while True:
            try:
                await self.run_once()
            except Exception as e:
                logger.error(f"Expiry watcher pass failed: {e}", exc_info=True)
            await asyncio.sleep(self.interval_seconds)

    def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._loop())
            logger.info("Expiry watcher started")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Expiry watcher stopped")
