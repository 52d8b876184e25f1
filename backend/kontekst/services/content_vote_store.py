"""Content Vote Store — SQL persistence for content votes, ballots and the claim flag.

Invariants:
    - read_is_active() always hits the database (column select, no identity-map value)
    - claim() is a single conditional UPDATE; True only when exactly one row changed
    - claim() and release() commit immediately so other sessions observe them
    - Ballots are upserted on (vote_id, user_id): a voter never holds two ballots

Design Decisions:
    - Dialect-specific INSERT ... ON CONFLICT DO UPDATE (postgresql and sqlite both
      support it) instead of select-then-write, which races between two tabs
    - release() rolls back first: a failed generation may have left pending writes
"""

import logging
from collections import defaultdict
from datetime import datetime
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.core.expiry_claim import VoteSnapshot
from kontekst.core.tally import Ballot, tally
from kontekst.models.content_vote import ContentVote
from kontekst.models.content_vote_ballot import ContentVoteBallot

logger = logging.getLogger(__name__)


class SqlContentVoteStore:
    """ContentVoteStore backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ───────────────────────────────────────────────────

    async def get_vote(self, vote_id: UUID) -> ContentVote | None:
        result = await self.db.execute(
            select(ContentVote).where(ContentVote.id == vote_id),
        )
        return result.scalar_one_or_none()

    async def list_active(self) -> list[ContentVote]:
        result = await self.db.execute(
            select(ContentVote)
            .where(ContentVote.is_active.is_(True))
            .order_by(ContentVote.created_at.desc()),
        )
        return list(result.scalars().all())

    async def ballots_for(self, vote_ids: list[UUID]) -> dict[UUID, list[Ballot]]:
        grouped: dict[UUID, list[Ballot]] = defaultdict(list)
        if not vote_ids:
            return grouped
        result = await self.db.execute(
            select(
                ContentVoteBallot.vote_id,
                ContentVoteBallot.user_id,
                ContentVoteBallot.option_index,
            ).where(ContentVoteBallot.vote_id.in_(vote_ids)),
        )
        for vote_id, user_id, option_index in result.all():
            grouped[vote_id].append(Ballot(option_index=option_index, user_id=user_id))
        return grouped

    async def snapshot(self, vote: ContentVote) -> VoteSnapshot:
        ballots = (await self.ballots_for([vote.id]))[vote.id]
        return VoteSnapshot(
            vote_id=vote.id,
            ends_at=vote.ends_at,
            total_ballots=tally(vote.option_texts, ballots).total,
            is_active=vote.is_active,
        )

    async def expired_candidates(self, now: datetime) -> list[VoteSnapshot]:
        """Active votes past their end time that hold at least one valid ballot."""
        result = await self.db.execute(
            select(ContentVote).where(
                ContentVote.is_active.is_(True),
                ContentVote.ends_at.is_not(None),
                ContentVote.ends_at < now,
            ),
        )
        votes = list(result.scalars().all())
        ballots = await self.ballots_for([v.id for v in votes])
        snapshots = []
        for vote in votes:
            total = tally(vote.option_texts, ballots[vote.id]).total
            if total > 0:
                snapshots.append(VoteSnapshot(
                    vote_id=vote.id, ends_at=vote.ends_at,
                    total_ballots=total, is_active=True,
                ))
        return snapshots

    # ─── Claim flag ──────────────────────────────────────────────

    async def read_is_active(self, vote_id: UUID) -> bool | None:
        result = await self.db.execute(
            select(ContentVote.is_active).where(ContentVote.id == vote_id),
        )
        return result.scalar_one_or_none()

    async def claim(self, vote_id: UUID) -> bool:
        result = await self.db.execute(
            update(ContentVote)
            .where(ContentVote.id == vote_id, ContentVote.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        return result.rowcount == 1

    async def release(self, vote_id: UUID) -> None:
        """Reopen a claimed vote after a failed generation.

        Rolls back only when the failure left the transaction unusable (e.g. a
        failed article flush). That rollback expires every loaded instance;
        otherwise loaded objects stay readable.
        """
        transaction = self.db.get_transaction()
        if transaction is not None and not transaction.is_active:
            await self.db.rollback()
        await self.db.execute(
            update(ContentVote)
            .where(ContentVote.id == vote_id)
            .values(is_active=True)
            .execution_options(synchronize_session=False),
        )
        await self.db.commit()
        logger.info("Content vote claim released", extra={"vote_id": vote_id})

    # ─── Ballots ─────────────────────────────────────────────────

    async def upsert_ballot(
        self, vote_id: UUID, user_id: UUID, option_index: int,
    ) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(ContentVoteBallot).values(
            vote_id=vote_id, user_id=user_id, option_index=option_index,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[ContentVoteBallot.vote_id, ContentVoteBallot.user_id],
            set_={"option_index": stmt.excluded.option_index},
        )
        await self.db.execute(stmt)
        await self.db.commit()
