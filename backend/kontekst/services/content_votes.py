"""Content Votes — listing with tallies and premium-only ballot casting.

Invariants:
    - Listing shows active votes newest first; tallies are recomputed on every read
    - Only premium profiles may cast ballots
    - Ballots are rejected once the vote is expired or already claimed
    - option_index must address an existing option
"""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.core.clock import format_vote_countdown, vote_time_left_pct
from kontekst.core.errors import (
    ErrorContext, InputValidationError, PermissionDeniedError,
    ResourceNotFoundError, VoteClosedError,
)
from kontekst.core.expiry_claim import is_expired
from kontekst.core.tally import Tally, tally
from kontekst.models.content_vote import ContentVote
from kontekst.models.profile import Profile
from kontekst.services.content_vote_store import SqlContentVoteStore

logger = logging.getLogger(__name__)


def vote_view(vote: ContentVote, result: Tally, now: datetime) -> dict:
    return {
        "id": vote.id,
        "title": vote.title,
        "description": vote.description,
        "options": result.option_rows(),
        "total_votes": result.total,
        "user_vote": result.user_vote,
        "is_active": vote.is_active,
        "is_expired": is_expired(vote.ends_at, now),
        "ends_at": vote.ends_at,
        "created_at": vote.created_at,
        "countdown": format_vote_countdown(vote.ends_at, now) if vote.ends_at else None,
        "time_left_pct": (
            vote_time_left_pct(vote.created_at, vote.ends_at, now) if vote.ends_at else None
        ),
    }


async def list_active_votes(
    db: AsyncSession, now: datetime, user_id: UUID | None = None,
) -> list[dict]:
    store = SqlContentVoteStore(db)
    votes = await store.list_active()
    ballots = await store.ballots_for([v.id for v in votes])
    return [
        vote_view(v, tally(v.option_texts, ballots[v.id], user_id), now)
        for v in votes
    ]


async def get_vote_view(
    db: AsyncSession, vote_id: UUID, now: datetime, user_id: UUID | None = None,
) -> dict:
    store = SqlContentVoteStore(db)
    vote = await store.get_vote(vote_id)
    if vote is None:
        raise ResourceNotFoundError("ContentVote", str(vote_id))
    ballots = (await store.ballots_for([vote.id]))[vote.id]
    return vote_view(vote, tally(vote.option_texts, ballots, user_id), now)


async def cast_ballot(
    db: AsyncSession, vote_id: UUID, user_id: UUID, option_index: int, now: datetime,
) -> dict:
    profile = await db.get(Profile, user_id)
    if profile is None or not profile.is_premium:
        raise PermissionDeniedError(
            "Voting is available to premium readers only",
            ErrorContext(user_id=str(user_id), vote_id=str(vote_id)),
        )

    store = SqlContentVoteStore(db)
    vote = await store.get_vote(vote_id)
    if vote is None:
        raise ResourceNotFoundError("ContentVote", str(vote_id))
    if not vote.is_active or is_expired(vote.ends_at, now):
        raise VoteClosedError(str(vote_id))
    if not 0 <= option_index < len(vote.option_texts):
        raise InputValidationError(
            f"option_index must be between 0 and {len(vote.option_texts) - 1}",
            "option_index",
        )

    await store.upsert_ballot(vote_id, user_id, option_index)
    logger.info("Ballot cast", extra={"vote_id": vote_id, "user_id": user_id})
    return await get_vote_view(db, vote_id, now, user_id)
