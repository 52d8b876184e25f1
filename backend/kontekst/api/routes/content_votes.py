"""Content Vote Routes — list tallied votes, cast ballots, trigger expiry checks.

Invariants:
    - Listing is public; the caller's own ballot is filled in when X-User-Id is present
    - POST /{id}/ballots requires an authenticated premium user
    - POST /{id}/expiry-check never fails because generation failed: the outcome
      (generated / failed / skipped_*) is returned with 200

Design Decisions:
    - One process-wide ExpiryCoordinator (app.state) serves every expiry-check call,
      so its latch blocks repeated triggers for the same vote from this process
    - Missing API key is checked before claiming: a misconfigured deployment must not
      claim and release every vote it sees
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.api.dependencies import current_user_id, optional_user_id
from kontekst.config import get_settings
from kontekst.core.errors import ResourceNotFoundError
from kontekst.infrastructure.database import get_db
from kontekst.schemas.content_vote import (
    BallotCreate, ContentVoteResponse, ExpiryCheckResponse,
)
from kontekst.services import content_votes
from kontekst.services.article_generation import ArticleGenerationService
from kontekst.services.content_vote_store import SqlContentVoteStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/content-votes", tags=["content-votes"])


@router.get("", response_model=list[ContentVoteResponse])
async def list_votes(
    db: AsyncSession = Depends(get_db),
    user_id: UUID | None = Depends(optional_user_id),
):
    """Active votes, newest first, with live tallies."""
    return await content_votes.list_active_votes(
        db, datetime.now(timezone.utc), user_id,
    )


@router.get("/{vote_id}", response_model=ContentVoteResponse)
async def get_vote(
    vote_id: UUID,
    db: AsyncSession = Depends(get_db),
    user_id: UUID | None = Depends(optional_user_id),
):
    return await content_votes.get_vote_view(
        db, vote_id, datetime.now(timezone.utc), user_id,
    )


@router.post("/{vote_id}/ballots", response_model=ContentVoteResponse)
async def cast_ballot(
    vote_id: UUID,
    body: BallotCreate,
    db: AsyncSession = Depends(get_db),
    user_id: UUID = Depends(current_user_id),
):
    """Cast or change the caller's ballot."""
    return await content_votes.cast_ballot(
        db, vote_id, user_id, body.option_index, datetime.now(timezone.utc),
    )


@router.post("/{vote_id}/expiry-check", response_model=ExpiryCheckResponse)
async def expiry_check(
    vote_id: UUID, request: Request, db: AsyncSession = Depends(get_db),
):
    """Run the exactly-once generation trigger for a vote the client saw expire."""
    store = SqlContentVoteStore(db)
    vote = await store.get_vote(vote_id)
    if vote is None:
        raise ResourceNotFoundError("ContentVote", str(vote_id))

    generator = ArticleGenerationService(
        db, get_settings(), client=getattr(request.app.state, "anthropic_client", None),
    )
    generator.ensure_configured()

    outcome = await request.app.state.expiry_coordinator.check(
        await store.snapshot(vote), store, generator,
    )
    return outcome.to_dict()
