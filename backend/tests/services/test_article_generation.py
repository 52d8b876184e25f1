"""Article Generation — tests for the vote-driven article writer.

Tests cover:
    - winner recomputed from ballots and passed to the model prompt
    - article inserted as a published, featured analytics piece
    - next vote opened with topics excluding the winner
    - unusable model output → GenerationError, no article row
    - not expired / no ballots → VoteNotReadyError
    - missing API key → ConfigurationError before any provider call
    - end to end: 7 vs 3 ballots → "Yes" at 70%, vote closed afterwards
"""

import random
from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from kontekst.config import Settings, get_settings
from kontekst.core.article_draft import EDITORIAL_AUTHOR, NEXT_VOTE_TITLE, TOPIC_POOL
from kontekst.core.domain_types import ClaimOutcomeKind
from kontekst.core.errors import (
    ConfigurationError, GenerationError, ResourceNotFoundError, VoteNotReadyError,
)
from kontekst.core.tally import tally
from kontekst.models.article import Article
from kontekst.models.content_vote import ContentVote
from kontekst.services.article_generation import ArticleGenerationService
from kontekst.services.content_vote_store import SqlContentVoteStore
from kontekst.services.expiry_coordinator import ExpiryCoordinator

from tests.services.mock_anthropic import MockAnthropicClient, article_json

EXPIRED = timedelta(minutes=-1)


def _service(db, client, **settings):
    return ArticleGenerationService(
        db,
        Settings(**settings) if settings else get_settings(),
        client=client,
        rng=random.Random(7),
    )


async def _article_count(db):
    return (await db.execute(select(func.count()).select_from(Article))).scalar()


# ─── Happy path ──────────────────────────────────────────────────

async def test_generates_article_for_winner(test_db, seed_vote, mock_anthropic):
    topic = TOPIC_POOL[2]
    vote = await seed_vote(options=(topic, "Other"), ballots=[0, 0, 1], ends_in=EXPIRED)

    result = await _service(test_db, mock_anthropic).generate_for_vote(vote.id)

    assert result.winner_text == topic
    assert result.vote_count == 2
    call = mock_anthropic.calls[0]
    assert call["temperature"] == 0.75
    assert f'"{topic}"' in call["messages"][0]["content"]

    article = (await test_db.execute(
        select(Article).where(Article.slug == result.article_slug),
    )).scalar_one()
    assert article.title == "Who really profits from the vote"
    assert article.category == "analytics"
    assert article.author_name == EDITORIAL_AUTHOR
    assert article.is_published and article.is_featured
    assert article.tags == ["politics", "economy"]
    assert article.slug.startswith("who-really-profits-from-the-vote-")


async def test_opens_next_vote_without_winner(test_db, seed_vote, mock_anthropic):
    topic = TOPIC_POOL[0]
    vote = await seed_vote(options=(topic,), ballots=[0], ends_in=EXPIRED)

    result = await _service(test_db, mock_anthropic).generate_for_vote(vote.id)

    next_vote = await test_db.get(ContentVote, result.next_vote_id)
    assert next_vote.title == NEXT_VOTE_TITLE
    assert next_vote.is_active is True
    assert len(next_vote.option_texts) == 4
    assert topic not in next_vote.option_texts
    assert next_vote.ends_at - next_vote.created_at > timedelta(hours=71)


# ─── Rejections ──────────────────────────────────────────────────

async def test_bad_model_output_raises_and_writes_nothing(test_db, seed_vote):
    vote = await seed_vote(ballots=[0], ends_in=EXPIRED)
    client = MockAnthropicClient(["Sorry, I cannot help with that."])
    with pytest.raises(GenerationError):
        await _service(test_db, client).generate_for_vote(vote.id)
    assert await _article_count(test_db) == 0


async def test_open_vote_not_ready(test_db, seed_vote, mock_anthropic):
    vote = await seed_vote(ballots=[0], ends_in=timedelta(hours=2))
    with pytest.raises(VoteNotReadyError):
        await _service(test_db, mock_anthropic).generate_for_vote(vote.id)
    assert mock_anthropic.calls == []


async def test_vote_without_ballots_not_ready(test_db, seed_vote, mock_anthropic):
    vote = await seed_vote(ballots=[], ends_in=EXPIRED)
    with pytest.raises(VoteNotReadyError):
        await _service(test_db, mock_anthropic).generate_for_vote(vote.id)


async def test_unknown_vote_not_found(test_db, mock_anthropic):
    with pytest.raises(ResourceNotFoundError):
        await _service(test_db, mock_anthropic).generate_for_vote(uuid4())


async def test_missing_api_key_fails_fast(test_db, seed_vote):
    vote = await seed_vote(ballots=[0], ends_in=EXPIRED)
    service = _service(test_db, None, anthropic_api_key="")
    with pytest.raises(ConfigurationError):
        await service.generate_for_vote(vote.id)


# ─── End to end ──────────────────────────────────────────────────

async def test_seventy_thirty_vote_generates_yes_and_closes(
    test_db, seed_vote, mock_anthropic,
):
    vote = await seed_vote(options=("Yes", "No"), ballots=[0] * 7 + [1] * 3, ends_in=EXPIRED)
    store = SqlContentVoteStore(test_db)

    ballots = (await store.ballots_for([vote.id]))[vote.id]
    result = tally(vote.option_texts, ballots)
    assert result.percentages == [70, 30]

    outcome = await ExpiryCoordinator(settle_delay_seconds=0).check(
        await store.snapshot(vote), store, _service(test_db, mock_anthropic),
    )

    assert outcome.kind == ClaimOutcomeKind.GENERATED
    assert outcome.winner_text == "Yes"
    assert outcome.message == 'Voting finished. An article about "Yes" has been generated.'
    assert await store.read_is_active(vote.id) is False
    assert await _article_count(test_db) == 1


async def test_failed_generation_reopens_vote(test_db, seed_vote):
    vote = await seed_vote(ballots=[0], ends_in=EXPIRED)
    vote_id = vote.id
    store = SqlContentVoteStore(test_db)
    client = MockAnthropicClient(["not json"])

    outcome = await ExpiryCoordinator(settle_delay_seconds=0).check(
        await store.snapshot(vote), store, _service(test_db, client),
    )

    assert outcome.kind == ClaimOutcomeKind.FAILED
    assert await store.read_is_active(vote_id) is True
    assert await _article_count(test_db) == 0
    # the seeded instance is still loaded, not expired by the release
    assert vote.id == vote_id
    assert vote.option_texts
