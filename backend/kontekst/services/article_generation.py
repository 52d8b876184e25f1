"""Article Generation — writes the article for a closed content vote's winning option.

Invariants:
    - Missing API key → ConfigurationError before any database or provider work
    - Re-validates independently of the caller: vote exists, has expired, has a winner
    - Article insert is committed before the next vote is opened; a failure to open the
      next vote is logged and never undoes the article
    - Never touches is_active: claiming and releasing is the coordinator's job

Design Decisions:
    - Winner recomputed from ballots here (not passed in) so the action stays correct
      whoever triggers it
    - rng injectable: slug suffix and next-vote topics are random in production,
      deterministic in tests
"""

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.config import Settings
from kontekst.core import article_draft
from kontekst.core.domain_types import ArticleCategory
from kontekst.core.errors import (
    ConfigurationError, ErrorContext, ResourceNotFoundError, VoteNotReadyError,
)
from kontekst.core.expiry_claim import is_expired
from kontekst.core.tally import tally
from kontekst.infrastructure.anthropic_client import ResilientAnthropicClient, text_of
from kontekst.models.article import Article
from kontekst.models.content_vote import ContentVote
from kontekst.services.content_vote_store import SqlContentVoteStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeneratedArticle:
    article_id: UUID
    article_slug: str
    title: str
    winner_text: str
    vote_count: int
    next_vote_id: UUID | None


class ArticleGenerationService:
    """ArticleGenerator implementation over the SQL store and the Anthropic client."""

    def __init__(
        self,
        db: AsyncSession,
        settings: Settings,
        client: ResilientAnthropicClient | None = None,
        rng: random.Random | None = None,
    ):
        self.db = db
        self.settings = settings
        self.client = client
        self.rng = rng or random.Random()
        self.store = SqlContentVoteStore(db)

    def ensure_configured(self) -> ResilientAnthropicClient:
        """Build the provider client, failing fast when no API key is set."""
        if self.client is None:
            if not self.settings.anthropic_api_key:
                raise ConfigurationError("ANTHROPIC_API_KEY")
            self.client = ResilientAnthropicClient(
                api_key=self.settings.anthropic_api_key,
                max_retries=self.settings.anthropic_max_retries,
                base_delay_ms=self.settings.anthropic_base_delay_ms,
                max_delay_ms=self.settings.anthropic_max_delay_ms,
                timeout_seconds=self.settings.anthropic_timeout_seconds,
            )
        return self.client

    async def generate_for_vote(self, vote_id: UUID) -> GeneratedArticle:
        client = self.ensure_configured()
        now = datetime.now(timezone.utc)

        vote = await self.store.get_vote(vote_id)
        if vote is None:
            raise ResourceNotFoundError("ContentVote", str(vote_id))
        if vote.ends_at is not None and not is_expired(vote.ends_at, now):
            raise VoteNotReadyError("Vote has not expired yet")

        ballots = (await self.store.ballots_for([vote.id]))[vote.id]
        result = tally(vote.option_texts, ballots)
        if result.winner is None:
            raise VoteNotReadyError("No winning topic found")
        winner = result.winner
        logger.info(
            f'Winning topic "{winner.text}" with {winner.count} votes',
            extra={"vote_id": vote_id},
        )

        response = await client.create_message(
            model=self.settings.article_model,
            max_tokens=self.settings.article_max_tokens,
            system=article_draft.SYSTEM_PROMPT,
            messages=[{
                "role": "user",
                "content": article_draft.build_user_prompt(winner.text, now),
            }],
            temperature=0.75,
            context=ErrorContext(vote_id=str(vote_id)),
        )
        draft = article_draft.parse_article(text_of(response))

        article = Article(
            title=draft.title,
            slug=article_draft.unique_slug(draft.title, self.rng),
            excerpt=draft.excerpt,
            content=draft.content,
            category=ArticleCategory.ANALYTICS.value,
            tags=draft.tags,
            read_time=draft.read_time,
            author_name=article_draft.EDITORIAL_AUTHOR,
            is_published=True,
            is_featured=True,
            published_at=now,
        )
        self.db.add(article)
        await self.db.commit()
        logger.info(
            f"Article created: {article.slug}", extra={"vote_id": vote_id},
        )

        next_vote_id = await self._open_next_vote(winner.text, now)
        return GeneratedArticle(
            article_id=article.id,
            article_slug=article.slug,
            title=article.title,
            winner_text=winner.text,
            vote_count=winner.count,
            next_vote_id=next_vote_id,
        )

    async def _open_next_vote(self, winning_topic: str, now: datetime) -> UUID | None:
        topics = article_draft.pick_next_topics(winning_topic, self.rng)
        next_vote = ContentVote(
            title=article_draft.NEXT_VOTE_TITLE,
            description=article_draft.NEXT_VOTE_DESCRIPTION,
            options=[{"text": t} for t in topics],
            is_active=True,
            ends_at=now + timedelta(hours=self.settings.next_vote_duration_hours),
        )
        try:
            self.db.add(next_vote)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create next content vote: {e}", exc_info=True)
            return None
        logger.info("Next content vote opened", extra={"vote_id": next_vote.id})
        return next_vote.id
