"""Kontekst API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map KontekstError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager
    - Presence hub and expiry coordinator exist on app.state before the first request

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Expiry watcher runs only when an API key is configured: without one every pass
      would claim and release the same votes
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kontekst.api.error_handlers import register_error_handlers
from kontekst.api.routes import (
    content_votes, discussions, gamification, health, payments, presence, seo,
)
from kontekst.config import get_settings
from kontekst.infrastructure import database
from kontekst.infrastructure.anthropic_client import ResilientAnthropicClient
from kontekst.infrastructure.observability import setup_logging
from kontekst.services.article_generation import ArticleGenerationService
from kontekst.services.expiry_coordinator import ExpiryCoordinator
from kontekst.services.expiry_watcher import ExpiryWatcher
from kontekst.services.presence import PresenceHub

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )

    watcher: ExpiryWatcher | None = None
    if settings.anthropic_api_key:
        client = ResilientAnthropicClient(
            api_key=settings.anthropic_api_key,
            max_retries=settings.anthropic_max_retries,
            base_delay_ms=settings.anthropic_base_delay_ms,
            max_delay_ms=settings.anthropic_max_delay_ms,
            timeout_seconds=settings.anthropic_timeout_seconds,
        )
        app.state.anthropic_client = client
        if settings.expiry_watch_enabled:
            watcher = ExpiryWatcher(
                session_factory=manager.session,
                generator_factory=lambda db: ArticleGenerationService(
                    db, settings, client=client,
                ),
                interval_seconds=settings.expiry_watch_interval_seconds,
                settle_delay_seconds=settings.claim_settle_delay_seconds,
            )
            watcher.start()
    else:
        logger.warning("ANTHROPIC_API_KEY not set; vote-driven article generation disabled")

    logger.info("Kontekst API started")
    yield
    if watcher is not None:
        await watcher.stop()
    await manager.close()
    logger.info("Kontekst API shutting down")


app = FastAPI(
    title="Kontekst API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.state.presence_hub = PresenceHub()
app.state.expiry_coordinator = ExpiryCoordinator(
    settle_delay_seconds=settings.claim_settle_delay_seconds,
    latch_size=settings.expiry_latch_size,
)
app.state.anthropic_client = None

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(seo.CrawlerMetaMiddleware)

app.include_router(health.router)
app.include_router(content_votes.router)
app.include_router(discussions.router)
app.include_router(gamification.router)
app.include_router(presence.router)
app.include_router(payments.router)
app.include_router(seo.router)

register_error_handlers(app)
