"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never are; the shell orchestrates the async calls
      around the pure logic
"""

from collections.abc import Awaitable, Callable
from typing import Protocol
from uuid import UUID

from kontekst.core.domain_types import PresenceStatus


class ContentVoteStore(Protocol):
    """Store operations the expiry coordinator depends on."""
    async def read_is_active(self, vote_id: UUID) -> bool | None:
        """Fresh read of the persisted claim flag; None when the vote is gone."""
        ...

    async def claim(self, vote_id: UUID) -> bool:
        """Atomically flip is_active true → false; True only for the single winner."""
        ...

    async def release(self, vote_id: UUID) -> None:
        """Undo a claim after a failed side effect so another observer may retry."""
        ...


class GenerationResult(Protocol):
    winner_text: str
    article_slug: str


class ArticleGenerator(Protocol):
    """External "generate article for the winning option" action."""
    async def generate_for_vote(self, vote_id: UUID) -> GenerationResult: ...


PresenceSnapshot = dict[str, list[dict]]


class PresenceChannel(Protocol):
    """Transport-owned presence channel a single session joins."""
    async def subscribe(
        self, on_status: Callable[[PresenceStatus], Awaitable[None]],
    ) -> None: ...
    def on_sync(self, callback: Callable[[PresenceSnapshot], Awaitable[None]]) -> None: ...
    async def track(self, payload: dict) -> None: ...
    def presence_state(self) -> PresenceSnapshot: ...
    async def leave(self) -> None: ...
