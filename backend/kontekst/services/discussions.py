"""Discussions — round state of a discussion at request time."""

from datetime import datetime, timedelta
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.core import round_state
from kontekst.core.errors import ResourceNotFoundError
from kontekst.models.discussion import Discussion


async def discussion_round(
    db: AsyncSession, discussion_id: UUID, now: datetime, duration_hours: int = 72,
) -> dict:
    discussion = await db.get(Discussion, discussion_id)
    if discussion is None:
        raise ResourceNotFoundError("Discussion", str(discussion_id))
    state = round_state.resolve(
        discussion.round_ends_at,
        now,
        starts_at=discussion.round_starts_at,
        duration=timedelta(hours=duration_hours),
    )
    return {"discussion_id": discussion.id, **state.to_dict()}
