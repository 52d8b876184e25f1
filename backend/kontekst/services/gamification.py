"""Gamification — user stats, hall-of-fame listing and the argument of the week.

Invariants:
    - Unknown user → ResourceNotFoundError on stats; listings never 404
    - Hall of fame ordered by likes_count desc
    - Author name defaults to "Anonymous"; post content / discussion title are None
      when the referenced row is gone
"""

from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.core.clock import hall_of_fame_week
from kontekst.core.errors import ResourceNotFoundError
from kontekst.core.gamification import UserStats, compute_user_stats
from kontekst.models.discussion import Discussion
from kontekst.models.discussion_post import DiscussionPost
from kontekst.models.hall_of_fame import HallOfFameEntry
from kontekst.models.profile import Profile
from kontekst.models.user_badge import UserBadge

ANONYMOUS_AUTHOR = "Anonymous"


async def user_stats(db: AsyncSession, user_id: UUID) -> UserStats:
    profile = await db.get(Profile, user_id)
    if profile is None:
        raise ResourceNotFoundError("Profile", str(user_id))

    badges = await db.execute(
        select(UserBadge.badge_type)
        .where(UserBadge.user_id == user_id)
        .order_by(UserBadge.earned_at),
    )
    entries = await db.execute(
        select(HallOfFameEntry).where(HallOfFameEntry.user_id == user_id),
    )
    return compute_user_stats(
        profile, badges.scalars().all(), list(entries.scalars().all()),
    )


async def _enrich(db: AsyncSession, entries: list[HallOfFameEntry]) -> list[dict]:
    if not entries:
        return []
    names = dict((await db.execute(
        select(Profile.user_id, Profile.display_name)
        .where(Profile.user_id.in_({e.user_id for e in entries})),
    )).all())
    contents = dict((await db.execute(
        select(DiscussionPost.id, DiscussionPost.content)
        .where(DiscussionPost.id.in_({e.post_id for e in entries})),
    )).all())
    titles = dict((await db.execute(
        select(Discussion.id, Discussion.title)
        .where(Discussion.id.in_({e.discussion_id for e in entries})),
    )).all())
    return [
        {
            "id": e.id,
            "post_id": e.post_id,
            "user_id": e.user_id,
            "discussion_id": e.discussion_id,
            "rank": e.rank,
            "likes_count": e.likes_count,
            "week_number": e.week_number,
            "year": e.year,
            "author_name": names.get(e.user_id) or ANONYMOUS_AUTHOR,
            "post_content": contents.get(e.post_id),
            "discussion_title": titles.get(e.discussion_id),
        }
        for e in entries
    ]


async def hall_of_fame(db: AsyncSession, limit: int = 10) -> list[dict]:
    result = await db.execute(
        select(HallOfFameEntry)
        .order_by(HallOfFameEntry.likes_count.desc())
        .limit(limit),
    )
    return await _enrich(db, list(result.scalars().all()))


async def argument_of_week(db: AsyncSession, today: date) -> dict | None:
    year, week = hall_of_fame_week(today)
    result = await db.execute(
        select(HallOfFameEntry).where(
            HallOfFameEntry.week_number == week,
            HallOfFameEntry.year == year,
            HallOfFameEntry.rank == 1,
        ).limit(1),
    )
    entry = result.scalar_one_or_none()
    if entry is None:
        return None
    return (await _enrich(db, [entry]))[0]
