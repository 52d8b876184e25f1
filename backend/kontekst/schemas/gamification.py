"""Gamification Schemas — user stats and hall-of-fame rows."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UserStatsResponse(BaseModel):
    karma: int
    badges: list[str]
    top_posts: int
    top1_posts: int
    banked_premium_months: int
    premium_expires_at: datetime | None = None
    selected_badge: str | None = None
    is_premium: bool


class HallOfFameEntryResponse(BaseModel):
    id: UUID
    post_id: UUID
    user_id: UUID
    discussion_id: UUID
    rank: int
    likes_count: int
    week_number: int
    year: int
    author_name: str
    post_content: str | None = None
    discussion_title: str | None = None
