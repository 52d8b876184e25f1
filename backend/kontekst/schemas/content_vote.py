"""Content Vote Schemas — ballots in, tallied votes and claim outcomes out."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class BallotCreate(BaseModel):
    option_index: int = Field(ge=0)


class OptionTally(BaseModel):
    index: int
    text: str
    votes: int
    percentage: int


class ContentVoteResponse(BaseModel):
    id: UUID
    title: str
    description: str | None = None
    options: list[OptionTally]
    total_votes: int
    user_vote: int | None = None
    is_active: bool
    is_expired: bool
    ends_at: datetime | None = None
    created_at: datetime
    countdown: str | None = None
    time_left_pct: float | None = None


class ExpiryCheckResponse(BaseModel):
    outcome: str
    vote_id: UUID
    message: str | None = None
    winner_text: str | None = None
    article_slug: str | None = None
