"""Round Schemas — derived round state of a discussion."""

from uuid import UUID

from pydantic import BaseModel


class RoundResponse(BaseModel):
    discussion_id: UUID
    status: str
    remaining_seconds: int
    progress_pct: float
    days_left: int
    hours_left: int
    countdown: str
