"""ContentVoteBallot ORM — one user's choice in one content vote.

Invariants:
    - Unique per (vote_id, user_id): changing a vote overwrites, never adds
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from kontekst.db.base import Base


class ContentVoteBallot(Base):
    __tablename__ = "content_vote_ballots"
    __table_args__ = (
        UniqueConstraint("vote_id", "user_id", name="uq_content_vote_ballots_vote_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    vote_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("content_votes.id"), nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    option_index: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    vote: Mapped["ContentVote"] = relationship("ContentVote", back_populates="ballots")
