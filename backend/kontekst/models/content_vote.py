"""ContentVote ORM — a time-boxed poll whose expiry triggers article generation.

Invariants:
    - options is an ordered JSON list of {"text": str}; per-option counts are never
      stored, they are reduced from ballots on read
    - is_active is the claim flag: flipped true → false exactly once, by the single
      successful claimant (released back to true only when generation fails)
    - ends_at None means the vote never expires

Design Decisions:
    - JSON column for options: the option list is written once and read whole
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from kontekst.db.base import Base


class ContentVote(Base):
    __tablename__ = "content_votes"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    options: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    ends_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    ballots: Mapped[list["ContentVoteBallot"]] = relationship(
        "ContentVoteBallot", back_populates="vote", cascade="all, delete-orphan",
    )

    @property
    def option_texts(self) -> list[str]:
        return [str(o.get("text", "")) if isinstance(o, dict) else str(o) for o in self.options or []]
