"""Discussion Routes — derived round state for a discussion."""

from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.config import get_settings
from kontekst.infrastructure.database import get_db
from kontekst.schemas.round import RoundResponse
from kontekst.services.discussions import discussion_round

router = APIRouter(prefix="/api/v1/discussions", tags=["discussions"])


@router.get("/{discussion_id}/round", response_model=RoundResponse)
async def get_round(discussion_id: UUID, db: AsyncSession = Depends(get_db)):
    return await discussion_round(
        db, discussion_id, datetime.now(timezone.utc),
        duration_hours=get_settings().round_duration_hours,
    )
