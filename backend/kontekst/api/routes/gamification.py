"""Gamification Routes — user stats, hall of fame, argument of the week."""

from dataclasses import asdict
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from kontekst.infrastructure.database import get_db
from kontekst.schemas.gamification import HallOfFameEntryResponse, UserStatsResponse
from kontekst.services import gamification

router = APIRouter(prefix="/api/v1", tags=["gamification"])


@router.get("/users/{user_id}/gamification", response_model=UserStatsResponse)
async def user_stats(user_id: UUID, db: AsyncSession = Depends(get_db)):
    return asdict(await gamification.user_stats(db, user_id))


@router.get("/hall-of-fame", response_model=list[HallOfFameEntryResponse])
async def hall_of_fame(
    limit: int = Query(10, ge=1, le=100), db: AsyncSession = Depends(get_db),
):
    return await gamification.hall_of_fame(db, limit)


@router.get(
    "/hall-of-fame/argument-of-the-week",
    response_model=HallOfFameEntryResponse | None,
)
async def argument_of_the_week(db: AsyncSession = Depends(get_db)):
    return await gamification.argument_of_week(db, datetime.now(timezone.utc).date())
