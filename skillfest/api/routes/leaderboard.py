from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.api.schemas.leaderboard import LeaderboardResponse, LeaderboardSettingsResponse
from skillfest.db import get_db
from skillfest.services.leaderboard_service import LeaderboardService

router = APIRouter()


@router.get(
    "",
    response_model=LeaderboardResponse,
    summary="Get the public leaderboard",
)
async def get_leaderboard(
    db: AsyncSession = Depends(get_db),
) -> LeaderboardResponse:
    """Ranked participants, or an empty locked view while the leaderboard is hidden."""
    service = LeaderboardService(db)
    view = await service.get_public_leaderboard()
    return LeaderboardResponse.model_validate(view)


@router.get(
    "/settings",
    response_model=LeaderboardSettingsResponse,
    summary="Get leaderboard visibility",
)
async def get_leaderboard_settings(
    db: AsyncSession = Depends(get_db),
) -> LeaderboardSettingsResponse:
    service = LeaderboardService(db)
    current = await service.get_settings()
    return LeaderboardSettingsResponse.model_validate(current)
