from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.api.deps import require_admin
from skillfest.api.schemas.leaderboard import (
    LeaderboardSettingsResponse,
    LeaderboardSettingsSaved,
    LeaderboardSettingsUpdate,
)
from skillfest.api.schemas.rank import (
    AssignTopRanksRequest,
    AssignTopRanksResponse,
    ManualRankResponse,
    RecalculateResponse,
    UpdateUserRankRequest,
    VisibilityUpdate,
)
from skillfest.api.schemas.user import AdminUserRow, UserDetail
from skillfest.db import get_db
from skillfest.db.models.override import ManualRank
from skillfest.services.leaderboard_service import (
    LeaderboardService,
    SortDirection,
    SortOption,
)
from skillfest.services.rank_service import RankService
from skillfest.services.scoring_service import ScoringService
from skillfest.services.user_service import UserService

router = APIRouter(dependencies=[Depends(require_admin)])


def _override_response(override: ManualRank) -> ManualRankResponse:
    return ManualRankResponse(
        username=override.username,
        manual_rank=override.manual_rank,
        hidden=override.hidden,
        updated_at=override.rank_updated_at,
    )


@router.get(
    "/users",
    response_model=list[AdminUserRow],
    summary="Search and sort participants",
)
async def list_admin_users(
    search: str | None = Query(None, description="Case-insensitive login substring"),
    level: str | None = Query(None, description="Exact level label"),
    sort_by: SortOption = Query(SortOption.POINTS),
    direction: SortDirection = Query(SortDirection.DESC),
    db: AsyncSession = Depends(get_db),
) -> list[AdminUserRow]:
    """Admin table rows with automatic rank and the manual rank overlay."""
    service = LeaderboardService(db)
    rows = await service.get_admin_table(search, level, sort_by, direction)
    return [AdminUserRow.model_validate(r) for r in rows]


@router.get(
    "/users/{username}",
    response_model=UserDetail,
    summary="Get a participant's pull requests",
)
async def get_user_details(
    username: str,
    since: datetime | None = Query(
        None, description="Only pull requests opened at or after this time"
    ),
    db: AsyncSession = Depends(get_db),
) -> UserDetail:
    service = UserService(db)
    detail = await service.get_user_detail(username, since)
    if detail is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {username} not found",
        )
    return UserDetail.model_validate(detail)


@router.post(
    "/update-user-rank",
    response_model=ManualRankResponse,
    summary="Set or clear a manual rank",
)
async def update_user_rank(
    data: UpdateUserRankRequest,
    db: AsyncSession = Depends(get_db),
) -> ManualRankResponse:
    """Set a manual rank (null clears it) and optionally overwrite points."""
    service = RankService(db)
    override = await service.update_user_rank(data.username, data.rank, data.points)
    if override is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {data.username} not found",
        )
    return _override_response(override)


@router.post(
    "/users/{username}/visibility",
    response_model=ManualRankResponse,
    summary="Hide or show a participant",
)
async def set_user_visibility(
    username: str,
    data: VisibilityUpdate,
    db: AsyncSession = Depends(get_db),
) -> ManualRankResponse:
    service = RankService(db)
    override = await service.toggle_user_visibility(username, data.hidden)
    return _override_response(override)


@router.get(
    "/leaderboard-settings",
    response_model=LeaderboardSettingsResponse,
    summary="Get leaderboard settings",
)
async def get_leaderboard_settings(
    db: AsyncSession = Depends(get_db),
) -> LeaderboardSettingsResponse:
    service = LeaderboardService(db)
    current = await service.get_settings()
    return LeaderboardSettingsResponse.model_validate(current)


@router.post(
    "/leaderboard-settings",
    response_model=LeaderboardSettingsSaved,
    summary="Show or hide the public leaderboard",
)
async def save_leaderboard_settings(
    data: LeaderboardSettingsUpdate,
    db: AsyncSession = Depends(get_db),
) -> LeaderboardSettingsSaved:
    service = LeaderboardService(db)
    current = await service.update_settings(data.visible)
    return LeaderboardSettingsSaved(data=LeaderboardSettingsResponse.model_validate(current))


@router.post(
    "/recalculate-points",
    response_model=RecalculateResponse,
    summary="Recalculate every participant's points",
)
async def recalculate_points(
    db: AsyncSession = Depends(get_db),
) -> RecalculateResponse:
    service = ScoringService(db)
    changes = await service.recalculate_all_points()
    return RecalculateResponse.model_validate(
        {"users_updated": len(changes), "changes": changes}
    )


@router.post(
    "/assign-top-ranks",
    response_model=AssignTopRanksResponse,
    summary="Assign manual ranks to the top participants",
)
async def assign_top_ranks(
    data: AssignTopRanksRequest,
    db: AsyncSession = Depends(get_db),
) -> AssignTopRanksResponse:
    service = RankService(db)
    assigned = await service.assign_top_ranks(data.top_count)
    return AssignTopRanksResponse.model_validate({"assigned": assigned})


@router.post(
    "/refresh-stats",
    status_code=status.HTTP_202_ACCEPTED,
    summary="Queue a GitHub re-sync of every participant",
)
async def refresh_stats() -> dict:
    """Re-sync stored participants with the service token in the background."""
    from skillfest.workers.tasks.sync_tasks import refresh_all_users

    task = refresh_all_users.delay()
    return {"message": "Refresh queued", "task_id": task.id}
