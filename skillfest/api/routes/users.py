import httpx
import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.api.deps import get_user_github_service
from skillfest.api.schemas.user import (
    SyncPullRequestCounts,
    SyncResponse,
    SyncStats,
    UserResponse,
)
from skillfest.db import get_db
from skillfest.services.github_service import GitHubService
from skillfest.services.user_service import UserService

logger = structlog.get_logger()

router = APIRouter()


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List participants",
)
async def list_users(
    db: AsyncSession = Depends(get_db),
) -> list[UserResponse]:
    """Get every participant with their stats and overrides."""
    service = UserService(db)
    users = await service.list_users()
    return [UserResponse.model_validate(u) for u in users]


@router.post(
    "/sync",
    response_model=SyncResponse,
    summary="Sync the signed-in user's GitHub stats",
)
async def sync_current_user(
    github: GitHubService = Depends(get_user_github_service),
    db: AsyncSession = Depends(get_db),
) -> SyncResponse:
    """Fetch the token owner's pull request activity, score it and store it."""
    service = UserService(db)
    try:
        user = await service.sync_user(github)
    except (httpx.HTTPError, ValueError) as e:
        logger.error("User sync failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to fetch GitHub profile",
        ) from e

    return SyncResponse(
        stats=SyncStats(
            prs=SyncPullRequestCounts(
                total_prs=user.total_prs,
                merged_prs=user.merged_prs,
                org_prs=user.org_prs,
                org_merged_prs=user.org_merged_prs,
            ),
            contributions=user.contributions,
            points=user.points,
            level=user.level,
        )
    )
