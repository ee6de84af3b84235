import contextlib
from datetime import UTC, datetime

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.db.models.override import ManualRank
from skillfest.db.models.pull_request import PullRequest
from skillfest.db.models.user import SkillFestUser
from skillfest.services.github_service import ActivitySnapshot, GitHubService, PullRequestInfo
from skillfest.services.scoring_service import calculate_points, get_contribution_level

logger = structlog.get_logger()


def _parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    with contextlib.suppress(ValueError, TypeError):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return None


def format_user(user: SkillFestUser, override: ManualRank | None = None) -> dict:
    """Flatten a user and their override into the shape the API returns."""
    return {
        "login": user.login,
        "avatar_url": user.avatar_url,
        "last_active": user.last_active,
        "stats": {
            "total_prs": user.total_prs,
            "merged_prs": user.merged_prs,
            "contributions": user.contributions,
            "org_prs": user.org_prs,
            "org_merged_prs": user.org_merged_prs,
            "points": user.points or 0,
            "level": user.level or "Newcomer",
            "manual_rank": override.manual_rank if override else None,
            "hidden": override.hidden if override else False,
        },
    }


class UserService:
    """Service for participant records and their pull requests."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_user(self, login: str) -> SkillFestUser | None:
        result = await self.db.execute(select(SkillFestUser).where(SkillFestUser.login == login))
        return result.scalar_one_or_none()

    async def get_overrides(self) -> dict[str, ManualRank]:
        result = await self.db.execute(select(ManualRank))
        return {override.username: override for override in result.scalars().all()}

    async def list_users(self) -> list[dict]:
        """All users in store order with their overrides merged in."""
        result = await self.db.execute(select(SkillFestUser).order_by(SkillFestUser.id))
        overrides = await self.get_overrides()
        return [
            format_user(user, overrides.get(user.login))
            for user in result.scalars().all()
            if user.login
        ]

    async def save_activity(self, snapshot: ActivitySnapshot) -> SkillFestUser:
        """Score a snapshot and write it over the user's stored stats."""
        points = calculate_points(snapshot.counts)
        level = get_contribution_level(points)

        user = await self.get_user(snapshot.login)
        if not user:
            user = SkillFestUser(login=snapshot.login)
            self.db.add(user)

        user.total_prs = snapshot.counts.total_prs
        user.merged_prs = snapshot.counts.merged_prs
        user.org_prs = snapshot.counts.org_prs
        user.org_merged_prs = snapshot.counts.org_merged_prs
        user.contributions = snapshot.counts.contributions
        user.points = points
        user.level = level
        user.last_active = datetime.now(UTC)
        await self.db.flush()

        await self.store_pull_requests(user, snapshot.pull_requests)
        logger.info("User stats saved", login=user.login, points=points, level=level)
        return user

    async def store_pull_requests(
        self,
        user: SkillFestUser,
        pull_requests: list[PullRequestInfo],
    ) -> None:
        """Replace the stored pull request list for a user."""
        await self.db.execute(delete(PullRequest).where(PullRequest.user_id == user.id))
        for pr in pull_requests:
            self.db.add(
                PullRequest(
                    user_id=user.id,
                    github_id=pr.id,
                    title=pr.title,
                    url=pr.url,
                    state=pr.state,
                    opened_at=_parse_timestamp(pr.created_at),
                    merged_at=_parse_timestamp(pr.merged_at),
                    is_org=pr.is_org,
                )
            )
        await self.db.flush()
        logger.info("Pull requests stored", login=user.login, count=len(pull_requests))

    async def sync_user(self, github: GitHubService) -> SkillFestUser:
        """Pull the token owner's activity from GitHub and store it.

        Raises httpx.HTTPError when the token owner cannot be resolved.
        """
        profile = await github.get_authenticated_user()
        login = profile["login"]
        logger.info("GitHub user fetched", login=login)

        snapshot = await github.collect_activity(login)
        return await self.save_activity(snapshot)

    async def get_user_detail(self, login: str, since: datetime | None = None) -> dict | None:
        """A user with their stored pull requests, newest first.

        With ``since``, only pull requests opened at or after that time are listed.
        """
        user = await self.get_user(login)
        if not user:
            return None

        query = select(PullRequest).where(PullRequest.user_id == user.id)
        if since is not None:
            query = query.where(PullRequest.opened_at >= since)
        result = await self.db.execute(
            query.order_by(PullRequest.opened_at.desc(), PullRequest.id)
        )
        return {
            "login": user.login,
            "avatar_url": user.avatar_url,
            "pull_requests": [
                {
                    "id": pr.github_id,
                    "title": pr.title,
                    "url": pr.url,
                    "state": pr.state,
                    "created_at": pr.opened_at,
                    "merged_at": pr.merged_at,
                    "is_org": pr.is_org,
                }
                for pr in result.scalars().all()
            ],
        }
