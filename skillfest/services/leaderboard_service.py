from datetime import UTC, datetime
from enum import Enum

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.db.models.override import LeaderboardSettings
from skillfest.services.user_service import UserService

logger = structlog.get_logger()

SETTINGS_ID = 1


class SortOption(str, Enum):
    POINTS = "points"
    PRS = "prs"
    MERGED_PRS = "mergedPrs"
    CONTRIBUTIONS = "contributions"
    DATE = "date"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


def _last_active_key(user: dict) -> float:
    last_active = user.get("last_active")
    return last_active.timestamp() if last_active else 0.0


_SORT_KEYS = {
    SortOption.POINTS: lambda u: u["stats"].get("points") or 0,
    SortOption.PRS: lambda u: u["stats"].get("total_prs") or 0,
    SortOption.MERGED_PRS: lambda u: u["stats"].get("merged_prs") or 0,
    SortOption.CONTRIBUTIONS: lambda u: u["stats"].get("contributions") or 0,
    SortOption.DATE: _last_active_key,
}


def sort_users(
    users: list[dict],
    sort_by: SortOption = SortOption.POINTS,
    direction: SortDirection = SortDirection.DESC,
) -> list[dict]:
    """Stable sort; users with equal keys keep their input order."""
    return sorted(
        users,
        key=_SORT_KEYS[SortOption(sort_by)],
        reverse=SortDirection(direction) == SortDirection.DESC,
    )


def rank_by_points(users: list[dict]) -> list[dict]:
    """Attach auto_rank (1-based position by descending points) to copies of users."""
    return [
        {**user, "auto_rank": position}
        for position, user in enumerate(sort_users(users), start=1)
    ]


def filter_users(users: list[dict], search: str | None = None, level: str | None = None) -> list[dict]:
    needle = search.lower() if search else None
    return [
        user
        for user in users
        if user.get("login")
        and (needle is None or needle in user["login"].lower())
        and (level is None or user["stats"].get("level") == level)
    ]


def build_admin_table(
    users: list[dict],
    search: str | None = None,
    level: str | None = None,
    sort_by: SortOption = SortOption.POINTS,
    direction: SortDirection = SortDirection.DESC,
) -> list[dict]:
    """Rows for the admin table.

    Auto rank always comes from the points order over every user; the chosen
    sort only changes row order. Manual rank rides along as its own column.
    """
    ranked = rank_by_points(users)
    return sort_users(filter_users(ranked, search, level), sort_by, direction)


def build_public_leaderboard(users: list[dict], visible: bool) -> dict:
    """The public view: locked when hidden, otherwise visible users by points."""
    if not visible:
        return {"visible": False, "entries": []}

    shown = [user for user in users if not user["stats"].get("hidden")]
    entries = []
    for user in rank_by_points(shown):
        manual_rank = user["stats"].get("manual_rank")
        entries.append(
            {
                "rank": manual_rank or user["auto_rank"],
                "auto_rank": user["auto_rank"],
                "manual_rank": manual_rank,
                "login": user["login"],
                "avatar_url": user.get("avatar_url"),
                "html_url": f"https://github.com/{user['login']}",
                "points": user["stats"].get("points") or 0,
                "level": user["stats"].get("level") or "Newcomer",
            }
        )
    return {"visible": True, "entries": entries}


class LeaderboardService:
    """Service for the leaderboard views and their visibility switch."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_settings(self) -> LeaderboardSettings:
        """Load the settings row, creating the visible default on first use."""
        result = await self.db.execute(
            select(LeaderboardSettings).where(LeaderboardSettings.id == SETTINGS_ID)
        )
        current = result.scalar_one_or_none()
        if current is None:
            current = LeaderboardSettings(
                id=SETTINGS_ID,
                visible=True,
                last_updated=datetime.now(UTC),
            )
            self.db.add(current)
            await self.db.flush()
            logger.info("Initialized leaderboard settings")
        return current

    async def update_settings(self, visible: bool) -> LeaderboardSettings:
        current = await self.get_settings()
        current.visible = visible
        current.last_updated = datetime.now(UTC)
        await self.db.flush()
        logger.info("Leaderboard settings saved", visible=visible)
        return current

    async def get_public_leaderboard(self) -> dict:
        current = await self.get_settings()
        if not current.visible:
            return build_public_leaderboard([], visible=False)
        users = await UserService(self.db).list_users()
        return build_public_leaderboard(users, visible=True)

    async def get_admin_table(
        self,
        search: str | None = None,
        level: str | None = None,
        sort_by: SortOption = SortOption.POINTS,
        direction: SortDirection = SortDirection.DESC,
    ) -> list[dict]:
        users = await UserService(self.db).list_users()
        return build_admin_table(users, search, level, sort_by, direction)
