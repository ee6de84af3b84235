from datetime import UTC, datetime

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.db.models.override import ManualRank
from skillfest.db.models.user import SkillFestUser
from skillfest.services.scoring_service import get_contribution_level

logger = structlog.get_logger()


class RankService:
    """Service for administrator overrides of rank, points and visibility."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_override(self, username: str) -> ManualRank | None:
        result = await self.db.execute(select(ManualRank).where(ManualRank.username == username))
        return result.scalar_one_or_none()

    async def _get_or_create_override(self, username: str) -> ManualRank:
        override = await self.get_override(username)
        if override is None:
            override = ManualRank(username=username, manual_rank=None, hidden=False)
            self.db.add(override)
        return override

    async def update_user_rank(
        self,
        username: str,
        rank: int | None,
        points: int | None = None,
    ) -> ManualRank | None:
        """Set or clear a manual rank, optionally overwriting stored points.

        Returns None when points are given for a user that does not exist.
        """
        if points is not None:
            result = await self.db.execute(
                select(SkillFestUser).where(SkillFestUser.login == username)
            )
            user = result.scalar_one_or_none()
            if user is None:
                return None
            user.points = points
            user.level = get_contribution_level(points)

        override = await self._get_or_create_override(username)
        override.manual_rank = rank
        override.rank_updated_at = datetime.now(UTC)
        await self.db.flush()

        logger.info("User rank updated", username=username, rank=rank, points=points)
        return override

    async def toggle_user_visibility(self, username: str, hidden: bool) -> ManualRank:
        """Set the hidden flag, keeping whatever else the override record holds."""
        override = await self._get_or_create_override(username)
        override.hidden = hidden
        override.rank_updated_at = datetime.now(UTC)
        await self.db.flush()

        logger.info("User visibility updated", username=username, hidden=hidden)
        return override

    async def assign_top_ranks(self, top_count: int) -> list[dict]:
        """Give the top users by points manual ranks 1..top_count.

        Equal points keep store order (earliest registered first).
        """
        result = await self.db.execute(
            select(SkillFestUser)
            .order_by(SkillFestUser.points.desc(), SkillFestUser.id)
            .limit(top_count)
        )
        assigned = []
        for rank, user in enumerate(result.scalars().all(), start=1):
            override = await self._get_or_create_override(user.login)
            override.manual_rank = rank
            override.rank_updated_at = datetime.now(UTC)
            assigned.append({"login": user.login, "rank": rank, "points": user.points})

        await self.db.flush()
        logger.info("Top ranks assigned", requested=top_count, assigned=len(assigned))
        return assigned
