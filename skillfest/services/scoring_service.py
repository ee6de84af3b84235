from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.core.config import settings
from skillfest.db.models.user import SkillFestUser

logger = structlog.get_logger()


class Level(str, Enum):
    NEWCOMER = "Newcomer"
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


# Highest band first
LEVEL_THRESHOLDS = (
    (settings.level_expert_min_points, Level.EXPERT),
    (settings.level_advanced_min_points, Level.ADVANCED),
    (settings.level_intermediate_min_points, Level.INTERMEDIATE),
    (settings.level_beginner_min_points, Level.BEGINNER),
)


@dataclass
class ContributionCounts:
    """Pull request counts a score is derived from."""

    total_prs: int = 0
    merged_prs: int = 0
    org_prs: int = 0
    org_merged_prs: int = 0
    contributions: int = 0

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ContributionCounts":
        """Build from a camelCase or snake_case mapping; missing keys count as 0."""

        def pick(*keys: str) -> int:
            for key in keys:
                value = data.get(key)
                if value is not None:
                    return int(value)
            return 0

        return cls(
            total_prs=pick("total_prs", "totalPRs"),
            merged_prs=pick("merged_prs", "mergedPRs"),
            org_prs=pick("org_prs", "orgPRs"),
            org_merged_prs=pick("org_merged_prs", "orgMergedPRs"),
            contributions=pick("contributions"),
        )

    @classmethod
    def from_user(cls, user: SkillFestUser) -> "ContributionCounts":
        return cls(
            total_prs=user.total_prs or 0,
            merged_prs=user.merged_prs or 0,
            org_prs=user.org_prs or 0,
            org_merged_prs=user.org_merged_prs or 0,
            contributions=user.contributions or 0,
        )


def calculate_points(counts: ContributionCounts | Mapping[str, Any]) -> int:
    """Score pull requests, weighting organization PRs above personal ones.

    PRs outside the organization are whatever remains of the totals once the
    organization counts are taken out, floored at zero.
    """
    if not isinstance(counts, ContributionCounts):
        counts = ContributionCounts.from_mapping(counts)

    general_prs = max(0, counts.total_prs - counts.org_prs)
    general_merged_prs = max(0, counts.merged_prs - counts.org_merged_prs)

    return (
        counts.org_prs * settings.org_pr_points
        + counts.org_merged_prs * settings.org_merged_pr_points
        + general_prs * settings.general_pr_points
        + general_merged_prs * settings.general_merged_pr_points
    )


def get_contribution_level(points: int) -> str:
    """Map a score onto its level band."""
    for minimum, level in LEVEL_THRESHOLDS:
        if points >= minimum:
            return level.value
    return Level.NEWCOMER.value


class ScoringService:
    """Service for recomputing stored scores."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def recalculate_all_points(self) -> list[dict]:
        """Recompute points and level for every stored user from their counts."""
        result = await self.db.execute(select(SkillFestUser).order_by(SkillFestUser.id))
        users = list(result.scalars().all())

        changes = []
        for user in users:
            points = calculate_points(ContributionCounts.from_user(user))
            level = get_contribution_level(points)
            if points != user.points or level != user.level:
                changes.append(
                    {"login": user.login, "old_points": user.points, "new_points": points}
                )
            user.points = points
            user.level = level

        await self.db.flush()
        logger.info("Points recalculated", users=len(users), changed=len(changes))
        return changes
