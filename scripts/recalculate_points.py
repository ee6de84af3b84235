#!/usr/bin/env python
"""Recalculate every participant's points from their stored pull request counts."""

import asyncio

from skillfest.core.config import settings
from skillfest.db.database import create_worker_session_maker
from skillfest.services.scoring_service import ScoringService


async def recalculate_all_points() -> None:
    print("=" * 60)
    print("RECALCULATING SKILLFEST POINTS")
    print("=" * 60)
    print(f"  - Organization PRs: {settings.org_pr_points} pts each")
    print(f"  - Organization merged PRs: {settings.org_merged_pr_points} pts each")
    print(f"  - Other PRs: {settings.general_pr_points} pts each")
    print(f"  - Other merged PRs: {settings.general_merged_pr_points} pts each")
    print()

    session_maker = create_worker_session_maker()
    async with session_maker() as db:
        changes = await ScoringService(db).recalculate_all_points()
        await db.commit()

    for change in changes:
        print(f"  {change['login']}: {change['old_points']} -> {change['new_points']}")
    print(f"\n{len(changes)} users changed")


if __name__ == "__main__":
    asyncio.run(recalculate_all_points())
