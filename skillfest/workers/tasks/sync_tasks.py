import asyncio

import httpx
import structlog
from sqlalchemy import select

from skillfest.db.database import create_worker_session_maker
from skillfest.db.models.user import SkillFestUser
from skillfest.services.github_service import GitHubService
from skillfest.services.user_service import UserService
from skillfest.workers.celery_app import celery_app

logger = structlog.get_logger()


def run_async(coro):
    """Run async code in sync context."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


async def _refresh_users(logins: list[str] | None = None) -> dict:
    session_maker = create_worker_session_maker()
    github = GitHubService()

    async with session_maker() as db:
        if logins is None:
            result = await db.execute(select(SkillFestUser.login).order_by(SkillFestUser.id))
            logins = list(result.scalars().all())

        refreshed = []
        failed = []
        for login in logins:
            try:
                snapshot = await github.collect_activity(login)
                await UserService(db).save_activity(snapshot)
                await db.commit()
                refreshed.append(login)
            except (httpx.HTTPError, ValueError) as e:
                await db.rollback()
                logger.error("User refresh failed", login=login, error=str(e))
                failed.append(login)

    return {"status": "completed", "refreshed": refreshed, "failed": failed}


@celery_app.task
def refresh_user_stats(login: str) -> dict:
    """Re-sync one participant's GitHub stats with the service token."""
    logger.info("Refreshing user stats", login=login)
    return run_async(_refresh_users([login]))


@celery_app.task
def refresh_all_users() -> dict:
    """
    Re-sync every stored participant.

    Each user commits on its own; a failure for one user is logged and the
    rest continue.
    """
    logger.info("Starting refresh of all users")
    result = run_async(_refresh_users())
    logger.info(
        "User refresh finished",
        refreshed=len(result["refreshed"]),
        failed=len(result["failed"]),
    )
    return result
