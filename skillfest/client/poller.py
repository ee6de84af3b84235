import asyncio

import httpx
import structlog

from skillfest.client.api_client import SkillFestClient
from skillfest.client.local_store import IssueCache
from skillfest.core.config import settings

logger = structlog.get_logger()


class IssuePoller:
    """Keep the open-issue list current while a session is active."""

    def __init__(
        self,
        client: SkillFestClient,
        cache: IssueCache,
        interval: float | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.interval = settings.issue_poll_interval_seconds if interval is None else interval
        self.issues: list[dict] = []
        self._task: asyncio.Task | None = None

    async def fetch_issues(self, force: bool = False) -> list[dict]:
        """Serve the cache while fresh, otherwise ask the API.

        A failed request keeps the last known list.
        """
        if not force:
            cached = self.cache.get_fresh()
            if cached is not None:
                self.issues = cached
                return self.issues

        try:
            self.issues = await self.client.get_open_issues()
        except httpx.HTTPError as e:
            logger.error("Error fetching issues", error=str(e))
            return self.issues

        self.cache.put(self.issues)
        logger.info("Issues refreshed", issues=len(self.issues))
        return self.issues

    async def _run(self) -> None:
        await self.fetch_issues()
        while True:
            await asyncio.sleep(self.interval)
            await self.fetch_issues(force=True)

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
