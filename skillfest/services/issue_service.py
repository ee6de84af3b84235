import httpx
import structlog

from skillfest.services.github_service import GitHubService

logger = structlog.get_logger()


class IssueService:
    """Open organization issues, falling back to the last listing when rate limited."""

    # Last successful listing, shared across requests
    last_issues: list[dict] | None = None

    def __init__(self, github: GitHubService | None = None) -> None:
        self.github = github or GitHubService()

    @classmethod
    def reset_cache(cls) -> None:
        cls.last_issues = None

    async def get_open_issues(self) -> list[dict]:
        cached = IssueService.last_issues

        if cached is not None and await self.github.rate_limit_low():
            logger.info("Rate limit low, serving cached issues", issues=len(cached))
            return cached

        try:
            issues = await self.github.get_all_open_issues()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching issues", error=str(e))
            return cached or []

        IssueService.last_issues = issues
        return issues
