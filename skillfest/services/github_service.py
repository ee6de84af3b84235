import asyncio
from dataclasses import dataclass, field

import httpx
import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from skillfest.core.config import settings
from skillfest.services.scoring_service import ContributionCounts

logger = structlog.get_logger()


@dataclass
class PullRequestInfo:
    id: int
    title: str
    url: str
    state: str
    created_at: str | None
    merged_at: str | None = None
    is_org: bool = False


@dataclass
class ActivitySnapshot:
    """Everything a sync learns about one user."""

    login: str
    counts: ContributionCounts
    pull_requests: list[PullRequestInfo] = field(default_factory=list)


class GitHubService:
    """Service for interacting with the GitHub API."""

    def __init__(
        self,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = settings.github_api_base_url
        self.org = settings.github_org
        self.headers = {
            "Authorization": f"Bearer {token or settings.github_token}",
            "Accept": "application/vnd.github.v3+json",
            "Cache-Control": "no-cache",
        }
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            transport=self._transport,
        )

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    async def _get(self, path: str, params: dict | None = None) -> httpx.Response:
        async with self._client() as client:
            return await client.get(path, params=params)

    async def get_authenticated_user(self) -> dict:
        """Fetch the profile the token belongs to."""
        response = await self._get("/user")
        response.raise_for_status()
        return response.json()

    async def get_rate_limit(self) -> dict:
        """Check current rate limit status."""
        response = await self._get("/rate_limit")
        response.raise_for_status()
        return response.json()

    async def rate_limit_low(self) -> bool:
        """True when remaining core requests are inside the reserve buffer."""
        try:
            data = await self.get_rate_limit()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Rate limit check failed", error=str(e))
            return False
        remaining = data.get("resources", {}).get("core", {}).get("remaining")
        if remaining is None:
            remaining = data.get("rate", {}).get("remaining", 0)
        return remaining < settings.github_rate_limit_buffer

    async def search_pull_requests(self, query: str, per_page: int = 100) -> dict | None:
        """Run an issue search restricted to pull requests.

        Returns None when the search fails or GitHub rejects it.
        """
        try:
            response = await self._get(
                "/search/issues",
                params={"q": f"type:pr {query}", "per_page": per_page},
            )
            if response.status_code != 200:
                logger.warning(
                    "Pull request search failed", query=query, status=response.status_code
                )
                return None
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Pull request search failed", query=query, error=str(e))
            return None

    async def count_pull_requests(self, query: str) -> int:
        result = await self.search_pull_requests(query, per_page=1)
        if result is None:
            return 0
        return result.get("total_count", 0)

    async def get_org_repos(self) -> list[dict]:
        """List every repository in the organization."""
        response = await self._get(
            f"/orgs/{self.org}/repos",
            params={"type": "all", "per_page": 100},
        )
        response.raise_for_status()
        return response.json()

    async def get_contributor_stats(self, repo: str) -> list[dict] | None:
        """Fetch per-contributor commit statistics for an org repository.

        GitHub answers 202 while the statistics are still being computed; that
        and any other non-200 answer yield None.
        """
        response = await self._get(f"/repos/{self.org}/{repo}/stats/contributors")
        if response.status_code == 202:
            logger.info("GitHub is computing statistics", repo=repo)
            return None
        if response.status_code != 200:
            logger.warning("Failed to fetch stats", repo=repo, status=response.status_code)
            return None
        try:
            stats = response.json()
        except ValueError:
            logger.warning("Malformed stats response", repo=repo)
            return None
        if not isinstance(stats, list):
            logger.warning("Unexpected stats format", repo=repo)
            return None
        return stats

    async def get_open_issues(self, repo: str) -> list[dict]:
        """Open issues for one org repository, newest first; failures yield []."""
        try:
            response = await self._get(
                f"/repos/{self.org}/{repo}/issues",
                params={"state": "open", "per_page": 100, "sort": "created", "direction": "desc"},
            )
        except httpx.HTTPError as e:
            logger.error("Error fetching issues", repo=repo, error=str(e))
            return []
        if response.status_code != 200:
            logger.warning("Failed to fetch issues", repo=repo, status=response.status_code)
            return []

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Malformed issues response", repo=repo)
            return []

        issues = []
        for issue in payload:
            if "pull_request" in issue:
                continue
            issues.append(
                {
                    "id": issue["id"],
                    "title": issue["title"],
                    "html_url": issue["html_url"],
                    "repository": {"name": repo},
                    "labels": [
                        {"name": label.get("name"), "color": label.get("color")}
                        for label in issue.get("labels", [])
                    ],
                }
            )
        return issues

    async def get_all_open_issues(self) -> list[dict]:
        """Open issues across every org repository."""
        repos = await self.get_org_repos()
        results = await asyncio.gather(*(self.get_open_issues(repo["name"]) for repo in repos))
        issues = [issue for repo_issues in results for issue in repo_issues]
        logger.info("Open issues fetched", repos=len(repos), issues=len(issues))
        return issues

    async def count_contributions(self, login: str) -> int:
        """Sum commit totals for a user across org repositories.

        A repository whose statistics cannot be read is skipped.
        """
        try:
            repos = await self.get_org_repos()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Failed to list organization repositories", error=str(e))
            return 0

        total = 0
        for repo in repos:
            name = repo["name"]
            try:
                stats = await self.get_contributor_stats(name)
            except httpx.HTTPError as e:
                logger.error("Error fetching stats", repo=name, error=str(e))
                continue
            if not stats:
                continue
            for entry in stats:
                author = entry.get("author") or {}
                if author.get("login") == login:
                    total += entry.get("total", 0)
                    break
        return total

    def is_org_repository(self, repository_url: str) -> bool:
        return f"/repos/{self.org}/" in repository_url

    async def get_pull_request_details(self, login: str) -> list[PullRequestInfo]:
        """Merged organization PRs followed by all open PRs."""
        details: list[PullRequestInfo] = []

        merged = await self.search_pull_requests(f"author:{login} org:{self.org} is:merged")
        for item in (merged or {}).get("items", []):
            details.append(
                PullRequestInfo(
                    id=item["id"],
                    title=item["title"],
                    url=item["html_url"],
                    state="merged",
                    created_at=item.get("created_at"),
                    # The search API has no merged_at; closed_at is the merge time
                    merged_at=item.get("closed_at"),
                    is_org=self.is_org_repository(item.get("repository_url", "")),
                )
            )

        opened = await self.search_pull_requests(f"author:{login} is:open")
        for item in (opened or {}).get("items", []):
            details.append(
                PullRequestInfo(
                    id=item["id"],
                    title=item["title"],
                    url=item["html_url"],
                    state="open",
                    created_at=item.get("created_at"),
                    is_org=self.is_org_repository(item.get("repository_url", "")),
                )
            )

        return details

    async def collect_activity(self, login: str) -> ActivitySnapshot:
        """Count a user's pull requests and contributions and list their PRs."""
        org = self.org
        org_prs = await self.count_pull_requests(f"author:{login} org:{org}")
        total_prs = await self.count_pull_requests(f"author:{login}")
        org_merged_prs = await self.count_pull_requests(f"author:{login} org:{org} is:merged")
        merged_prs = await self.count_pull_requests(f"author:{login} is:merged")
        contributions = await self.count_contributions(login)

        logger.info(
            "GitHub activity collected",
            login=login,
            total_prs=total_prs,
            merged_prs=merged_prs,
            org_prs=org_prs,
            org_merged_prs=org_merged_prs,
            contributions=contributions,
        )

        return ActivitySnapshot(
            login=login,
            counts=ContributionCounts(
                total_prs=total_prs,
                merged_prs=merged_prs,
                org_prs=org_prs,
                org_merged_prs=org_merged_prs,
                contributions=contributions,
            ),
            pull_requests=await self.get_pull_request_details(login),
        )
