import httpx
import pytest
from tenacity import wait_none

from skillfest.services.github_service import GitHubService
from skillfest.services.issue_service import IssueService

COUNTS = {
    "org:nst-sdc": 4,
    "": 10,
    "org:nst-sdc is:merged": 3,
    "is:merged": 6,
    "is:open": 2,
}


def make_service(handler) -> GitHubService:
    return GitHubService(token="user-token", transport=httpx.MockTransport(handler))


async def test_collect_activity_counts(github_handler) -> None:
    handler = github_handler(
        counts=COUNTS,
        repos=["site", "bot"],
        stats={
            "site": [
                {"author": {"login": "bob"}, "total": 50},
                {"author": {"login": "alice"}, "total": 7},
            ],
            "bot": [{"author": {"login": "alice"}, "total": 5}],
        },
    )
    snapshot = await make_service(handler).collect_activity("alice")

    assert snapshot.login == "alice"
    assert snapshot.counts.total_prs == 10
    assert snapshot.counts.merged_prs == 6
    assert snapshot.counts.org_prs == 4
    assert snapshot.counts.org_merged_prs == 3
    assert snapshot.counts.contributions == 12


async def test_failed_search_counts_as_zero(github_handler) -> None:
    handler = github_handler(counts={"": 5})
    service = make_service(handler)

    assert await service.count_pull_requests("author:alice") == 5
    assert await service.count_pull_requests("author:alice is:merged") == 0


async def test_contributions_skip_unavailable_repositories(github_handler) -> None:
    handler = github_handler(
        repos=["computing", "broken", "ok", "missing-author"],
        stats={
            "computing": 202,
            "broken": 500,
            "ok": [{"author": {"login": "alice"}, "total": 9}],
            "missing-author": [{"author": None, "total": 100}],
        },
    )
    assert await make_service(handler).count_contributions("alice") == 9


async def test_pull_request_details(github_handler) -> None:
    handler = github_handler(
        counts=COUNTS,
        merged_items=[
            {
                "id": 11,
                "title": "Fix navbar",
                "html_url": "https://github.com/nst-sdc/site/pull/3",
                "repository_url": "https://api.github.com/repos/nst-sdc/site",
                "created_at": "2025-01-02T10:00:00Z",
                "closed_at": "2025-01-03T10:00:00Z",
            }
        ],
        open_items=[
            {
                "id": 12,
                "title": "Add docs",
                "html_url": "https://github.com/alice/notes/pull/1",
                "repository_url": "https://api.github.com/repos/alice/notes",
                "created_at": "2025-01-05T10:00:00Z",
            }
        ],
    )
    details = await make_service(handler).get_pull_request_details("alice")

    assert [(pr.id, pr.state, pr.is_org) for pr in details] == [
        (11, "merged", True),
        (12, "open", False),
    ]
    assert details[0].merged_at == "2025-01-03T10:00:00Z"
    assert details[1].merged_at is None


async def test_open_issues_exclude_pull_requests(github_handler) -> None:
    handler = github_handler(
        repos=["site", "gone"],
        issues={
            "site": [
                {
                    "id": 1,
                    "title": "Dark mode",
                    "html_url": "https://github.com/nst-sdc/site/issues/1",
                    "labels": [{"name": "good first issue", "color": "7057ff"}],
                },
                {
                    "id": 2,
                    "title": "A pull request",
                    "html_url": "https://github.com/nst-sdc/site/pull/2",
                    "pull_request": {},
                },
            ]
        },
    )
    issues = await make_service(handler).get_all_open_issues()

    assert len(issues) == 1
    assert issues[0]["repository"] == {"name": "site"}
    assert issues[0]["labels"] == [{"name": "good first issue", "color": "7057ff"}]


async def test_rate_limit_low(github_handler) -> None:
    assert await make_service(github_handler(remaining=10)).rate_limit_low() is True
    assert await make_service(github_handler(remaining=4000)).rate_limit_low() is False


async def test_bearer_token_is_sent() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        return httpx.Response(200, json={"login": "alice"})

    profile = await make_service(handler).get_authenticated_user()

    assert profile["login"] == "alice"
    assert seen["auth"] == "Bearer user-token"


@pytest.fixture
def no_retry_wait(monkeypatch):
    monkeypatch.setattr(GitHubService._get.retry, "wait", wait_none())


def failing_searches(handler, qualifier: str, response: httpx.Response | None = None):
    """Wrap a fake GitHub so searches ending in ``qualifier`` break."""

    def wrapped(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/search/issues" and request.url.params["q"].endswith(qualifier):
            if response is None:
                raise httpx.ConnectError("connection refused", request=request)
            return response
        return handler(request)

    return wrapped


async def test_unreachable_search_counts_as_zero(github_handler, no_retry_wait) -> None:
    handler = failing_searches(github_handler(counts=COUNTS), "is:merged")

    snapshot = await make_service(handler).collect_activity("alice")

    assert snapshot.counts.total_prs == 10
    assert snapshot.counts.org_prs == 4
    assert snapshot.counts.merged_prs == 0
    assert snapshot.counts.org_merged_prs == 0
    assert [pr.state for pr in snapshot.pull_requests] == []


async def test_malformed_search_body_counts_as_zero(github_handler) -> None:
    garbage = httpx.Response(200, content=b"<html>oops", headers={"Content-Type": "text/html"})
    handler = failing_searches(github_handler(counts=COUNTS), "author:alice", garbage)

    snapshot = await make_service(handler).collect_activity("alice")

    assert snapshot.counts.total_prs == 0
    assert snapshot.counts.merged_prs == 6
    assert snapshot.counts.org_prs == 4


async def test_malformed_stats_and_issues_are_skipped(github_handler) -> None:
    base = github_handler(
        repos=["site", "bot"],
        stats={"bot": [{"author": {"login": "alice"}, "total": 3}]},
        issues={"bot": []},
    )

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.startswith("/repos/nst-sdc/site/"):
            return httpx.Response(200, content=b"not json")
        return base(request)

    service = make_service(handler)

    assert await service.count_contributions("alice") == 3
    assert await service.get_all_open_issues() == []


async def test_issue_listing_survives_malformed_repo_list() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>maintenance</html>")

    IssueService.reset_cache()
    service = IssueService(make_service(handler))

    assert await service.get_open_issues() == []
    assert await make_service(handler).count_contributions("alice") == 0
