from datetime import datetime

import httpx
import structlog

logger = structlog.get_logger()


class SkillFestClient:
    """HTTP client for the SkillFest API, authenticated as an administrator."""

    def __init__(
        self,
        base_url: str,
        admin_password: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/api/v1"
        self.headers = {"Accept": "application/json"}
        if admin_password is not None:
            self.headers["X-Admin-Password"] = admin_password
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.headers,
            transport=self._transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> dict | list:
        async with self._client() as client:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
            return response.json()

    async def list_users(self) -> list[dict]:
        return await self._request("GET", "/users")

    async def get_leaderboard(self) -> dict:
        return await self._request("GET", "/leaderboard")

    async def get_open_issues(self) -> list[dict]:
        return await self._request("GET", "/skillfest/issues")

    async def get_admin_users(
        self,
        search: str | None = None,
        level: str | None = None,
        sort_by: str = "points",
        direction: str = "desc",
    ) -> list[dict]:
        params = {"sort_by": sort_by, "direction": direction}
        if search:
            params["search"] = search
        if level:
            params["level"] = level
        return await self._request("GET", "/admin/users", params=params)

    async def get_user_details(self, username: str, since: datetime | None = None) -> dict:
        params = {"since": since.isoformat()} if since else None
        return await self._request("GET", f"/admin/users/{username}", params=params)

    async def update_user_rank(
        self,
        username: str,
        rank: int | None,
        points: int | None = None,
    ) -> dict:
        body: dict = {"username": username, "rank": rank}
        if points is not None:
            body["points"] = points
        return await self._request("POST", "/admin/update-user-rank", json=body)

    async def set_user_visibility(self, username: str, hidden: bool) -> dict:
        return await self._request(
            "POST", f"/admin/users/{username}/visibility", json={"hidden": hidden}
        )

    async def get_leaderboard_settings(self) -> dict:
        return await self._request("GET", "/admin/leaderboard-settings")

    async def save_leaderboard_settings(self, visible: bool) -> dict:
        return await self._request(
            "POST", "/admin/leaderboard-settings", json={"visible": visible}
        )

    async def recalculate_points(self) -> dict:
        return await self._request("POST", "/admin/recalculate-points")

    async def assign_top_ranks(self, top_count: int) -> dict:
        return await self._request(
            "POST", "/admin/assign-top-ranks", json={"topCount": top_count}
        )
