from dataclasses import dataclass, field

import httpx
import structlog

from skillfest.client.api_client import SkillFestClient
from skillfest.client.debounce import KeyedDebouncer
from skillfest.client.local_store import LocalStore, ReviewMarks
from skillfest.core.config import settings

logger = structlog.get_logger()


@dataclass
class StatusMessage:
    type: str  # "success" or "error"
    text: str


@dataclass
class ClearRanksResult:
    cleared: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.cleared)


class AdminConsole:
    """Administrator workflow over the SkillFest API.

    Holds the loaded participant list and the latest status message. Every
    failed call is logged and reported through the status message; nothing is
    retried automatically.
    """

    def __init__(
        self,
        client: SkillFestClient,
        store: LocalStore,
        debounce_seconds: float | None = None,
    ) -> None:
        self.client = client
        self.review_marks = ReviewMarks(store)
        self.users: list[dict] = []
        self.status: StatusMessage | None = None
        delay = settings.points_debounce_seconds if debounce_seconds is None else debounce_seconds
        self._points_debouncer = KeyedDebouncer(delay, self._write_points)

    def _report(self, type_: str, text: str) -> None:
        self.status = StatusMessage(type=type_, text=text)

    async def load_users(self) -> list[dict]:
        try:
            self.users = await self.client.list_users()
        except httpx.HTTPError as e:
            logger.error("Error fetching users", error=str(e))
            self._report("error", "Failed to load users")
        return self.users

    def _apply_local(self, username: str, **stats) -> None:
        for user in self.users:
            if user.get("login") == username:
                user.setdefault("stats", {}).update(stats)

    async def update_user_rank(
        self,
        username: str,
        rank: int | None,
        points: int | None = None,
    ) -> bool:
        try:
            await self.client.update_user_rank(username, rank, points)
        except httpx.HTTPError as e:
            logger.error("Error updating user rank", username=username, error=str(e))
            self._report("error", "Failed to update rank")
            return False

        changes = {"manualRank": rank}
        if points is not None:
            changes["points"] = points
        self._apply_local(username, **changes)

        text = f"Updated {username}: " + (f"rank {rank}" if rank else "cleared rank")
        if points is not None:
            text += f", points {points}"
        self._report("success", text)
        return True

    async def _write_points(self, username: str, points: int) -> None:
        await self.update_user_rank(username, None, points)

    def edit_points(self, username: str, points: int) -> None:
        """Record a points edit; bursts per user collapse into one write."""
        self._apply_local(username, points=points)
        self._points_debouncer(username, username, points)

    async def flush_pending_edits(self) -> None:
        await self._points_debouncer.flush()

    async def clear_all_manual_ranks(self) -> ClearRanksResult:
        """Clear every loaded user's manual rank, one request at a time.

        There is no batch atomicity: a failure leaves earlier users cleared.
        """
        result = ClearRanksResult()
        targets = [u["login"] for u in self.users if (u.get("stats") or {}).get("manualRank")]
        if not targets:
            self._report("success", "No manual ranks to clear")
            return result

        for username in targets:
            if await self.update_user_rank(username, None):
                result.cleared.append(username)
            else:
                result.failed.append(username)

        if result.failed:
            self._report(
                "error",
                f"Cleared manual ranks for {result.count} users, {len(result.failed)} failed",
            )
        else:
            self._report("success", f"Cleared manual ranks for {result.count} users")
        return result

    async def toggle_user_visibility(self, username: str, hidden: bool) -> bool:
        try:
            await self.client.set_user_visibility(username, hidden)
        except httpx.HTTPError as e:
            logger.error("Error updating user visibility", username=username, error=str(e))
            self._report("error", "Failed to update visibility")
            return False
        self._apply_local(username, hidden=hidden)
        logger.info("User visibility updated", username=username, hidden=hidden)
        return True

    async def assign_top_ranks(self, top_count: int) -> bool:
        try:
            await self.client.assign_top_ranks(top_count)
        except httpx.HTTPError as e:
            logger.error("Error assigning top ranks", error=str(e))
            self._report("error", f"Failed to assign top {top_count} ranks")
            return False
        await self.load_users()
        self._report("success", f"Assigned top {top_count} ranks successfully!")
        return True

    async def recalculate_points(self) -> bool:
        try:
            data = await self.client.recalculate_points()
        except httpx.HTTPError as e:
            logger.error("Error recalculating points", error=str(e))
            self._report("error", "Failed to recalculate points")
            return False
        await self.load_users()
        self._report("success", f"Recalculated points, {data.get('users_updated', 0)} changed")
        return True

    async def save_leaderboard_settings(self, visible: bool) -> bool:
        try:
            await self.client.save_leaderboard_settings(visible)
        except httpx.HTTPError as e:
            logger.error("Error saving settings", error=str(e))
            self._report("error", "Failed to save settings")
            return False
        self._report("success", "Leaderboard settings saved successfully!")
        return True

    def mark_pr(self, pr_id: int, status: str) -> str | None:
        """Mark a pull request reviewed or invalid; kept on this machine only."""
        return self.review_marks.mark(pr_id, status)
