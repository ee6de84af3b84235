"""Client-local persistence for the admin console.

A small JSON file holds what a browser would keep in local storage: the
open-issue cache and the administrator's pull request review marks. Nothing
here is ever sent to the server.
"""

import json
import time
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

ISSUES_CACHE_KEY = "issues-cache"
REVIEW_MARKS_KEY = "admin-reviewed-prs"

REVIEWED = "reviewed"
INVALID = "invalid"


class LocalStore:
    """String-keyed JSON document on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Local store unreadable, starting empty", path=str(self.path), error=str(e))
            return {}

    def _save(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class IssueCache:
    """Open issues with a freshness window."""

    def __init__(self, store: LocalStore, ttl_seconds: float = 300, clock=time.time) -> None:
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def get_fresh(self) -> list[dict] | None:
        entry = self.store.get(ISSUES_CACHE_KEY)
        if not entry:
            return None
        if self.clock() - entry.get("timestamp", 0) > self.ttl_seconds:
            return None
        return entry.get("issues", [])

    def put(self, issues: list[dict]) -> None:
        self.store.set(ISSUES_CACHE_KEY, {"timestamp": self.clock(), "issues": issues})


class ReviewMarks:
    """Per pull request review status; marking twice with the same status clears it."""

    def __init__(self, store: LocalStore) -> None:
        self.store = store

    def all(self) -> dict[int, str]:
        return {int(pr_id): status for pr_id, status in self.store.get(REVIEW_MARKS_KEY, {}).items()}

    def get(self, pr_id: int) -> str | None:
        return self.all().get(pr_id)

    def mark(self, pr_id: int, status: str) -> str | None:
        """Apply a mark and return the status now recorded for the PR."""
        if status not in (REVIEWED, INVALID):
            raise ValueError(f"Unknown review status: {status}")

        marks = self.all()
        if marks.get(pr_id) == status:
            del marks[pr_id]
            current = None
        else:
            marks[pr_id] = status
            current = status
        self.store.set(REVIEW_MARKS_KEY, {str(k): v for k, v in marks.items()})
        return current
