from skillfest.client.api_client import SkillFestClient
from skillfest.client.console import AdminConsole, ClearRanksResult, StatusMessage
from skillfest.client.debounce import KeyedDebouncer
from skillfest.client.local_store import IssueCache, LocalStore, ReviewMarks
from skillfest.client.poller import IssuePoller

__all__ = [
    "AdminConsole",
    "ClearRanksResult",
    "IssueCache",
    "IssuePoller",
    "KeyedDebouncer",
    "LocalStore",
    "ReviewMarks",
    "SkillFestClient",
    "StatusMessage",
]
