from skillfest.api.schemas.application import (
    FresherApplicationCreate,
    FresherApplicationResponse,
)
from skillfest.api.schemas.issue import Issue
from skillfest.api.schemas.leaderboard import (
    LeaderboardEntry,
    LeaderboardResponse,
    LeaderboardSettingsResponse,
    LeaderboardSettingsUpdate,
)
from skillfest.api.schemas.rank import (
    AssignTopRanksRequest,
    ManualRankResponse,
    UpdateUserRankRequest,
    VisibilityUpdate,
)
from skillfest.api.schemas.user import AdminUserRow, UserDetail, UserResponse, UserStats

__all__ = [
    "FresherApplicationCreate",
    "FresherApplicationResponse",
    "Issue",
    "LeaderboardEntry",
    "LeaderboardResponse",
    "LeaderboardSettingsResponse",
    "LeaderboardSettingsUpdate",
    "AssignTopRanksRequest",
    "ManualRankResponse",
    "UpdateUserRankRequest",
    "VisibilityUpdate",
    "AdminUserRow",
    "UserDetail",
    "UserResponse",
    "UserStats",
]
