from skillfest.db.models.application import FresherApplication
from skillfest.db.models.base import Base
from skillfest.db.models.override import LeaderboardSettings, ManualRank
from skillfest.db.models.pull_request import PullRequest, PullRequestState
from skillfest.db.models.user import SkillFestUser

__all__ = [
    "Base",
    "SkillFestUser",
    "PullRequest",
    "PullRequestState",
    "ManualRank",
    "LeaderboardSettings",
    "FresherApplication",
]
