from skillfest.services.application_service import ApplicationService
from skillfest.services.github_service import GitHubService
from skillfest.services.issue_service import IssueService
from skillfest.services.leaderboard_service import LeaderboardService
from skillfest.services.rank_service import RankService
from skillfest.services.scoring_service import ScoringService
from skillfest.services.user_service import UserService

__all__ = [
    "ApplicationService",
    "GitHubService",
    "IssueService",
    "LeaderboardService",
    "RankService",
    "ScoringService",
    "UserService",
]
