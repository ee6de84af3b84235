import secrets

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from skillfest.core.config import settings
from skillfest.services.github_service import GitHubService
from skillfest.services.issue_service import IssueService

github_bearer = HTTPBearer(auto_error=False, description="GitHub OAuth access token")


async def require_admin(x_admin_password: str | None = Header(None)) -> None:
    """Gate admin routes behind the shared admin password."""
    if x_admin_password is None or not secrets.compare_digest(
        x_admin_password.encode(), settings.admin_password.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid password",
        )


async def get_user_github_service(
    credentials: HTTPAuthorizationCredentials | None = Depends(github_bearer),
) -> GitHubService:
    """GitHub client acting as the signed-in participant."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )
    return GitHubService(token=credentials.credentials)


async def get_issue_service() -> IssueService:
    return IssueService()
