from fastapi import APIRouter, Depends

from skillfest.api.deps import get_issue_service
from skillfest.api.schemas.issue import Issue
from skillfest.services.issue_service import IssueService

router = APIRouter()


@router.get(
    "/issues",
    response_model=list[Issue],
    summary="List open challenge issues",
)
async def list_open_issues(
    service: IssueService = Depends(get_issue_service),
) -> list[Issue]:
    """Open issues across the organization's repositories."""
    issues = await service.get_open_issues()
    return [Issue.model_validate(i) for i in issues]
