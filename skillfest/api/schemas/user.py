from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserStats(BaseModel):
    total_prs: int = Field(0, alias="totalPRs")
    merged_prs: int = Field(0, alias="mergedPRs")
    contributions: int = 0
    org_prs: int = Field(0, alias="orgPRs")
    org_merged_prs: int = Field(0, alias="orgMergedPRs")
    points: int = 0
    level: str = "Newcomer"
    manual_rank: int | None = Field(None, alias="manualRank")
    hidden: bool = False

    model_config = ConfigDict(populate_by_name=True)


class UserResponse(BaseModel):
    login: str
    avatar_url: str | None = None
    last_active: datetime | None = Field(None, alias="lastActive")
    stats: UserStats

    model_config = ConfigDict(populate_by_name=True)


class AdminUserRow(UserResponse):
    auto_rank: int = Field(..., alias="autoRank")


class PullRequestResponse(BaseModel):
    id: int
    title: str
    url: str
    state: str
    created_at: datetime | None
    merged_at: datetime | None = None
    is_org: bool = Field(False, alias="isOrg")

    model_config = ConfigDict(populate_by_name=True)


class UserDetail(BaseModel):
    login: str
    avatar_url: str
    pull_requests: list[PullRequestResponse] = Field(..., alias="pullRequests")

    model_config = ConfigDict(populate_by_name=True)


class SyncPullRequestCounts(BaseModel):
    total_prs: int = Field(..., alias="totalPRs")
    merged_prs: int = Field(..., alias="mergedPRs")
    org_prs: int = Field(..., alias="orgPRs")
    org_merged_prs: int = Field(..., alias="orgMergedPRs")

    model_config = ConfigDict(populate_by_name=True)


class SyncStats(BaseModel):
    prs: SyncPullRequestCounts
    contributions: int
    points: int
    level: str


class SyncResponse(BaseModel):
    success: bool = True
    stats: SyncStats
