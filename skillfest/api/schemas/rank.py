from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UpdateUserRankRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=255)
    rank: int | None = Field(None, ge=1)
    points: int | None = Field(None, ge=0)


class VisibilityUpdate(BaseModel):
    hidden: bool


class ManualRankResponse(BaseModel):
    username: str
    manual_rank: int | None = Field(None, alias="manualRank")
    hidden: bool
    updated_at: datetime | None = Field(None, alias="updatedAt")

    model_config = ConfigDict(populate_by_name=True)


class AssignTopRanksRequest(BaseModel):
    top_count: int = Field(10, ge=1, le=1000, alias="topCount")

    model_config = ConfigDict(populate_by_name=True)


class AssignedRank(BaseModel):
    login: str
    rank: int
    points: int


class AssignTopRanksResponse(BaseModel):
    success: bool = True
    assigned: list[AssignedRank]


class PointsChange(BaseModel):
    login: str
    old_points: int
    new_points: int


class RecalculateResponse(BaseModel):
    success: bool = True
    users_updated: int
    changes: list[PointsChange]
