from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LeaderboardEntry(BaseModel):
    rank: int
    auto_rank: int
    manual_rank: int | None
    login: str
    avatar_url: str | None
    html_url: str
    points: int
    level: str


class LeaderboardResponse(BaseModel):
    visible: bool
    entries: list[LeaderboardEntry]


class LeaderboardSettingsResponse(BaseModel):
    visible: bool
    last_updated: datetime | None = Field(None, alias="lastUpdated")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class LeaderboardSettingsUpdate(BaseModel):
    visible: bool


class LeaderboardSettingsSaved(BaseModel):
    success: bool = True
    data: LeaderboardSettingsResponse
