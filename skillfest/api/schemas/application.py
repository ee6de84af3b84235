from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, HttpUrl


class FresherApplicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    github_url: HttpUrl
    past_experience: str | None = None
    project_link_1: str | None = None
    project_link_2: str | None = None
    reason: str | None = None


class FresherApplicationResponse(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}
