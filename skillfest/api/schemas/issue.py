from pydantic import BaseModel


class IssueLabel(BaseModel):
    name: str | None
    color: str | None


class IssueRepository(BaseModel):
    name: str


class Issue(BaseModel):
    id: int
    title: str
    html_url: str
    repository: IssueRepository
    labels: list[IssueLabel] = []
