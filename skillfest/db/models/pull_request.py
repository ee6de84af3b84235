from datetime import datetime
from enum import Enum

from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillfest.db.models.base import Base, TimestampMixin


class PullRequestState(str, Enum):
    OPEN = "open"
    MERGED = "merged"


class PullRequest(Base, TimestampMixin):
    __tablename__ = "pull_requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("skillfest_users.id", ondelete="CASCADE"),
        nullable=False,
    )
    github_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    opened_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    merged_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    is_org: Mapped[bool] = mapped_column(default=False)

    # Relationships
    user = relationship("SkillFestUser", back_populates="pull_requests")

    __table_args__ = (
        Index("idx_pull_requests_user", "user_id"),
        Index("idx_pull_requests_user_github_id", "user_id", "github_id"),
    )

    def __repr__(self) -> str:
        return f"<PullRequest {self.github_id} {self.state}>"
