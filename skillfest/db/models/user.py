from datetime import datetime

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from skillfest.db.models.base import Base, TimestampMixin


class SkillFestUser(Base, TimestampMixin):
    __tablename__ = "skillfest_users"

    id: Mapped[int] = mapped_column(primary_key=True)
    login: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    last_active: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    # Pull request counts
    total_prs: Mapped[int] = mapped_column(default=0)
    merged_prs: Mapped[int] = mapped_column(default=0)
    org_prs: Mapped[int] = mapped_column(default=0)
    org_merged_prs: Mapped[int] = mapped_column(default=0)
    contributions: Mapped[int] = mapped_column(default=0)

    # Score
    points: Mapped[int] = mapped_column(default=0)
    level: Mapped[str] = mapped_column(String(50), default="Newcomer")

    # Relationships
    pull_requests = relationship(
        "PullRequest",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="PullRequest.id",
    )

    __table_args__ = (Index("idx_skillfest_users_points", "points"),)

    @property
    def avatar_url(self) -> str:
        return f"https://avatars.githubusercontent.com/{self.login}"

    def __repr__(self) -> str:
        return f"<SkillFestUser {self.login} points={self.points}>"
