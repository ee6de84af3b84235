from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from skillfest.db.models.base import Base, TimestampMixin


class ManualRank(Base, TimestampMixin):
    """Administrator override layered over the automatic rank."""

    __tablename__ = "manual_ranks"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    manual_rank: Mapped[int | None] = mapped_column()
    hidden: Mapped[bool] = mapped_column(default=False)
    rank_updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<ManualRank {self.username} rank={self.manual_rank} hidden={self.hidden}>"


class LeaderboardSettings(Base, TimestampMixin):
    """Singleton row gating the public leaderboard."""

    __tablename__ = "leaderboard_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    visible: Mapped[bool] = mapped_column(default=True)
    last_updated: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<LeaderboardSettings visible={self.visible}>"
