from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skillfest.db.models.base import Base, TimestampMixin


class FresherApplication(Base, TimestampMixin):
    __tablename__ = "fresher_applications"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    github_url: Mapped[str] = mapped_column(Text, nullable=False)
    past_experience: Mapped[str | None] = mapped_column(Text)
    project_link_1: Mapped[str | None] = mapped_column(Text)
    project_link_2: Mapped[str | None] = mapped_column(Text)
    reason: Mapped[str | None] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<FresherApplication {self.email}>"
