import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.api.schemas.application import FresherApplicationCreate
from skillfest.db.models.application import FresherApplication

logger = structlog.get_logger()


class ApplicationService:
    """Insert-only store for fresher application forms."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def submit(self, data: FresherApplicationCreate) -> FresherApplication:
        application = FresherApplication(
            name=data.name,
            email=data.email,
            github_url=str(data.github_url),
            past_experience=data.past_experience,
            project_link_1=data.project_link_1,
            project_link_2=data.project_link_2,
            reason=data.reason,
        )
        self.db.add(application)
        await self.db.flush()
        logger.info("Fresher application submitted", application_id=application.id)
        return application
