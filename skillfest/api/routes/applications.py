from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from skillfest.api.schemas.application import (
    FresherApplicationCreate,
    FresherApplicationResponse,
)
from skillfest.db import get_db
from skillfest.services.application_service import ApplicationService

router = APIRouter()


@router.post(
    "",
    response_model=FresherApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a fresher application",
)
async def submit_application(
    data: FresherApplicationCreate,
    db: AsyncSession = Depends(get_db),
) -> FresherApplicationResponse:
    service = ApplicationService(db)
    application = await service.submit(data)
    return FresherApplicationResponse.model_validate(application)
