from fastapi import APIRouter

from skillfest.api.routes.admin import router as admin_router
from skillfest.api.routes.applications import router as applications_router
from skillfest.api.routes.issues import router as issues_router
from skillfest.api.routes.leaderboard import router as leaderboard_router
from skillfest.api.routes.users import router as users_router

router = APIRouter()

router.include_router(users_router, prefix="/users", tags=["users"])
router.include_router(leaderboard_router, prefix="/leaderboard", tags=["leaderboard"])
router.include_router(issues_router, prefix="/skillfest", tags=["skillfest"])
router.include_router(applications_router, prefix="/applications", tags=["applications"])
router.include_router(admin_router, prefix="/admin", tags=["admin"])
