"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.activities import router as activities_router
from api.v1.routes.profile import router as profile_router
from api.v1.routes.session import router as session_router

router = APIRouter()
router.include_router(session_router)
router.include_router(profile_router)
router.include_router(activities_router)
