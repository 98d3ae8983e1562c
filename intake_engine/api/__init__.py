# API routes
from fastapi import APIRouter
from intake_engine.api.intake import router as intake_router
from intake_engine.api.progress import router as progress_router

# Combine all routers
router = APIRouter()
router.include_router(intake_router)
router.include_router(progress_router)

__all__ = ["router"]
