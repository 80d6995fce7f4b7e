"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.meeting_status_routes import router as meeting_status_router
from app.api.routes.schedule_routes import router as schedule_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(meeting_status_router)
api_router.include_router(schedule_router)
