"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.auth_routes import router as auth_router
from app.api.routes.drive_routes import router as drive_router
from app.api.routes.student_routes import router as student_router
from app.api.routes.prep_routes import router as prep_router
from app.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(drive_router)
api_router.include_router(student_router)
api_router.include_router(prep_router)
api_router.include_router(admin_router)
