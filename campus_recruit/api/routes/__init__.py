"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from campus_recruit.api.routes.auth_routes import router as auth_router
from campus_recruit.api.routes.job_routes import router as job_router
from campus_recruit.api.routes.application_routes import router as application_router
from campus_recruit.api.routes.student_routes import router as student_router
from campus_recruit.api.routes.upload_routes import router as upload_router
from campus_recruit.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(student_router)
api_router.include_router(upload_router)
api_router.include_router(admin_router)
