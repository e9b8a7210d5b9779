"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from app.api.routes.admin_routes import router as admin_router
from app.api.routes.company_routes import router as company_router
from app.api.routes.employer_routes import router as employer_router
from app.api.routes.post_routes import router as post_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(company_router)
api_router.include_router(employer_router)
api_router.include_router(post_router)
api_router.include_router(admin_router)
