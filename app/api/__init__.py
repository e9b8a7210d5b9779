"""
API module - FastAPI routers, response envelope and exception handlers.

Usage:
    from app.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""
