"""
Job Platform Backend - Main Application

FastAPI backend with:
- PostgreSQL for accounts, registration approvals and posts
- MongoDB for server-side sessions (`sid` cookie)
- MinIO/S3 for registration proof images
- Google sign-in for employers

Run: uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
from starlette.middleware.sessions import SessionMiddleware

from app.api.errors import register_exception_handlers
from app.api.routes import api_router
from app.core.config import get_settings
from app.core.container import Services, build_services
from app.core.logging import configure_logging
from app.db.mongodb import init_mongo_indexes, test_mongo_connection
from app.db.postgres import init_database, test_postgres_connection

logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, wire services and the session TTL index on startup."""
    configure_logging(settings.log_level)
    init_database()

    if getattr(app.state, "services", None) is None:
        app.state.services = build_services(settings)

    try:
        init_mongo_indexes(app.state.services.sessions.collection.database)
    except PyMongoError:
        logger.warning("MongoDB index initialization failed", exc_info=True)

    logger.info("Job platform API started")
    yield


def create_app(services: Optional[Services] = None) -> FastAPI:
    app = FastAPI(
        title="Job Platform API",
        description="""
        Backend for a job platform.

        ## Features
        - **Registration**: Companies and employers register, upload a proof image and wait for approval
        - **Authentication**: Session cookie login (local password or Google for employers)
        - **Admin**: Approve or reject pending registrations
        - **Posts**: Job posts and job-finding posts
        """,
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    # Holds the OAuth state between /auth/google and its callback
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret_key,
        session_cookie="oauth_state",
        same_site="lax",
        https_only=settings.session_cookie_secure,
    )

    register_exception_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Detailed health check."""
        return {
            "status": "healthy",
            "postgres": "connected" if test_postgres_connection() else "disconnected",
            "mongodb": "connected" if test_mongo_connection() else "disconnected",
        }

    return app


app = create_app()
