"""
Job Board API - Main Application

FastAPI backend with:
- PostgreSQL for users, profiles, jobs and applications
- S3 or MongoDB GridFS for uploaded resumes
- JWT bearer authentication

Run: uvicorn app.main:app --reload
"""

from contextlib import asynccontextmanager
from typing import Optional

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from app import __version__
from app.api.error_handlers import register_error_handlers
from app.api.routes import api_router
from app.core.config import Settings, get_settings
from app.core.logging import configure_logging
from app.core.request_id import RequestIdMiddleware
from app.db.postgres import Database
from app.services.resume_storage import create_resume_store

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the connection pool and resume store; release them on shutdown."""
    settings: Settings = app.state.settings

    db = Database.from_settings(settings)
    await run_in_threadpool(db.create_schema)
    app.state.db = db
    app.state.resume_store = create_resume_store(settings)
    logger.info("startup complete", resume_storage=settings.resume_storage, pool_size=settings.db_pool_size)

    try:
        yield
    finally:
        app.state.resume_store.close()
        db.dispose()
        logger.info("shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Job Board API",
        description="""
        Job board backend.

        ## Features
        - **Authentication**: register, login, bearer tokens
        - **Profiles**: employer or job seeker, resume upload
        - **Jobs**: post, browse, update, apply, list applicants
        """,
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIdMiddleware)

    register_error_handlers(app)
    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    def health_check(request: Request):
        """Database connectivity check."""
        connected = request.app.state.db.ping()
        return {
            "status": "healthy" if connected else "degraded",
            "database": "connected" if connected else "disconnected",
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host="0.0.0.0", port=get_settings().port)
