"""
Campus Recruit API - Main Application

FastAPI backend with:
- Relational store via SQLAlchemy (PostgreSQL)
- JWT authentication with STUDENT / COMPANY / ADMIN roles
- Application status workflow with email notifications
- Resume / profile image uploads (local disk or S3)

Run: uvicorn campus_recruit.main:app --reload
"""

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from campus_recruit import __version__
from campus_recruit.api import api_router
from campus_recruit.core.config import get_settings
from campus_recruit.core.errors import AppError
from campus_recruit.core.logging import setup_logging
from campus_recruit.db.database import check_database_connection, init_db

settings = get_settings()

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup (use migrations for real deployments)."""
    try:
        init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise
    yield


# Create FastAPI app
app = FastAPI(
    title="Campus Recruit API",
    description="""
    Campus recruitment backend.

    ## Features
    - **Authentication**: JWT-based auth for students, companies and admins
    - **Jobs**: Companies post and manage jobs; anyone can browse
    - **Applications**: Students apply; companies move applications through
      PENDING / INTERVIEW / ACCEPTED / REJECTED
    - **Notifications**: Offer and interview-invite emails on status changes
    - **Uploads**: Resumes and profile images
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s %s -> %s %.0fms", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Anything unexpected becomes an opaque 500."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if settings.debug:
        content["message"] = str(exc)
    return JSONResponse(status_code=500, content=content)


# Include API routes
app.include_router(api_router, prefix="/api")

# Serve locally stored uploads
if settings.storage_type == "local":
    os.makedirs(settings.upload_dir, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check."""
    return {
        "status": "ok",
        "database": "connected" if check_database_connection() else "disconnected",
    }
