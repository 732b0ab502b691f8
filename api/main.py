"""
Popular Media API - FastAPI application.

Provides endpoints for:
- Random refreshes of locally stored popular movies / TV shows (admin + public)
- A manual "sync now" trigger against TMDb
- Backfilling genres for rows stored without them
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.deps import AjaxError, ajax_error
from api.routers import admin, ajax
from popular_media.config import get_settings

logger = logging.getLogger(__name__)


def get_cors_origins() -> list[str]:
    """
    Get CORS allowed origins from environment.
    Set CORS_ALLOW_ORIGINS as comma-separated list of origins.
    """
    return list(get_settings().cors_allow_origins)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting up Popular Media API...")
    yield
    logger.info("Shutting down Popular Media API...")


app = FastAPI(
    title="Popular Media API",
    description="Locally cached TMDb popular movies and TV shows",
    version="0.1.0",
    lifespan=lifespan,
)

# If no origins configured, allows all origins but disables credentials
cors_origins = get_cors_origins()
allow_credentials = len(cors_origins) > 0

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if cors_origins else ["*"],
    allow_credentials=allow_credentials,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(AjaxError)
async def handle_ajax_error(request: Request, exc: AjaxError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=ajax_error(exc.message))


app.include_router(ajax.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "popular-media"}


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
