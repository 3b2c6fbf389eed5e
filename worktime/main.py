# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from worktime import __version__
from worktime.config import settings
from worktime.engine.errors import WorkTimeError
from worktime.services.balance_service import balance_cache

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: recompute cached balances whenever data changes
    logger.info("Subscribing balance cache to change events...")
    balance_cache.subscribe()

    yield

    # Shutdown: Cleanup
    logger.info("Shutting down...")
    balance_cache.unsubscribe()
    balance_cache.clear()


app = FastAPI(
    title=settings.app_name,
    description="Work time tracking with review workflows and balances",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware for the calendar frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(WorkTimeError)
async def worktime_error_handler(request: Request, exc: WorkTimeError) -> JSONResponse:
    """Render guard violations as typed error responses."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": exc.code, "detail": exc.message},
    )


@app.get("/health")
def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "healthy"}


# Import and include API router after it's created
from worktime.api.v1.router import api_router  # noqa: E402

app.include_router(api_router, prefix="/api/v1")
