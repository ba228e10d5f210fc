"""
Tradelog REST API
=================

FastAPI application serving the trade journal: loading trades from the
sheet, the daily calendar, the statistics panel and chart images.

Usage:
    # Development
    uvicorn tradelog.api.main:create_app --factory --reload --port 8000

Environment Variables:
    TRADELOG_SHEET_URL: Google Sheets URL of the journal
    TRADELOG_SHEET: Sheet selector (default: 0)
    TRADELOG_FEED_REVISION: Column layout revision (classic, absolute)
    TRADELOG_CACHE_PATH: JSON file caching the last loaded trades
    TRADELOG_IMAGES_DIR: Directory holding chart images
    DEBUG: Include technical details in error responses
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import configure_logging, get_settings
from ..core.errors import TradeLogError, create_error_response, wrap_exception
from ..core.journal import TradeJournal
from .routers import register_routers
from .routers.base import get_timestamp, log_api_error

logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]


# =============================================================================
# Application Lifecycle
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the journal on startup unless one was supplied to create_app.

    The journal is stored in app.state for access by endpoints.
    """
    logger.info("Tradelog API starting up...")

    if getattr(app.state, "journal", None) is None:
        settings = get_settings()
        configure_logging(level=settings.log_level, json_format=settings.log_json)
        journal = TradeJournal(settings=settings)
        journal.restore()
        app.state.journal = journal

    logger.info("Tradelog API ready")

    yield

    logger.info("Tradelog API shutting down...")
    app.state.journal.close()
    logger.info("Tradelog API shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================


def create_app(journal: Optional[TradeJournal] = None) -> FastAPI:
    """
    Application factory for creating the FastAPI instance.

    Args:
        journal: Prebuilt journal; built from settings on startup when None

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Tradelog API",
        description="Personal trading journal - REST API",
        version=__version__,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "System", "description": "Health checks"},
            {"name": "Trades", "description": "Loading trades and chart images"},
            {"name": "Analytics", "description": "Daily calendar and statistics"},
        ],
    )
    app.state.journal = journal

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routers(app)

    @app.exception_handler(TradeLogError)
    async def tradelog_exception_handler(request: Request, exc: TradeLogError):
        """Answer journal errors with their own status and error body."""
        log_api_error(request.url.path, exc)
        return JSONResponse(
            status_code=exc.http_status,
            content=create_error_response(
                exc, debug_mode=bool(os.environ.get("DEBUG"))
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "error": exc.detail,
                "timestamp": get_timestamp(),
            },
            headers=exc.headers,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
        error = wrap_exception(exc)
        return JSONResponse(
            status_code=error.http_status,
            content=create_error_response(
                error, debug_mode=bool(os.environ.get("DEBUG"))
            ),
        )

    return app
