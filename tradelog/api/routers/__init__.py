"""
Tradelog API Routers

Usage:
    from tradelog.api.routers import register_routers

    app = FastAPI()
    register_routers(app)
"""

import logging

from fastapi import FastAPI

from .analytics import router as analytics_router
from .system import router as system_router
from .trades import router as trades_router

logger = logging.getLogger(__name__)

__all__ = [
    "analytics_router",
    "register_routers",
    "system_router",
    "trades_router",
]


def register_routers(app: FastAPI) -> None:
    """Include the system, trades and analytics routers."""
    for router in (system_router, trades_router, analytics_router):
        app.include_router(router)
    logger.debug(f"Registered {len(app.routes)} routes")
