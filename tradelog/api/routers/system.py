"""
Tradelog System Router

Endpoints:
    GET /api/health     - Health check
"""

import logging

from fastapi import APIRouter, Depends

from ... import __version__
from ...core.journal import TradeJournal
from ..dependencies import get_journal
from .base import ApiResponse, create_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["System"])


@router.get("/health", response_model=ApiResponse)
async def health_check(journal: TradeJournal = Depends(get_journal)) -> ApiResponse:
    healthy = journal.health_check()
    return create_response(
        data={
            "status": "healthy" if healthy else "unhealthy",
            "version": __version__,
            "tradeCount": len(journal.trades),
            "feedRevision": journal.schema.name,
        }
    )
