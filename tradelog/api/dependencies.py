"""
Tradelog API Dependencies

Access to the journal instance held in application state.

Usage:
    @router.get("/api/trades")
    async def list_trades(journal: TradeJournal = Depends(get_journal)):
        ...
"""

import logging

from fastapi import HTTPException, Request

from ..core.journal import TradeJournal

logger = logging.getLogger(__name__)


def get_journal(request: Request) -> TradeJournal:
    """Journal stored in ``app.state`` by the application lifespan."""
    journal = getattr(request.app.state, "journal", None)
    if journal is None:
        raise HTTPException(status_code=503, detail="Journal not initialized")
    return journal
