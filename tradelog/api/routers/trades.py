"""
Tradelog Trades Router

Loading trades from the sheet, listing them and looking up their chart
images.

Endpoints:
    POST /api/trades/load            - Load trades from the configured sheet
    GET  /api/trades                 - Trades within an optional date range
    GET  /api/trades/{id}            - One trade
    GET  /api/trades/{id}/images     - Chart images of a trade
    GET  /api/images                 - All chart images
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.journal import TradeJournal
from ...trades.filters import DateRange
from ..dependencies import get_journal
from .base import ApiResponse, create_response, date_range_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Trades"])


@router.post("/trades/load", response_model=ApiResponse)
async def load_trades(
    sheet: Optional[str] = Query(default=None, description="Sheet selector"),
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    """
    Load trades from the sheet, replacing the current collection.

    Configuration, network and feed errors are answered with their own
    status codes and leave the previous trades in place.
    """
    result = await journal.load(sheet)
    return create_response(data=result.to_dict())


@router.get("/trades", response_model=ApiResponse)
async def list_trades(
    date_range: DateRange = Depends(date_range_query),
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    trades = journal.filtered(date_range)
    return create_response(data=[trade.to_dict() for trade in trades])


@router.get("/trades/{trade_id}", response_model=ApiResponse)
async def get_trade(
    trade_id: int,
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    return create_response(data=journal.get_trade(trade_id).to_dict())


@router.get("/trades/{trade_id}/images", response_model=ApiResponse)
async def get_trade_images(
    trade_id: int,
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    return create_response(data=journal.images_for(trade_id))


@router.get("/images", response_model=ApiResponse)
async def list_images(journal: TradeJournal = Depends(get_journal)) -> ApiResponse:
    return create_response(data=journal.list_images())
