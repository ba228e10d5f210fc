"""
Tradelog Analytics Router

Calendar and statistics panel endpoints.

Endpoints:
    GET /api/daily          - Daily performance within a date range
    GET /api/days/{day}     - Trades of one calendar day
    GET /api/stats          - Statistics over a date range
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends

from ...analytics.presentation import format_summary
from ...core.journal import TradeJournal
from ...trades.filters import DateRange
from ..dependencies import get_journal
from .base import ApiResponse, create_response, date_range_query

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analytics"])


@router.get("/daily", response_model=ApiResponse)
async def get_daily_performance(
    date_range: DateRange = Depends(date_range_query),
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    """Daily results in first-seen order, with their calendar labels."""
    days = journal.daily(date_range)
    data = [{**day.to_dict(), "title": day.event_title()} for day in days]
    return create_response(data=data)


@router.get("/days/{day}", response_model=ApiResponse)
async def get_day(
    day: date,
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    """Drill-down for one day; an untraded day has no trades."""
    performance = journal.day(day)
    if performance is None:
        return create_response(data={"date": day.isoformat(), "trades": []})
    return create_response(
        data={
            **performance.to_dict(),
            "trades": [trade.to_dict() for trade in performance.trades],
        }
    )


@router.get("/stats", response_model=ApiResponse)
async def get_statistics(
    date_range: DateRange = Depends(date_range_query),
    journal: TradeJournal = Depends(get_journal),
) -> ApiResponse:
    """Raw statistics plus their display strings."""
    summary = journal.summary(date_range)
    return create_response(
        data={"summary": summary.to_dict(), "display": format_summary(summary)}
    )
