"""
Tradelog - a personal trading journal.

Loads closed trades from a Google Sheet, groups them by calendar day and
computes performance statistics over any date range.
"""

__version__ = "0.1.0"

from .analytics import DailyPerformance, StatisticsSummary, group_by_day, summarize
from .core.errors import (
    ConfigurationError,
    FeedFormatError,
    NetworkError,
    StorageError,
    TradeLogError,
    ValidationError,
)
from .core.journal import LoadResult, TradeJournal
from .feed import FeedTable, SheetFeedClient, TimeEncoding, decode_feed
from .images import resolve_trade_images
from .trades import DateRange, Trade, TradeNormalizer, filter_trades

__all__ = [
    "__version__",
    # Journal
    "TradeJournal",
    "LoadResult",
    # Pipeline
    "SheetFeedClient",
    "FeedTable",
    "decode_feed",
    "TimeEncoding",
    "Trade",
    "TradeNormalizer",
    "DateRange",
    "filter_trades",
    "DailyPerformance",
    "group_by_day",
    "StatisticsSummary",
    "summarize",
    "resolve_trade_images",
    # Errors
    "TradeLogError",
    "FeedFormatError",
    "ConfigurationError",
    "NetworkError",
    "ValidationError",
    "StorageError",
]
