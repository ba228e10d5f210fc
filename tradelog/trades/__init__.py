"""
Trades Module

The canonical trade record, its normalization from sheet rows and
date-range filtering.
"""

from .filters import DateRange, filter_trades
from .models import Trade, trades_to_dataframe
from .normalizer import (
    NormalizationResult,
    RowSkipReason,
    SkippedRow,
    TradeNormalizer,
    normalize_trades,
)

__all__ = [
    "Trade",
    "trades_to_dataframe",
    "TradeNormalizer",
    "NormalizationResult",
    "SkippedRow",
    "RowSkipReason",
    "normalize_trades",
    "DateRange",
    "filter_trades",
]
