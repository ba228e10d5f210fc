"""
Tradelog Persistence Module

Local cache of the last loaded trades.
"""

from .store import (
    JsonTradeStore,
    MemoryTradeStore,
    TradeStore,
    deserialize_trades,
    serialize_trades,
)

__all__ = [
    "TradeStore",
    "JsonTradeStore",
    "MemoryTradeStore",
    "serialize_trades",
    "deserialize_trades",
]
