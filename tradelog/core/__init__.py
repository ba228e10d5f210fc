"""
Tradelog Core Module

Error taxonomy and the journal coordinator.
"""

from .errors import (
    ConfigurationError,
    ErrorCodes,
    FeedFormatError,
    NetworkError,
    StorageError,
    TradeLogError,
    ValidationError,
)

__all__ = [
    "TradeLogError",
    "FeedFormatError",
    "ConfigurationError",
    "NetworkError",
    "ValidationError",
    "StorageError",
    "ErrorCodes",
]
