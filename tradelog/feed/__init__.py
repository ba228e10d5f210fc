"""
Feed Module

Fetch and decode the spreadsheet export that holds the journal's trades.
"""

from .client import SheetFeedClient, build_export_url, extract_sheet_id
from .decoder import FeedTable, decode_feed, strip_envelope
from .schema import (
    ABSOLUTE,
    CLASSIC,
    ColumnReport,
    FeedSchema,
    TimeEncoding,
    available_schemas,
    get_schema,
    register_schema,
)

__all__ = [
    # Client
    "SheetFeedClient",
    "extract_sheet_id",
    "build_export_url",
    # Decoding
    "FeedTable",
    "decode_feed",
    "strip_envelope",
    # Schema
    "TimeEncoding",
    "FeedSchema",
    "ColumnReport",
    "CLASSIC",
    "ABSOLUTE",
    "get_schema",
    "register_schema",
    "available_schemas",
]
