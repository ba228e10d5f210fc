"""
Feed Decoder Module

Decode the Google Visualization ("gviz") JSON export of a spreadsheet into a
generic table of rows keyed by column label.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

import pandas as pd

from ..core.errors import ErrorCodes, FeedFormatError

logger = logging.getLogger(__name__)

# "/*O_o*/\ngoogle.visualization.Query.setResponse(" ... ");"
ENVELOPE_PREFIX_LENGTH = 47
ENVELOPE_SUFFIX_LENGTH = 2


@dataclass
class FeedTable:
    """Column labels and rows of a decoded sheet."""

    labels: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    def has_column(self, label: str) -> bool:
        return label in self.labels

    def column(self, label: str) -> List[Any]:
        """All values of one column, in row order."""
        return [row.get(label) for row in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        """Rows as a DataFrame (first occurrence of each label only)."""
        columns = list(dict.fromkeys(self.labels))
        if not self.rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame(self.rows, columns=columns)


def strip_envelope(text: str) -> str:
    """
    Remove the callback wrapper around the JSON payload.

    The wrapper has a fixed length, so it is removed by offset.

    Raises:
        FeedFormatError: If the text is too short to hold the wrapper
    """
    if text is None or len(text) <= ENVELOPE_PREFIX_LENGTH + ENVELOPE_SUFFIX_LENGTH:
        raise FeedFormatError(
            ErrorCodes.FEED_ENVELOPE,
            detail=f"response of {len(text or '')} characters is too short",
        )
    return text[ENVELOPE_PREFIX_LENGTH:-ENVELOPE_SUFFIX_LENGTH]


def _cell_value(cell: Any) -> Any:
    if isinstance(cell, dict):
        return cell.get("v")
    return None


def decode_table(table: Dict[str, Any]) -> FeedTable:
    """
    Convert a gviz ``table`` object into a FeedTable.

    Raises:
        FeedFormatError: If ``cols`` or ``rows`` are missing or hold
            entries that are not objects
    """
    cols = table.get("cols") if isinstance(table, dict) else None
    raw_rows = table.get("rows") if isinstance(table, dict) else None
    if not isinstance(cols, list) or not isinstance(raw_rows, list):
        raise FeedFormatError(
            ErrorCodes.FEED_MISSING_TABLE,
            detail="payload has no table.cols/table.rows",
        )

    if not all(col is None or isinstance(col, dict) for col in cols):
        raise FeedFormatError(
            ErrorCodes.FEED_MISSING_TABLE,
            detail="table.cols entries must be objects",
        )
    labels = [(col or {}).get("label") or "" for col in cols]

    rows: List[Dict[str, Any]] = []
    for row_index, raw in enumerate(raw_rows):
        if raw is not None and not isinstance(raw, dict):
            raise FeedFormatError(
                ErrorCodes.FEED_MISSING_TABLE,
                detail=f"table.rows[{row_index}] is not an object",
            )
        cells = (raw or {}).get("c") or []
        if not isinstance(cells, list):
            raise FeedFormatError(
                ErrorCodes.FEED_MISSING_TABLE,
                detail=f"table.rows[{row_index}].c is not a list",
            )
        row: Dict[str, Any] = {}
        for index, label in enumerate(labels):
            # First column wins when a label repeats
            if label in row:
                continue
            row[label] = _cell_value(cells[index]) if index < len(cells) else None
        rows.append(row)

    return FeedTable(labels=labels, rows=rows)


def decode_feed(text: str) -> FeedTable:
    """
    Decode a raw export response body.

    Args:
        text: Response body including the callback wrapper

    Returns:
        FeedTable with one mapping per sheet row

    Raises:
        FeedFormatError: If the wrapper, JSON or table structure is invalid
    """
    payload = strip_envelope(text)

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise FeedFormatError(
            ErrorCodes.FEED_INVALID_JSON,
            detail=f"{e.msg} at position {e.pos}",
            original_error=e,
        ) from e

    if not isinstance(data, dict) or "table" not in data:
        raise FeedFormatError(
            ErrorCodes.FEED_MISSING_TABLE,
            detail=f"status={data.get('status') if isinstance(data, dict) else None}",
        )

    table = decode_table(data["table"])
    logger.debug(f"Decoded feed with {len(table.labels)} columns and {len(table)} rows")
    return table
