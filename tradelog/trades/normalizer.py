"""
Trade Normalizer Module

Turn decoded sheet rows into strict Trade records. A defective row is
skipped and reported, it never fails the batch.
"""

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

from ..feed.decoder import FeedTable
from ..feed.schema import (
    CLASSIC,
    NUMERIC_FIELDS,
    TEXT_FIELDS,
    FeedSchema,
    TimeEncoding,
)
from .models import Trade

logger = logging.getLogger(__name__)

# Months are zero-based in both patterns
DATE_PATTERN = re.compile(r"Date\((\d+),(\d+),(\d+)")
DATETIME_PATTERN = re.compile(r"Date\((\d+),(\d+),(\d+),(\d+),(\d+),(\d+)\)")


class RowSkipReason:
    """Reasons attached to skipped rows."""

    EMPTY_DATE = "empty_date"
    INVALID_DATE = "invalid_date"
    INVALID_TIME = "invalid_time"
    MISSING_SYMBOL = "missing_symbol"
    MISSING_FIELD = "missing_field"


@dataclass
class SkippedRow:
    """A row excluded from the trade collection."""

    row_index: int
    reason: str
    detail: str = ""


@dataclass
class NormalizationResult:
    """Trades produced from a table plus the rows that were skipped."""

    trades: List[Trade] = field(default_factory=list)
    skipped: List[SkippedRow] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def skipped_by_reason(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for row in self.skipped:
            counts[row.reason] = counts.get(row.reason, 0) + 1
        return counts


class _RowSkip(Exception):
    def __init__(self, reason: str, detail: str = ""):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


def parse_date_cell(value: Any) -> Optional[date]:
    """
    Parse ``Date(y,m,d)`` with a zero-based month.

    Returns None when the text does not match or is not a calendar date.
    """
    match = DATE_PATTERN.search(str(value))
    if not match:
        return None
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month + 1, day)
    except ValueError:
        return None


def parse_datetime_cell(value: Any) -> Optional[datetime]:
    """Parse ``Date(y,m,d,H,M,S)`` with a zero-based month."""
    if value is None:
        return None
    match = DATETIME_PATTERN.search(str(value))
    if not match:
        return None
    year, month, day, hour, minute, second = (int(part) for part in match.groups())
    try:
        return datetime(year, month + 1, day, hour, minute, second)
    except ValueError:
        return None


def to_number(value: Any) -> float:
    """Numeric conversion; missing or unparseable values become NaN."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def to_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def to_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().upper() == "TRUE"


class TradeNormalizer:
    """
    Map decoded rows to Trade records according to a feed schema.

    Ids are assigned sequentially over the accepted rows, starting at 0.
    """

    def __init__(self, schema: Optional[FeedSchema] = None):
        self.schema = schema or CLASSIC

    def normalize(self, table: FeedTable) -> List[Trade]:
        """Normalize a table, returning only the accepted trades."""
        return self.normalize_with_report(table).trades

    def normalize_with_report(self, table: FeedTable) -> NormalizationResult:
        """
        Normalize a table and report skipped rows.

        Args:
            table: Decoded feed table

        Returns:
            NormalizationResult with trades in feed order
        """
        report = self.schema.validate_columns(table)
        if report.missing_required:
            logger.warning(
                f"Feed is missing required columns for revision "
                f"'{self.schema.name}': {', '.join(report.missing_required)}"
            )

        result = NormalizationResult()
        for index, row in enumerate(table.rows):
            try:
                trade = self._build_trade(row, trade_id=len(result.trades))
            except _RowSkip as skip:
                result.skipped.append(SkippedRow(index, skip.reason, skip.detail))
                if skip.reason == RowSkipReason.EMPTY_DATE:
                    logger.debug(f"Skipping row {index}: no date")
                else:
                    logger.warning(f"Skipping row {index}: {skip.reason} {skip.detail}")
                continue
            result.trades.append(trade)

        logger.info(
            f"Normalized {len(result.trades)} trades, skipped {result.skipped_count} rows"
        )
        return result

    def _cell(self, row: Dict[str, Any], field_name: str) -> Any:
        label = self.schema.label(field_name)
        if label is None:
            return None
        return row.get(label)

    def _resolve_times(
        self, row: Dict[str, Any], trade_date: date
    ) -> Tuple[datetime, datetime]:
        entry_raw = self._cell(row, "time_of_entry")
        exit_raw = self._cell(row, "time_of_exit")
        entry = parse_datetime_cell(entry_raw)
        exit_ = parse_datetime_cell(exit_raw)
        if entry is None or exit_ is None:
            raise _RowSkip(RowSkipReason.INVALID_TIME, f"{entry_raw!r}, {exit_raw!r}")

        if self.schema.time_encoding is TimeEncoding.TIME_OF_DAY:
            entry = datetime.combine(trade_date, entry.time())
            exit_ = datetime.combine(trade_date, exit_.time())
        return entry, exit_

    def _build_trade(self, row: Dict[str, Any], trade_id: int) -> Trade:
        date_raw = self._cell(row, "date")
        if date_raw is None or date_raw == "":
            raise _RowSkip(RowSkipReason.EMPTY_DATE)

        trade_date = parse_date_cell(date_raw)
        if trade_date is None:
            raise _RowSkip(RowSkipReason.INVALID_DATE, repr(date_raw))

        time_of_entry, time_of_exit = self._resolve_times(row, trade_date)

        symbol = to_text(self._cell(row, "symbol")).strip()
        if not symbol:
            raise _RowSkip(RowSkipReason.MISSING_SYMBOL)

        values: Dict[str, Any] = {}
        for name in NUMERIC_FIELDS:
            raw = self._cell(row, name)
            if raw is None and self.schema.is_required(name):
                raise _RowSkip(RowSkipReason.MISSING_FIELD, name)
            values[name] = to_number(raw)
        for name in TEXT_FIELDS:
            values[name] = to_text(self._cell(row, name))

        return Trade(
            id=trade_id,
            symbol=symbol,
            date=trade_date,
            time_of_entry=time_of_entry,
            time_of_exit=time_of_exit,
            on_work=to_flag(self._cell(row, "on_work")),
            **values,
        )


def normalize_trades(table: FeedTable, schema: Optional[FeedSchema] = None) -> List[Trade]:
    """Convenience wrapper around :class:`TradeNormalizer`."""
    return TradeNormalizer(schema).normalize(table)
