"""
Date-range filtering of trade collections.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from ..core.errors import ErrorCodes, ValidationError, validate_date_range
from .models import Trade

DateLike = Union[date, datetime, str]


def _as_date(value: Optional[DateLike]) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError as e:
        raise ValidationError(
            ErrorCodes.VALIDATION_INVALID_DATE_RANGE,
            detail=f"invalid date {value!r}",
            original_error=e,
        ) from e


@dataclass(frozen=True)
class DateRange:
    """
    Inclusive calendar-day range; either bound may be open.

    A range with neither bound matches every trade.
    """

    start: Optional[date] = None
    end: Optional[date] = None

    def __post_init__(self):
        object.__setattr__(self, "start", _as_date(self.start))
        object.__setattr__(self, "end", _as_date(self.end))
        validate_date_range(self.start, self.end)

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True

    def apply(self, trades: Iterable[Trade]) -> List[Trade]:
        if self.is_open:
            return list(trades)
        return [trade for trade in trades if self.contains(trade.date)]


def filter_trades(
    trades: Iterable[Trade],
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
) -> List[Trade]:
    """Trades whose day falls within ``[start, end]``, in input order."""
    return DateRange(start, end).apply(trades)
