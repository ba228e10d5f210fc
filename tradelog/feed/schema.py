"""
Feed Schema Module

Describes which sheet column feeds which trade field, which of them are
required, and how the entry/exit time cells are encoded. Different sheet
layouts are registered as named revisions.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, List, Optional

from ..core.errors import ConfigurationError, ErrorCodes
from .decoder import FeedTable

logger = logging.getLogger(__name__)


class TimeEncoding(Enum):
    """How entry/exit cells encode their timestamp."""

    # Only the time of day is reliable; the row date supplies the day
    TIME_OF_DAY = "time_of_day"
    # Each cell carries its own full date and time
    ABSOLUTE = "absolute"


# Trade field -> column label of the journal sheet
DEFAULT_COLUMNS: Dict[str, str] = {
    "date": "Date",
    "symbol": "Symbol",
    "time_of_entry": "Time of entry",
    "time_of_exit": "Time of exit",
    "buys": "Buys",
    "sells": "Sells",
    "net": "Net",
    "average_buy_price": "Average Buy Price",
    "average_sell_price": "Average Sell Price",
    "total_buy_price": "Total Buy Price",
    "total_sold_price": "Total Sold Price",
    "net_total": "Net Total",
    "realized_pnl_percent": "Realized P&L%",
    "realized_pnl": "Realized P&L",
    "commission": "Commission",
    "net_incl_commission": "Net Incl. Commission",
    "what_happened_before_enter": "What happened before enter",
    "what_happened_after_exit": "What happened after exit",
    "comment": "Comment",
    "on_work": "On work",
}

REQUIRED_FIELDS: FrozenSet[str] = frozenset(
    {"date", "symbol", "time_of_entry", "time_of_exit"}
)

NUMERIC_FIELDS = (
    "buys",
    "sells",
    "net",
    "average_buy_price",
    "average_sell_price",
    "total_buy_price",
    "total_sold_price",
    "net_total",
    "realized_pnl_percent",
    "realized_pnl",
    "commission",
    "net_incl_commission",
)

TEXT_FIELDS = (
    "what_happened_before_enter",
    "what_happened_after_exit",
    "comment",
)


@dataclass
class ColumnReport:
    """Which columns of a schema a given feed supplies."""

    present: List[str]
    missing_required: List[str]
    missing_optional: List[str]

    @property
    def is_complete(self) -> bool:
        return not self.missing_required


@dataclass(frozen=True)
class FeedSchema:
    """Column layout of one sheet revision."""

    name: str
    time_encoding: TimeEncoding = TimeEncoding.TIME_OF_DAY
    columns: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_COLUMNS))
    required: FrozenSet[str] = REQUIRED_FIELDS

    def label(self, field_name: str) -> Optional[str]:
        return self.columns.get(field_name)

    def is_required(self, field_name: str) -> bool:
        return field_name in self.required

    def validate_columns(self, table: FeedTable) -> ColumnReport:
        """Compare the schema against the labels a feed actually has."""
        present, missing_required, missing_optional = [], [], []
        for field_name, label in self.columns.items():
            if table.has_column(label):
                present.append(field_name)
            elif self.is_required(field_name):
                missing_required.append(field_name)
            else:
                missing_optional.append(field_name)
        return ColumnReport(present, missing_required, missing_optional)


CLASSIC = FeedSchema(name="classic", time_encoding=TimeEncoding.TIME_OF_DAY)
ABSOLUTE = FeedSchema(name="absolute", time_encoding=TimeEncoding.ABSOLUTE)

_REVISIONS: Dict[str, FeedSchema] = {
    CLASSIC.name: CLASSIC,
    ABSOLUTE.name: ABSOLUTE,
}


def register_schema(schema: FeedSchema) -> None:
    """Register an additional sheet revision."""
    if schema.name in _REVISIONS:
        logger.warning(f"Replacing feed revision '{schema.name}'")
    _REVISIONS[schema.name] = schema


def get_schema(name: str) -> FeedSchema:
    """
    Look up a registered revision.

    Raises:
        ConfigurationError: If no revision has this name
    """
    try:
        return _REVISIONS[name]
    except KeyError:
        raise ConfigurationError(
            ErrorCodes.CONFIG_UNKNOWN_REVISION,
            detail=f"'{name}' (known: {', '.join(sorted(_REVISIONS))})",
        ) from None


def available_schemas() -> List[str]:
    return sorted(_REVISIONS)
