"""
Shared test fixtures for the tradelog test suite.
"""

import json
from datetime import date, datetime
from typing import Any, Dict, List, Optional

import pytest

from tradelog.feed.decoder import FeedTable
from tradelog.feed.schema import DEFAULT_COLUMNS
from tradelog.trades.models import Trade

GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"

LABELS = list(DEFAULT_COLUMNS.values())


def gviz_date(day: date) -> str:
    """Sheet date cell, month zero-based."""
    return f"Date({day.year},{day.month - 1},{day.day})"


def gviz_datetime(moment: datetime) -> str:
    return (
        f"Date({moment.year},{moment.month - 1},{moment.day},"
        f"{moment.hour},{moment.minute},{moment.second})"
    )


def build_row(
    day: Optional[date] = date(2025, 3, 19),
    symbol: Optional[str] = "ABC",
    entry: str = "Date(1899,11,30,9,30,0)",
    exit_: str = "Date(1899,11,30,10,15,0)",
    **overrides: Any,
) -> Dict[str, Any]:
    """One journal sheet row keyed by column label."""
    row = {
        "Date": gviz_date(day) if day is not None else None,
        "Symbol": symbol,
        "Time of entry": entry,
        "Time of exit": exit_,
        "Buys": 100,
        "Sells": 100,
        "Net": 0,
        "Average Buy Price": 10.0,
        "Average Sell Price": 10.5,
        "Total Buy Price": 1000.0,
        "Total Sold Price": 1050.0,
        "Net Total": 50.0,
        "Realized P&L%": 5.0,
        "Realized P&L": 50.0,
        "Commission": 2.0,
        "Net Incl. Commission": 48.0,
        "What happened before enter": "Broke out of range",
        "What happened after exit": None,
        "Comment": None,
        "On work": "TRUE",
    }
    row.update(overrides)
    return row


def build_gviz_payload(labels: List[str], rows: List[Dict[str, Any]]) -> str:
    """Wrap rows in the gviz JSON envelope as the export endpoint does."""
    table = {
        "cols": [
            {"id": chr(ord("A") + i % 26), "label": label, "type": "string"}
            for i, label in enumerate(labels)
        ],
        "rows": [
            {
                "c": [
                    None if row.get(label) is None else {"v": row.get(label)}
                    for label in labels
                ]
            }
            for row in rows
        ],
    }
    body = {"version": "0.6", "reqId": "0", "status": "ok", "table": table}
    return GVIZ_PREFIX + json.dumps(body) + GVIZ_SUFFIX


@pytest.fixture
def row_factory():
    """Factory for journal sheet rows."""
    return build_row


@pytest.fixture
def gviz_response():
    """Factory turning rows into a raw export response body."""

    def _make(rows: List[Dict[str, Any]], labels: Optional[List[str]] = None) -> str:
        return build_gviz_payload(labels or LABELS, rows)

    return _make


@pytest.fixture
def feed_table():
    """Factory for decoded tables with the full journal layout."""

    def _make(rows: List[Dict[str, Any]], labels: Optional[List[str]] = None) -> FeedTable:
        labels = labels or LABELS
        return FeedTable(
            labels=list(labels),
            rows=[{label: row.get(label) for label in labels} for row in rows],
        )

    return _make


@pytest.fixture
def make_trade():
    """Factory for Trade records with sensible defaults."""

    def _make(
        id: int = 0,
        symbol: str = "ABC",
        day: date = date(2025, 3, 19),
        entry: str = "09:30:00",
        exit_: str = "10:15:00",
        **kwargs: Any,
    ) -> Trade:
        values = {
            "buys": 100.0,
            "sells": 100.0,
            "net": 0.0,
            "average_buy_price": 10.0,
            "average_sell_price": 10.5,
            "total_buy_price": 1000.0,
            "total_sold_price": 1050.0,
            "net_total": 50.0,
            "realized_pnl": 50.0,
            "realized_pnl_percent": 5.0,
            "commission": 2.0,
            "net_incl_commission": 48.0,
        }
        values.update(kwargs)
        return Trade(
            id=id,
            symbol=symbol,
            date=day,
            time_of_entry=datetime.combine(day, datetime.strptime(entry, "%H:%M:%S").time()),
            time_of_exit=datetime.combine(day, datetime.strptime(exit_, "%H:%M:%S").time()),
            **values,
        )

    return _make


@pytest.fixture
def sample_trades(make_trade):
    """Five trades over three days: three wins, one loss, one breakeven."""
    return [
        make_trade(0, "ABC", date(2025, 3, 3), net_total=50.0, total_buy_price=1000.0),
        make_trade(1, "XYZ", date(2025, 3, 3), net_total=-20.0, total_buy_price=500.0,
                   average_sell_price=9.8, net_incl_commission=-22.0),
        make_trade(2, "ABC", date(2025, 3, 4), net_total=30.0, total_buy_price=600.0),
        make_trade(3, "QQQ", date(2025, 3, 5), net_total=0.0, total_buy_price=400.0,
                   average_sell_price=10.0, net_incl_commission=-2.0),
        make_trade(4, "XYZ", date(2025, 3, 5), net_total=20.0, total_buy_price=400.0),
    ]
