"""
Daily Performance Module

Group trades by calendar day for the calendar view.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List

import pandas as pd

from ..trades.models import Trade

logger = logging.getLogger(__name__)


@dataclass
class DailyPerformance:
    """Trades of one calendar day and their combined result."""

    date: date
    trades: List[Trade] = field(default_factory=list)
    total_invested: float = 0.0
    net_profit: float = 0.0

    @property
    def net_profit_percent(self) -> float:
        """Net profit over invested capital; NaN when nothing was invested."""
        if self.total_invested == 0:
            return math.nan
        return self.net_profit / self.total_invested * 100

    @property
    def trade_count(self) -> int:
        return len(self.trades)

    @property
    def is_profitable(self) -> bool:
        return self.net_profit >= 0

    def event_title(self) -> str:
        """Calendar label, e.g. ``Daily P&L: 5.00% ($50.0)``."""
        return f"Daily P&L: {self.net_profit_percent:.2f}% (${self.net_profit})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "tradeCount": self.trade_count,
            "totalInvested": self.total_invested,
            "netProfit": self.net_profit,
            "netProfitPercent": self.net_profit_percent,
            "tradeIds": [trade.id for trade in self.trades],
        }


def group_by_day(trades: Iterable[Trade]) -> List[DailyPerformance]:
    """
    Group trades by their calendar day.

    Days are returned in the order they are first seen; trades keep their
    input order within a day.
    """
    days: Dict[str, DailyPerformance] = {}
    for trade in trades:
        key = trade.date.isoformat()
        day = days.get(key)
        if day is None:
            day = days[key] = DailyPerformance(date=trade.date)
        day.trades.append(trade)
        day.total_invested += trade.total_buy_price
        day.net_profit += trade.net_total

    logger.debug(f"Grouped trades into {len(days)} days")
    return list(days.values())


def daily_frame(performances: Iterable[DailyPerformance]) -> pd.DataFrame:
    """Daily results as a date-sorted DataFrame."""
    columns = ["date", "trade_count", "total_invested", "net_profit", "net_profit_percent"]
    data = [
        {
            "date": pd.Timestamp(p.date),
            "trade_count": p.trade_count,
            "total_invested": p.total_invested,
            "net_profit": p.net_profit,
            "net_profit_percent": p.net_profit_percent,
        }
        for p in performances
    ]
    if not data:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(data, columns=columns).sort_values("date").reset_index(drop=True)
