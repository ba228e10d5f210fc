"""
Trade Data Models

The canonical closed round-trip trade produced by the normalizer.
"""

import hashlib
import math
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Any, Dict, Iterable, Union

import pandas as pd


def _parse_date(value: Union[str, date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return _parse_datetime(value).date()


def _parse_datetime(value: Union[str, date, datetime]) -> datetime:
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed.replace(tzinfo=None)


def _float(value: Any) -> float:
    if value is None:
        return math.nan
    return float(value)


@dataclass(frozen=True)
class Trade:
    """
    One closed round-trip position.

    ``id`` is an ordinal within one load and changes on every reload; use
    :meth:`durable_key` when a stable identifier is needed.
    """

    id: int
    symbol: str
    date: date
    time_of_entry: datetime
    time_of_exit: datetime

    # Share counts
    buys: float = math.nan
    sells: float = math.nan
    net: float = math.nan

    # Prices
    average_buy_price: float = math.nan
    average_sell_price: float = math.nan

    # Monetary totals
    total_buy_price: float = math.nan
    total_sold_price: float = math.nan
    net_total: float = math.nan
    realized_pnl: float = math.nan
    realized_pnl_percent: float = math.nan
    commission: float = math.nan
    net_incl_commission: float = math.nan

    # Journal notes
    what_happened_before_enter: str = ""
    what_happened_after_exit: str = ""
    comment: str = ""
    on_work: bool = False

    @property
    def is_win(self) -> bool:
        return self.net_total > 0

    @property
    def is_loss(self) -> bool:
        return self.net_total < 0

    @property
    def trade_percent(self) -> float:
        """Net result relative to capital deployed, NaN without capital."""
        if self.total_buy_price == 0:
            return math.nan
        return self.net_total / self.total_buy_price * 100

    @property
    def per_share_pnl(self) -> float:
        return self.average_sell_price - self.average_buy_price

    def durable_key(self) -> str:
        """Reload-stable key derived from symbol, day and entry time."""
        raw = f"{self.symbol}|{self.date.isoformat()}|{self.time_of_entry.isoformat()}"
        return hashlib.sha1(raw.encode("utf-8")).hexdigest()[:16]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "date": self.date.isoformat(),
            "timeOfEntry": self.time_of_entry.isoformat(timespec="seconds"),
            "timeOfExit": self.time_of_exit.isoformat(timespec="seconds"),
            "buys": self.buys,
            "sells": self.sells,
            "net": self.net,
            "averageBuyPrice": self.average_buy_price,
            "averageSellPrice": self.average_sell_price,
            "totalBuyPrice": self.total_buy_price,
            "totalSoldPrice": self.total_sold_price,
            "netTotal": self.net_total,
            "realizedPnL": self.realized_pnl,
            "realizedPnLPercent": self.realized_pnl_percent,
            "commission": self.commission,
            "netInclCommission": self.net_incl_commission,
            "whatHappenedBeforeEnter": self.what_happened_before_enter,
            "whatHappenedAfterExit": self.what_happened_after_exit,
            "comment": self.comment,
            "onWork": self.on_work,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Trade":
        """Rehydrate a trade serialized with :meth:`to_dict`."""
        return cls(
            id=int(data["id"]),
            symbol=data["symbol"],
            date=_parse_date(data["date"]),
            time_of_entry=_parse_datetime(data["timeOfEntry"]),
            time_of_exit=_parse_datetime(data["timeOfExit"]),
            buys=_float(data.get("buys")),
            sells=_float(data.get("sells")),
            net=_float(data.get("net")),
            average_buy_price=_float(data.get("averageBuyPrice")),
            average_sell_price=_float(data.get("averageSellPrice")),
            total_buy_price=_float(data.get("totalBuyPrice")),
            total_sold_price=_float(data.get("totalSoldPrice")),
            net_total=_float(data.get("netTotal")),
            realized_pnl=_float(data.get("realizedPnL")),
            realized_pnl_percent=_float(data.get("realizedPnLPercent")),
            commission=_float(data.get("commission")),
            net_incl_commission=_float(data.get("netInclCommission")),
            what_happened_before_enter=data.get("whatHappenedBeforeEnter") or "",
            what_happened_after_exit=data.get("whatHappenedAfterExit") or "",
            comment=data.get("comment") or "",
            on_work=bool(data.get("onWork", False)),
        )


def trades_to_dataframe(trades: Iterable[Trade]) -> pd.DataFrame:
    """Export trades to a DataFrame with one column per field."""
    columns = [f.name for f in fields(Trade)]
    records = [
        {name: getattr(trade, name) for name in columns}
        for trade in trades
    ]
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(records, columns=columns)
