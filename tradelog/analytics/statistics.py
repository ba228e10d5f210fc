"""
Trade Statistics Module

Reduce a set of trades to the aggregate figures of the statistics panel:
counts, win/loss breakdown, extrema, profit factor, holding times and
per-share results.

Degenerate inputs never raise. Two empty-set policies are in use:

- ``EmptyPolicy.ZERO_AS_UNDEFINED``: the win rate of zero trades is NaN.
- ``EmptyPolicy.ZERO_AS_ZERO``: the average of an empty win/loss subset is 0.

Extrema with no qualifying trade return an infinite sentinel (``-inf`` for
largest wins, ``+inf`` for largest losses); turning these into a display
value is left to :mod:`tradelog.analytics.presentation`.
"""

import logging
import math
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence

import numpy as np

from ..feed.schema import TimeEncoding
from ..trades.models import Trade

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 3600


class EmptyPolicy(Enum):
    """Value reported by an aggregate over an empty set."""

    ZERO_AS_UNDEFINED = "zero_as_undefined"
    ZERO_AS_ZERO = "zero_as_zero"


FIELD_POLICIES: Dict[str, EmptyPolicy] = {
    "win_rate": EmptyPolicy.ZERO_AS_UNDEFINED,
    "avg_win": EmptyPolicy.ZERO_AS_ZERO,
    "avg_loss": EmptyPolicy.ZERO_AS_ZERO,
    "avg_win_percent": EmptyPolicy.ZERO_AS_ZERO,
    "avg_loss_percent": EmptyPolicy.ZERO_AS_ZERO,
    "avg_holding_time": EmptyPolicy.ZERO_AS_ZERO,
    "avg_win_holding_time": EmptyPolicy.ZERO_AS_ZERO,
    "avg_loss_holding_time": EmptyPolicy.ZERO_AS_ZERO,
    "avg_win_per_share": EmptyPolicy.ZERO_AS_ZERO,
    "avg_loss_per_share": EmptyPolicy.ZERO_AS_ZERO,
    "avg_win_shares": EmptyPolicy.ZERO_AS_ZERO,
    "avg_loss_shares": EmptyPolicy.ZERO_AS_ZERO,
}


def _empty_value(policy: EmptyPolicy) -> float:
    return math.nan if policy is EmptyPolicy.ZERO_AS_UNDEFINED else 0.0


def _ratio(numerator: float, denominator: float, policy: EmptyPolicy) -> float:
    if denominator == 0:
        return _empty_value(policy)
    return numerator / denominator


def _mean(values: Sequence[float], policy: EmptyPolicy = EmptyPolicy.ZERO_AS_ZERO) -> float:
    if not values:
        return _empty_value(policy)
    return float(np.mean(values))


def _largest(values: Sequence[float]) -> float:
    """Maximum, or the -inf sentinel for an empty set. NaN propagates."""
    if not values:
        return -math.inf
    return float(np.max(values))


def _smallest(values: Sequence[float]) -> float:
    """Minimum, or the +inf sentinel for an empty set. NaN propagates."""
    if not values:
        return math.inf
    return float(np.min(values))


def holding_time_seconds(
    trade: Trade,
    time_encoding: TimeEncoding = TimeEncoding.TIME_OF_DAY,
) -> float:
    """
    Seconds between entry and exit.

    When only the time of day is known, an exit clock time before the entry
    clock time means the session crossed midnight and one day is added.
    Absolute timestamps are used as they are.
    """
    seconds = (trade.time_of_exit - trade.time_of_entry).total_seconds()
    if seconds < 0 and time_encoding is TimeEncoding.TIME_OF_DAY:
        seconds += SECONDS_PER_DAY
    return seconds


@dataclass
class StatisticsSummary:
    """Aggregate statistics over a set of trades."""

    # Counts
    trade_count: int
    trading_days: int
    win_count: int
    loss_count: int
    breakeven_count: int

    # Totals
    total_invested: float
    net_pnl: float
    net_pnl_incl_commission: float
    total_profit: float
    total_loss: float

    # Extrema (sentinels when empty)
    largest_win_amount: float
    largest_loss_amount: float
    largest_win_percent: float
    largest_loss_percent: float

    # Ratios
    win_rate: float
    profit_factor: float

    # Averages
    avg_win: float
    avg_loss: float
    avg_win_percent: float
    avg_loss_percent: float
    avg_holding_time: float
    avg_win_holding_time: float
    avg_loss_holding_time: float
    avg_win_per_share: float
    avg_loss_per_share: float
    avg_win_shares: float
    avg_loss_shares: float

    def policy(self, field_name: str) -> EmptyPolicy:
        """Empty-set policy of a derived field."""
        return FIELD_POLICIES.get(field_name, EmptyPolicy.ZERO_AS_ZERO)

    def to_dict(self) -> Dict[str, Any]:
        """Raw values keyed in camelCase."""

        def camel(name: str) -> str:
            head, *rest = name.split("_")
            return head + "".join(part.capitalize() for part in rest)

        return {camel(key): value for key, value in asdict(self).items()}


@dataclass
class _Bucket:
    amounts: List[float]
    percents: List[float]
    holding: List[float]
    per_share: List[float]
    shares: List[float]

    @classmethod
    def empty(cls) -> "_Bucket":
        return cls([], [], [], [], [])

    def add(self, trade: Trade, holding: float) -> None:
        self.amounts.append(trade.net_total)
        self.percents.append(trade.trade_percent)
        self.holding.append(holding)
        self.per_share.append(trade.per_share_pnl)
        self.shares.append(trade.buys)


def summarize(
    trades: Iterable[Trade],
    time_encoding: TimeEncoding = TimeEncoding.TIME_OF_DAY,
) -> StatisticsSummary:
    """
    Compute aggregate statistics in a single pass.

    A trade is a win when ``net_total > 0`` and a loss when ``net_total < 0``.
    Anything else (zero or NaN) is counted in the totals only.

    Args:
        trades: Trades to summarize, typically already date-filtered
        time_encoding: Encoding of the feed the trades came from

    Returns:
        StatisticsSummary; never raises on empty or degenerate input
    """
    trade_count = 0
    days = set()
    total_invested = 0.0
    net_pnl = 0.0
    net_pnl_incl_commission = 0.0
    all_holding: List[float] = []
    wins = _Bucket.empty()
    losses = _Bucket.empty()

    for trade in trades:
        trade_count += 1
        days.add(trade.date)
        total_invested += trade.total_buy_price
        net_pnl += trade.net_total
        net_pnl_incl_commission += trade.net_incl_commission

        holding = holding_time_seconds(trade, time_encoding)
        all_holding.append(holding)

        if trade.is_win:
            wins.add(trade, holding)
        elif trade.is_loss:
            losses.add(trade, holding)

    win_count = len(wins.amounts)
    loss_count = len(losses.amounts)
    total_profit = float(sum(wins.amounts))
    total_loss = float(sum(losses.amounts))

    # Deliberate clamp: no losses means dividing by 1 instead of 0
    loss_denominator = total_loss if total_loss != 0 else 1
    profit_factor = abs(total_profit / loss_denominator)

    summary = StatisticsSummary(
        trade_count=trade_count,
        trading_days=len(days),
        win_count=win_count,
        loss_count=loss_count,
        breakeven_count=trade_count - win_count - loss_count,
        total_invested=total_invested,
        net_pnl=net_pnl,
        net_pnl_incl_commission=net_pnl_incl_commission,
        total_profit=total_profit,
        total_loss=total_loss,
        largest_win_amount=_largest(wins.amounts),
        largest_loss_amount=_smallest(losses.amounts),
        largest_win_percent=_largest(wins.percents),
        largest_loss_percent=_smallest(losses.percents),
        win_rate=_ratio(win_count, trade_count, FIELD_POLICIES["win_rate"]) * 100,
        profit_factor=profit_factor,
        avg_win=_mean(wins.amounts),
        avg_loss=_mean(losses.amounts),
        avg_win_percent=_mean(wins.percents),
        avg_loss_percent=_mean(losses.percents),
        avg_holding_time=_mean(all_holding),
        avg_win_holding_time=_mean(wins.holding),
        avg_loss_holding_time=_mean(losses.holding),
        avg_win_per_share=_mean(wins.per_share),
        avg_loss_per_share=_mean(losses.per_share),
        avg_win_shares=_mean(wins.shares),
        avg_loss_shares=_mean(losses.shares),
    )

    logger.debug(
        f"Summarized {trade_count} trades: {win_count} wins, {loss_count} losses"
    )
    return summary
