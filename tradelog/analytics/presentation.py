"""
Display formatting for the statistics panel.

The statistics engine reports sentinels and NaN as they are; this module
decides how they look on screen.
"""

import math
from typing import Dict, Optional

from .statistics import StatisticsSummary


def display_amount(value: float, fallback: float = 0.0) -> float:
    """Replace infinite sentinels and NaN with ``fallback``."""
    if value is None or not math.isfinite(value):
        return fallback
    return value


def format_money(value: float) -> str:
    amount = display_amount(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percent(value: float) -> str:
    return f"{display_amount(value):.2f}%"


def format_ratio(value: float, undefined: str = "N/A") -> str:
    if value is None or math.isnan(value):
        return undefined
    return f"{value:.2f}"


def format_duration(seconds: Optional[float]) -> str:
    """Format a holding time, e.g. ``1h 05m 20s`` or ``4m 02s``."""
    if seconds is None or not math.isfinite(seconds):
        return "0s"
    total = int(round(seconds))
    sign = "-" if total < 0 else ""
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)
    if hours:
        return f"{sign}{hours}h {minutes:02d}m {secs:02d}s"
    if minutes:
        return f"{sign}{minutes}m {secs:02d}s"
    return f"{sign}{secs}s"


def format_summary(summary: StatisticsSummary) -> Dict[str, str]:
    """Display strings for every field of the statistics panel."""
    return {
        "tradeCount": str(summary.trade_count),
        "tradingDays": str(summary.trading_days),
        "totalInvested": format_money(summary.total_invested),
        "netPnl": format_money(summary.net_pnl),
        "netPnlInclCommission": format_money(summary.net_pnl_incl_commission),
        "winCount": str(summary.win_count),
        "lossCount": str(summary.loss_count),
        "winRate": (
            format_percent(summary.win_rate)
            if not math.isnan(summary.win_rate)
            else "N/A"
        ),
        "totalProfit": format_money(summary.total_profit),
        "totalLoss": format_money(summary.total_loss),
        "largestWinAmount": format_money(summary.largest_win_amount),
        "largestLossAmount": format_money(summary.largest_loss_amount),
        "largestWinPercent": format_percent(summary.largest_win_percent),
        "largestLossPercent": format_percent(summary.largest_loss_percent),
        "profitFactor": format_ratio(summary.profit_factor),
        "avgWin": format_money(summary.avg_win),
        "avgLoss": format_money(summary.avg_loss),
        "avgWinPercent": format_percent(summary.avg_win_percent),
        "avgLossPercent": format_percent(summary.avg_loss_percent),
        "avgHoldingTime": format_duration(summary.avg_holding_time),
        "avgWinHoldingTime": format_duration(summary.avg_win_holding_time),
        "avgLossHoldingTime": format_duration(summary.avg_loss_holding_time),
        "avgWinPerShare": format_money(summary.avg_win_per_share),
        "avgLossPerShare": format_money(summary.avg_loss_per_share),
        "avgWinShares": format_ratio(summary.avg_win_shares),
        "avgLossShares": format_ratio(summary.avg_loss_shares),
    }
