"""
Analytics Module

Daily grouping and aggregate statistics over trade collections.
"""

from .daily import DailyPerformance, daily_frame, group_by_day
from .presentation import display_amount, format_duration, format_summary
from .statistics import (
    FIELD_POLICIES,
    EmptyPolicy,
    StatisticsSummary,
    holding_time_seconds,
    summarize,
)

__all__ = [
    # Daily
    "DailyPerformance",
    "group_by_day",
    "daily_frame",
    # Statistics
    "EmptyPolicy",
    "FIELD_POLICIES",
    "StatisticsSummary",
    "holding_time_seconds",
    "summarize",
    # Presentation
    "display_amount",
    "format_duration",
    "format_summary",
]
