"""
Tradelog Configuration

Settings loading and logging setup.
"""

from .logging import configure_logging, log_duration, set_load_context
from .settings import JournalSettings, get_settings, load_settings

__all__ = [
    "JournalSettings",
    "get_settings",
    "load_settings",
    "configure_logging",
    "log_duration",
    "set_load_context",
]
