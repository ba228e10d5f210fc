"""
Tradelog REST API

FastAPI application exposing the trade journal.
"""

from .main import create_app

__all__ = ["create_app"]
