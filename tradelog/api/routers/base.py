"""
Tradelog API Router Base Utilities

Response envelope, JSON conversion helpers and shared query parsing.
"""

import logging
import math
from datetime import date, datetime, timezone
from typing import Any, Optional

import numpy as np
import pandas as pd
from fastapi import Query
from pydantic import BaseModel, Field

from ...core.errors import TradeLogError
from ...trades.filters import DateRange

logger = logging.getLogger(__name__)


# =============================================================================
# Response Models
# =============================================================================


class ApiResponse(BaseModel):
    """
    Standard API response wrapper.

    Every endpoint returns its payload wrapped in this model.
    """
    success: bool = Field(..., description="Whether the request succeeded")
    data: Optional[Any] = Field(default=None, description="Response payload")
    error: Optional[Any] = Field(default=None, description="Error details if failed")
    timestamp: str = Field(..., description="ISO timestamp of response")


# =============================================================================
# Helper Functions
# =============================================================================


def get_timestamp() -> str:
    """Current ISO timestamp with Z suffix."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def to_json_safe(obj: Any) -> Any:
    """
    Convert values for JSON serialization.

    NaN and infinities become None; numpy scalars become Python numbers;
    dates become ISO strings.
    """
    if isinstance(obj, dict):
        return {k: to_json_safe(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [to_json_safe(v) for v in obj]
    elif isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, (float, np.floating)):
        value = float(obj)
        return value if math.isfinite(value) else None
    elif isinstance(obj, pd.Timestamp):
        return obj.isoformat()
    elif isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return obj


def create_response(
    data: Any = None,
    error: Optional[Any] = None,
    success: bool = True,
) -> ApiResponse:
    """Create a standardized API response."""
    return ApiResponse(
        success=success and error is None,
        data=to_json_safe(data) if data is not None else None,
        error=error,
        timestamp=get_timestamp(),
    )


def date_range_query(
    start: Optional[date] = Query(default=None, description="First day (YYYY-MM-DD)"),
    end: Optional[date] = Query(default=None, description="Last day (YYYY-MM-DD)"),
) -> DateRange:
    """FastAPI dependency turning ``start``/``end`` into a DateRange."""
    return DateRange(start, end)


def log_api_error(path: str, error: TradeLogError) -> None:
    logger.warning(f"{path} failed: {error.technical_message}")
