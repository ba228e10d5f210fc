"""
Tradelog Error Handling Module

Structured error codes, user-facing messages and recovery hints for the
batch-level failures of a journal load. Row-level defects are not errors:
they are reported as skipped rows by the normalizer.
"""

import logging
import traceback
from dataclasses import dataclass
from datetime import datetime, date, timezone
from enum import Enum, auto
from typing import Any, Dict, Optional, Union

logger = logging.getLogger(__name__)

# =============================================================================
# Error Code Taxonomy
# =============================================================================


class ErrorCategory(Enum):
    """Top-level error categories."""

    NETWORK = "NETWORK"
    FEED = "FEED"
    CONFIG = "CONFIG"
    VALIDATION = "VALIDATION"
    STORAGE = "STORAGE"
    SYSTEM = "SYSTEM"


class ErrorSeverity(Enum):
    """Error severity levels for logging."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()
    CRITICAL = auto()


@dataclass
class ErrorCode:
    """Structured error code with metadata."""

    code: str
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    user_message: str
    http_status: int
    retryable: bool = False
    recovery_hint: str = ""

    def __str__(self) -> str:
        return f"{self.category.value}_{self.code}"


class ErrorCodes:
    """Central registry of all tradelog error codes."""

    # Network Errors (1xxx)
    NETWORK_TIMEOUT = ErrorCode(
        code="1001",
        category=ErrorCategory.NETWORK,
        severity=ErrorSeverity.WARNING,
        message="Feed request timed out",
        user_message="The spreadsheet took too long to answer. Please try again.",
        http_status=504,
        retryable=True,
        recovery_hint="Check your internet connection or raise the request timeout.",
    )

    NETWORK_UNREACHABLE = ErrorCode(
        code="1002",
        category=ErrorCategory.NETWORK,
        severity=ErrorSeverity.ERROR,
        message="Feed host unreachable",
        user_message="Unable to connect to the spreadsheet service.",
        http_status=503,
        retryable=True,
        recovery_hint="Verify network connectivity and try again.",
    )

    NETWORK_HTTP_ERROR = ErrorCode(
        code="1003",
        category=ErrorCategory.NETWORK,
        severity=ErrorSeverity.ERROR,
        message="Feed request returned an error status",
        user_message="The spreadsheet service rejected the request.",
        http_status=502,
        retryable=True,
        recovery_hint="Make sure the sheet is shared as 'anyone with the link can view'.",
    )

    # Feed Errors (2xxx)
    FEED_ENVELOPE = ErrorCode(
        code="2001",
        category=ErrorCategory.FEED,
        severity=ErrorSeverity.ERROR,
        message="Feed response envelope could not be stripped",
        user_message="The spreadsheet response is not in the expected format.",
        http_status=502,
        retryable=False,
        recovery_hint="The export endpoint may have changed its response wrapper.",
    )

    FEED_INVALID_JSON = ErrorCode(
        code="2002",
        category=ErrorCategory.FEED,
        severity=ErrorSeverity.ERROR,
        message="Feed payload is not valid JSON",
        user_message="Unable to read the spreadsheet data.",
        http_status=502,
        retryable=False,
        recovery_hint="Open the export URL in a browser to inspect the payload.",
    )

    FEED_MISSING_TABLE = ErrorCode(
        code="2003",
        category=ErrorCategory.FEED,
        severity=ErrorSeverity.ERROR,
        message="Feed payload has no table",
        user_message="The spreadsheet returned no table data.",
        http_status=502,
        retryable=False,
        recovery_hint="Check that the selected sheet exists and is not empty.",
    )

    # Configuration Errors (3xxx)
    CONFIG_MISSING_SHEET_URL = ErrorCode(
        code="3001",
        category=ErrorCategory.CONFIG,
        severity=ErrorSeverity.ERROR,
        message="Spreadsheet URL not configured",
        user_message="No spreadsheet URL is configured.",
        http_status=400,
        retryable=False,
        recovery_hint="Set TRADELOG_SHEET_URL or sheet_url in the settings file.",
    )

    CONFIG_INVALID_SHEET_URL = ErrorCode(
        code="3002",
        category=ErrorCategory.CONFIG,
        severity=ErrorSeverity.ERROR,
        message="Spreadsheet URL could not be parsed",
        user_message="The configured spreadsheet URL is not valid.",
        http_status=400,
        retryable=False,
        recovery_hint="Use the URL of the sheet as shown in the browser address bar.",
    )

    CONFIG_UNKNOWN_REVISION = ErrorCode(
        code="3003",
        category=ErrorCategory.CONFIG,
        severity=ErrorSeverity.ERROR,
        message="Unknown feed revision",
        user_message="The configured feed revision is not supported.",
        http_status=400,
        retryable=False,
        recovery_hint="Use one of the built-in feed revisions.",
    )

    CONFIG_INVALID_FILE = ErrorCode(
        code="3004",
        category=ErrorCategory.CONFIG,
        severity=ErrorSeverity.ERROR,
        message="Settings file could not be read",
        user_message="The settings file is invalid.",
        http_status=500,
        retryable=False,
        recovery_hint="Check the YAML syntax of the settings file.",
    )

    # Validation Errors (4xxx)
    VALIDATION_INVALID_DATE_RANGE = ErrorCode(
        code="4001",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.INFO,
        message="Invalid date range",
        user_message="The start date must not be after the end date.",
        http_status=400,
        retryable=False,
        recovery_hint="Swap or clear one of the range bounds.",
    )

    VALIDATION_NOT_FOUND = ErrorCode(
        code="4002",
        category=ErrorCategory.VALIDATION,
        severity=ErrorSeverity.INFO,
        message="Requested item not found",
        user_message="The requested trade does not exist.",
        http_status=404,
        retryable=False,
        recovery_hint="Trade ids change on every reload; refresh the view.",
    )

    # Storage Errors (5xxx)
    STORAGE_CORRUPT = ErrorCode(
        code="5001",
        category=ErrorCategory.STORAGE,
        severity=ErrorSeverity.WARNING,
        message="Stored trades could not be read",
        user_message="The local trade cache is unreadable.",
        http_status=500,
        retryable=False,
        recovery_hint="Reload trades from the spreadsheet to rebuild the cache.",
    )

    STORAGE_WRITE_FAILED = ErrorCode(
        code="5002",
        category=ErrorCategory.STORAGE,
        severity=ErrorSeverity.ERROR,
        message="Trades could not be written",
        user_message="Unable to save trades locally.",
        http_status=500,
        retryable=True,
        recovery_hint="Check free disk space and permissions of the cache path.",
    )

    STORAGE_UNAVAILABLE = ErrorCode(
        code="5003",
        category=ErrorCategory.STORAGE,
        severity=ErrorSeverity.WARNING,
        message="Image directory is not readable",
        user_message="Chart images are not available.",
        http_status=500,
        retryable=False,
        recovery_hint="Check the configured images directory.",
    )

    # System Errors (9xxx)
    SYSTEM_INTERNAL_ERROR = ErrorCode(
        code="9001",
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.CRITICAL,
        message="Internal error",
        user_message="Something went wrong.",
        http_status=500,
        retryable=False,
        recovery_hint="See the logs for details.",
    )


# =============================================================================
# Exception Classes
# =============================================================================


class TradeLogError(Exception):
    """
    Base exception for all tradelog errors.

    Carries a structured error code, a user-friendly message and a
    recovery suggestion.
    """

    def __init__(
        self,
        error_code: ErrorCode,
        detail: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.error_code = error_code
        self.detail = detail
        self.original_error = original_error
        self.context = context or {}
        self.debug_info: Dict[str, Any] = {}
        self.timestamp = datetime.now(timezone.utc)

        if original_error:
            self.debug_info["original_traceback"] = traceback.format_exception(
                type(original_error), original_error, original_error.__traceback__
            )

        super().__init__(self.technical_message)

    @property
    def code(self) -> str:
        """Full error code string."""
        return str(self.error_code)

    @property
    def category(self) -> ErrorCategory:
        return self.error_code.category

    @property
    def severity(self) -> ErrorSeverity:
        return self.error_code.severity

    @property
    def http_status(self) -> int:
        return self.error_code.http_status

    @property
    def is_retryable(self) -> bool:
        """Whether the operation can be retried."""
        return self.error_code.retryable

    @property
    def user_message(self) -> str:
        """User-friendly error message."""
        msg = self.error_code.user_message
        if self.detail:
            msg = f"{msg} ({self.detail})"
        return msg

    @property
    def technical_message(self) -> str:
        """Technical error message for logging."""
        msg = f"[{self.code}] {self.error_code.message}"
        if self.detail:
            msg = f"{msg}: {self.detail}"
        return msg

    @property
    def recovery_hint(self) -> str:
        return self.error_code.recovery_hint

    def to_dict(self, include_debug: bool = False) -> Dict[str, Any]:
        """
        Convert error to dictionary for API responses.

        Args:
            include_debug: Include technical message and context
        """
        result = {
            "code": self.code,
            "category": self.category.value,
            "message": self.user_message,
            "recovery_hint": self.recovery_hint,
            "retryable": self.is_retryable,
            "timestamp": self.timestamp.isoformat(),
        }

        if include_debug:
            result["debug"] = {
                "technical_message": self.technical_message,
                "context": self.context,
                "debug_info": self.debug_info,
            }

        return result

    def log(self) -> None:
        """Log the error with its severity."""
        log_method = getattr(logger, self.severity.name.lower(), logger.error)
        log_method(
            self.technical_message,
            extra={
                "ctx_error_code": self.code,
                "ctx_retryable": self.is_retryable,
            },
        )


class FeedFormatError(TradeLogError):
    """The feed envelope or payload is malformed."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.FEED_INVALID_JSON,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


class ConfigurationError(TradeLogError):
    """Missing or unusable configuration."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.CONFIG_MISSING_SHEET_URL,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


class NetworkError(TradeLogError):
    """Transport-level failures while fetching the feed."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.NETWORK_UNREACHABLE,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


class ValidationError(TradeLogError):
    """Invalid caller input."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.VALIDATION_INVALID_DATE_RANGE,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


class StorageError(TradeLogError):
    """Local cache or image directory failures."""

    def __init__(
        self,
        error_code: ErrorCode = ErrorCodes.STORAGE_CORRUPT,
        **kwargs,
    ):
        super().__init__(error_code, **kwargs)


# =============================================================================
# API Response Helpers
# =============================================================================


def create_error_response(
    error: TradeLogError,
    debug_mode: bool = False,
) -> Dict[str, Any]:
    """
    Create a standardized error response for API endpoints.

    Args:
        error: The tradelog error
        debug_mode: Include debug information
    """
    return {
        "success": False,
        "data": None,
        "error": error.to_dict(include_debug=debug_mode),
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


# =============================================================================
# Utility Functions
# =============================================================================


def wrap_exception(
    exception: Exception,
    default_code: ErrorCode = ErrorCodes.SYSTEM_INTERNAL_ERROR,
) -> TradeLogError:
    """
    Wrap a generic exception in a TradeLogError.

    Maps common exception types to appropriate error codes.
    """
    if isinstance(exception, TradeLogError):
        return exception

    exception_mapping = {
        TimeoutError: (NetworkError, ErrorCodes.NETWORK_TIMEOUT),
        ConnectionError: (NetworkError, ErrorCodes.NETWORK_UNREACHABLE),
        PermissionError: (StorageError, ErrorCodes.STORAGE_WRITE_FAILED),
    }

    for exc_type, (error_cls, error_code) in exception_mapping.items():
        if isinstance(exception, exc_type):
            return error_cls(
                error_code,
                detail=str(exception),
                original_error=exception,
            )

    return TradeLogError(
        default_code,
        detail=str(exception),
        original_error=exception,
    )


def validate_date_range(
    start_date: Optional[Union[date, datetime]],
    end_date: Optional[Union[date, datetime]],
) -> None:
    """
    Validate an inclusive date range. Either bound may be open.

    Raises:
        ValidationError: If both bounds are set and start is after end
    """
    if start_date is None or end_date is None:
        return

    if start_date > end_date:
        raise ValidationError(
            ErrorCodes.VALIDATION_INVALID_DATE_RANGE,
            detail="Start date must not be after end date",
            context={"start_date": str(start_date), "end_date": str(end_date)},
        )


__all__ = [
    # Enums
    "ErrorCategory",
    "ErrorSeverity",
    # Error Codes
    "ErrorCode",
    "ErrorCodes",
    # Exceptions
    "TradeLogError",
    "FeedFormatError",
    "ConfigurationError",
    "NetworkError",
    "ValidationError",
    "StorageError",
    # API Response
    "create_error_response",
    # Utilities
    "wrap_exception",
    "validate_date_range",
]
