"""Tests for the error taxonomy."""

from datetime import date

import pytest

from tradelog.core.errors import (
    ConfigurationError,
    ErrorCategory,
    ErrorCodes,
    FeedFormatError,
    NetworkError,
    StorageError,
    TradeLogError,
    ValidationError,
    create_error_response,
    validate_date_range,
    wrap_exception,
)


class TestTradeLogError:
    def test_code_and_messages(self):
        error = FeedFormatError(detail="Unexpected token")

        assert error.code == "FEED_2002"
        assert error.category is ErrorCategory.FEED
        assert error.http_status == 502
        assert "Unexpected token" in error.user_message
        assert error.technical_message.startswith("[FEED_2002]")
        assert str(error) == error.technical_message

    def test_default_codes(self):
        assert ConfigurationError().error_code is ErrorCodes.CONFIG_MISSING_SHEET_URL
        assert NetworkError().error_code is ErrorCodes.NETWORK_UNREACHABLE
        assert StorageError().error_code is ErrorCodes.STORAGE_CORRUPT
        assert ValidationError().error_code is ErrorCodes.VALIDATION_INVALID_DATE_RANGE

    def test_to_dict(self):
        error = NetworkError(ErrorCodes.NETWORK_TIMEOUT, context={"sheet": "0"})

        public = error.to_dict()
        assert public["code"] == "NETWORK_1001"
        assert public["retryable"] is True
        assert "debug" not in public

        debug = error.to_dict(include_debug=True)
        assert debug["debug"]["context"] == {"sheet": "0"}

    def test_original_traceback_kept(self):
        try:
            raise ValueError("boom")
        except ValueError as e:
            error = StorageError(original_error=e)
        assert "original_traceback" in error.debug_info

    def test_error_response(self):
        response = create_error_response(ConfigurationError())
        assert response["success"] is False
        assert response["data"] is None
        assert response["error"]["category"] == "CONFIG"

    def test_timestamps_are_utc(self):
        error = NetworkError()
        assert error.timestamp.tzinfo is not None
        assert error.timestamp.utcoffset().total_seconds() == 0
        assert error.to_dict()["timestamp"].endswith("+00:00")
        assert create_error_response(error)["timestamp"].endswith("Z")


class TestHelpers:
    def test_wrap_passthrough(self):
        error = NetworkError()
        assert wrap_exception(error) is error

    def test_wrap_timeout(self):
        wrapped = wrap_exception(TimeoutError("slow"))
        assert isinstance(wrapped, NetworkError)
        assert wrapped.error_code is ErrorCodes.NETWORK_TIMEOUT

    def test_wrap_unknown(self):
        wrapped = wrap_exception(RuntimeError("odd"))
        assert type(wrapped) is TradeLogError
        assert wrapped.http_status == 500

    def test_validate_date_range(self):
        validate_date_range(None, date(2025, 1, 1))
        validate_date_range(date(2025, 1, 1), date(2025, 1, 1))
        with pytest.raises(ValidationError) as exc_info:
            validate_date_range(date(2025, 2, 1), date(2025, 1, 1))
        assert exc_info.value.http_status == 400
