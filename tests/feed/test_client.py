"""Tests for the sheet feed client."""

from unittest.mock import MagicMock

import pytest
import requests

from tradelog.core.errors import ConfigurationError, ErrorCodes, NetworkError
from tradelog.feed.client import SheetFeedClient, build_export_url, extract_sheet_id

SHEET_URL = "https://docs.google.com/spreadsheets/d/1AbC-d_9/edit#gid=0"


@pytest.fixture
def mock_session():
    session = MagicMock(spec=requests.Session)
    response = MagicMock()
    response.text = "payload"
    response.raise_for_status.return_value = None
    session.get.return_value = response
    return session


class TestSheetUrl:
    def test_extract_sheet_id(self):
        assert extract_sheet_id(SHEET_URL) == "1AbC-d_9"

    def test_missing_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            extract_sheet_id("")
        assert exc_info.value.error_code is ErrorCodes.CONFIG_MISSING_SHEET_URL

    def test_invalid_url(self):
        with pytest.raises(ConfigurationError) as exc_info:
            extract_sheet_id("https://example.com/not-a-sheet")
        assert exc_info.value.error_code is ErrorCodes.CONFIG_INVALID_SHEET_URL

    def test_build_export_url(self):
        url = build_export_url("abc", 2)
        assert url == (
            "https://docs.google.com/spreadsheets/d/abc/gviz/tq?tqx=out:json&sheet=2"
        )


class TestSheetFeedClient:
    def test_bad_url_fails_before_request(self):
        with pytest.raises(ConfigurationError):
            SheetFeedClient(None)

    def test_fetch(self, mock_session):
        client = SheetFeedClient(SHEET_URL, timeout=5.0, session=mock_session)
        assert client.fetch("1") == "payload"
        mock_session.get.assert_called_once_with(
            build_export_url("1AbC-d_9", "1"), timeout=5.0
        )

    def test_timeout(self, mock_session):
        mock_session.get.side_effect = requests.Timeout("slow")
        client = SheetFeedClient(SHEET_URL, session=mock_session)

        with pytest.raises(NetworkError) as exc_info:
            client.fetch()
        assert exc_info.value.error_code is ErrorCodes.NETWORK_TIMEOUT
        assert exc_info.value.is_retryable

    def test_http_error(self, mock_session):
        response = MagicMock(status_code=403)
        error = requests.HTTPError("forbidden", response=response)
        mock_session.get.return_value.raise_for_status.side_effect = error
        client = SheetFeedClient(SHEET_URL, session=mock_session)

        with pytest.raises(NetworkError) as exc_info:
            client.fetch()
        assert exc_info.value.error_code is ErrorCodes.NETWORK_HTTP_ERROR
        assert exc_info.value.context["status_code"] == 403

    def test_connection_error(self, mock_session):
        mock_session.get.side_effect = requests.ConnectionError("down")
        client = SheetFeedClient(SHEET_URL, session=mock_session)

        with pytest.raises(NetworkError) as exc_info:
            client.fetch()
        assert exc_info.value.error_code is ErrorCodes.NETWORK_UNREACHABLE

    def test_fetch_table(self, mock_session, gviz_response):
        mock_session.get.return_value.text = gviz_response(
            [{"Symbol": "ABC"}], labels=["Symbol"]
        )
        client = SheetFeedClient(SHEET_URL, session=mock_session)
        table = client.fetch_table()
        assert table.rows == [{"Symbol": "ABC"}]
