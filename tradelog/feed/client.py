"""
Sheet Feed Client

Fetch the JSON export of a Google Sheet over HTTP.
"""

import logging
import re
from typing import Optional, Union

import requests

from ..core.errors import ConfigurationError, ErrorCodes, NetworkError
from .decoder import FeedTable, decode_feed

logger = logging.getLogger(__name__)

SHEET_ID_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")
EXPORT_URL_TEMPLATE = (
    "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq?tqx=out:json&sheet={sheet}"
)


def extract_sheet_id(url: Optional[str]) -> str:
    """
    Extract the spreadsheet id from an edit or view URL.

    Raises:
        ConfigurationError: If the URL is missing or has no sheet id
    """
    if not url:
        raise ConfigurationError(ErrorCodes.CONFIG_MISSING_SHEET_URL)

    match = SHEET_ID_PATTERN.search(url)
    if not match:
        raise ConfigurationError(
            ErrorCodes.CONFIG_INVALID_SHEET_URL,
            detail=url,
        )
    return match.group(1)


def build_export_url(sheet_id: str, sheet: Union[int, str] = 0) -> str:
    return EXPORT_URL_TEMPLATE.format(sheet_id=sheet_id, sheet=sheet)


class SheetFeedClient:
    """
    HTTP client for one spreadsheet.

    The sheet URL is validated on construction so that a bad configuration
    fails before any request is made. No retries are attempted.
    """

    def __init__(
        self,
        sheet_url: Optional[str],
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.sheet_id = extract_sheet_id(sheet_url)
        self.timeout = timeout
        self._session = session or requests.Session()

    def export_url(self, sheet: Union[int, str] = 0) -> str:
        return build_export_url(self.sheet_id, sheet)

    def fetch(self, sheet: Union[int, str] = 0) -> str:
        """
        Fetch the raw export body for a sheet.

        Raises:
            NetworkError: On timeouts, connection failures or error statuses
        """
        url = self.export_url(sheet)
        logger.info(f"Fetching sheet {sheet} of {self.sheet_id}")

        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.Timeout as e:
            raise NetworkError(
                ErrorCodes.NETWORK_TIMEOUT,
                detail=f"after {self.timeout}s",
                original_error=e,
            ) from e
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise NetworkError(
                ErrorCodes.NETWORK_HTTP_ERROR,
                detail=f"HTTP {status}",
                original_error=e,
                context={"status_code": status},
            ) from e
        except requests.RequestException as e:
            raise NetworkError(
                ErrorCodes.NETWORK_UNREACHABLE,
                detail=str(e),
                original_error=e,
            ) from e

        return response.text

    def fetch_table(self, sheet: Union[int, str] = 0) -> FeedTable:
        """Fetch and decode a sheet."""
        return decode_feed(self.fetch(sheet))

    def close(self) -> None:
        self._session.close()
