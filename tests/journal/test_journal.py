"""Tests for the TradeJournal session."""

import asyncio
import threading
from datetime import date
from unittest.mock import MagicMock

import pytest

from tradelog.config.logging import get_load_id
from tradelog.config.settings import JournalSettings
from tradelog.core.errors import (
    ConfigurationError,
    ErrorCodes,
    FeedFormatError,
    NetworkError,
    StorageError,
    ValidationError,
)
from tradelog.core.journal import TradeJournal
from tradelog.feed.schema import ABSOLUTE
from tradelog.images.resolver import StaticImageLister
from tradelog.persistence.store import MemoryTradeStore, TradeStore
from tradelog.trades.filters import DateRange

SHEET_URL = "https://docs.google.com/spreadsheets/d/abc123/edit"


@pytest.fixture
def settings():
    return JournalSettings(sheet_url=SHEET_URL, cache_path=None, images_dir=None)


@pytest.fixture
def journal_rows(row_factory):
    return [
        row_factory(day=date(2025, 3, 3), symbol="ABC", **{"Net Total": 50.0}),
        row_factory(day=date(2025, 3, 3), symbol="XYZ", **{"Net Total": -20.0}),
        row_factory(day=None),
        row_factory(day=date(2025, 3, 4), symbol="ABC", **{"Net Total": 30.0}),
    ]


@pytest.fixture
def mock_client(gviz_response, journal_rows):
    client = MagicMock()
    client.fetch.return_value = gviz_response(journal_rows)
    return client


@pytest.fixture
def journal(settings, mock_client):
    return TradeJournal(
        settings=settings,
        client=mock_client,
        image_lister=StaticImageLister([
            "03-03-2025 - ABC - entry.png",
            "03-03-2025 - XYZ - entry.png",
        ]),
    )


# =============================================================================
# Loading
# =============================================================================


class TestLoad:
    @pytest.mark.asyncio
    async def test_load_replaces_trades(self, journal, mock_client):
        result = await journal.load()

        assert result.trade_count == 3
        assert not result.stale
        assert len(result.skipped) == 1
        assert [t.id for t in journal.trades] == [0, 1, 2]
        mock_client.fetch.assert_called_once_with("0")

    @pytest.mark.asyncio
    async def test_sheet_selector(self, journal, mock_client):
        await journal.load("2")
        mock_client.fetch.assert_called_once_with("2")

    @pytest.mark.asyncio
    async def test_failed_load_keeps_previous_trades(self, journal, mock_client):
        await journal.load()
        before = journal.trades

        mock_client.fetch.side_effect = NetworkError(ErrorCodes.NETWORK_TIMEOUT)
        with pytest.raises(NetworkError):
            await journal.load()

        assert journal.trades is before

    @pytest.mark.asyncio
    async def test_bad_feed_keeps_previous_trades(self, journal, mock_client):
        await journal.load()
        before = journal.trades

        mock_client.fetch.return_value = "<html>Sign in</html>"
        with pytest.raises(FeedFormatError) as exc_info:
            await journal.load()

        assert exc_info.value.http_status == 502
        assert journal.trades is before

    @pytest.mark.asyncio
    async def test_malformed_table_raises_feed_error(self, journal, mock_client):
        mock_client.fetch.return_value = (
            "/*O_o*/\ngoogle.visualization.Query.setResponse("
            '{"table": {"cols": [{"label": "Date"}], "rows": [["x"]]}});'
        )
        with pytest.raises(FeedFormatError) as exc_info:
            await journal.load()

        assert exc_info.value.error_code is ErrorCodes.FEED_MISSING_TABLE
        assert get_load_id() is None
        assert journal.trades == ()

    @pytest.mark.asyncio
    async def test_load_id_reported_and_cleared(self, journal):
        result = await journal.load()

        assert result.load_id
        assert result.to_dict()["loadId"] == result.load_id
        assert get_load_id() is None

    @pytest.mark.asyncio
    async def test_missing_sheet_url(self):
        journal = TradeJournal(settings=JournalSettings(sheet_url=None))
        with pytest.raises(ConfigurationError) as exc_info:
            await journal.load()
        assert exc_info.value.error_code is ErrorCodes.CONFIG_MISSING_SHEET_URL
        assert journal.trades == ()

    @pytest.mark.asyncio
    async def test_superseded_load_is_discarded(
        self, settings, gviz_response, row_factory
    ):
        entered = threading.Event()
        release = threading.Event()
        slow_payload = gviz_response([row_factory(symbol="OLD")])
        fast_payload = gviz_response([row_factory(symbol="NEW")])
        calls = []

        def fetch(sheet):
            calls.append(sheet)
            if len(calls) == 1:
                entered.set()
                release.wait(timeout=5)
                return slow_payload
            return fast_payload

        client = MagicMock()
        client.fetch.side_effect = fetch
        journal = TradeJournal(settings=settings, client=client)

        first = asyncio.create_task(journal.load())
        while not entered.is_set():
            await asyncio.sleep(0.01)

        second = await journal.load()
        release.set()
        stale = await first

        assert stale.stale
        assert not second.stale
        assert stale.token < second.token
        assert [t.symbol for t in journal.trades] == ["NEW"]

    @pytest.mark.asyncio
    async def test_store_failure_does_not_fail_load(self, settings, mock_client):
        store = MagicMock(spec=TradeStore)
        store.save.side_effect = StorageError(ErrorCodes.STORAGE_WRITE_FAILED)
        journal = TradeJournal(settings=settings, client=mock_client, store=store)

        result = await journal.load()

        assert result.trade_count == 3
        assert len(journal.trades) == 3


class TestRestore:
    @pytest.mark.asyncio
    async def test_restore_from_store(self, settings, mock_client):
        store = MemoryTradeStore()
        await TradeJournal(settings=settings, client=mock_client, store=store).load()

        restored = TradeJournal(settings=settings, store=store)
        assert restored.restore() == 3
        assert [t.symbol for t in restored.trades] == ["ABC", "XYZ", "ABC"]

    def test_restore_empty_store(self, settings):
        assert TradeJournal(settings=settings).restore() == 0

    def test_corrupt_cache_leaves_journal_empty(self, settings):
        store = MagicMock(spec=TradeStore)
        store.load.side_effect = StorageError(ErrorCodes.STORAGE_CORRUPT)
        journal = TradeJournal(settings=settings, store=store)

        assert journal.restore() == 0
        assert journal.trades == ()

    def test_json_cache_from_settings(self, tmp_path):
        settings = JournalSettings(sheet_url=SHEET_URL, cache_path=tmp_path / "t.json")
        journal = TradeJournal(settings=settings)
        assert journal.store.path == tmp_path / "t.json"


# =============================================================================
# Views
# =============================================================================


class TestViews:
    @pytest.mark.asyncio
    async def test_filtered_and_daily(self, journal):
        await journal.load()
        march_3 = DateRange(date(2025, 3, 3), date(2025, 3, 3))

        assert len(journal.filtered()) == 3
        assert [t.symbol for t in journal.filtered(march_3)] == ["ABC", "XYZ"]

        days = journal.daily()
        assert [d.date for d in days] == [date(2025, 3, 3), date(2025, 3, 4)]
        assert days[0].net_profit == 30.0

    @pytest.mark.asyncio
    async def test_day(self, journal):
        await journal.load()
        assert journal.day(date(2025, 3, 4)).trade_count == 1
        assert journal.day(date(2025, 3, 9)) is None

    @pytest.mark.asyncio
    async def test_summary(self, journal):
        await journal.load()
        summary = journal.summary()
        assert summary.trade_count == 3
        assert summary.win_count == 2
        assert journal.summary(DateRange(start=date(2025, 3, 4))).trade_count == 1

    @pytest.mark.asyncio
    async def test_get_trade(self, journal):
        await journal.load()
        assert journal.get_trade(1).symbol == "XYZ"
        with pytest.raises(ValidationError) as exc_info:
            journal.get_trade(99)
        assert exc_info.value.http_status == 404

    @pytest.mark.asyncio
    async def test_images_for(self, journal):
        await journal.load()
        assert journal.images_for(0) == ["03-03-2025 - ABC - entry.png"]
        assert journal.images_for(2) == []

    def test_schema_from_settings(self):
        settings = JournalSettings(sheet_url=SHEET_URL, feed_revision="absolute")
        assert TradeJournal(settings=settings).schema is ABSOLUTE

    def test_unknown_revision(self):
        settings = JournalSettings(sheet_url=SHEET_URL, feed_revision="nope")
        with pytest.raises(ConfigurationError):
            TradeJournal(settings=settings)
