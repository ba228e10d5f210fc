"""Tests for the trade stores."""

import json

import pytest

from tradelog.core.errors import ErrorCodes, StorageError
from tradelog.persistence.store import (
    JsonTradeStore,
    MemoryTradeStore,
    deserialize_trades,
    serialize_trades,
)
from tradelog.trades.normalizer import TradeNormalizer


class TestSerialization:
    def test_round_trip_from_feed(self, feed_table, row_factory):
        row = row_factory(Comment="Chased the open")
        trades = TradeNormalizer().normalize(feed_table([row]))

        restored = deserialize_trades(serialize_trades(trades))

        assert restored == trades
        assert restored[0].time_of_entry.second == trades[0].time_of_entry.second

    def test_not_a_list(self):
        with pytest.raises(StorageError) as exc_info:
            deserialize_trades(json.dumps({"id": 0}))
        assert exc_info.value.error_code is ErrorCodes.STORAGE_CORRUPT

    def test_invalid_json(self):
        with pytest.raises(StorageError):
            deserialize_trades("[{")

    def test_missing_key(self):
        with pytest.raises(StorageError):
            deserialize_trades(json.dumps([{"symbol": "ABC"}]))


class TestMemoryTradeStore:
    def test_empty(self):
        assert MemoryTradeStore().load() is None

    def test_save_and_load(self, sample_trades):
        store = MemoryTradeStore()
        store.save(sample_trades)
        assert store.load() == sample_trades


class TestJsonTradeStore:
    def test_missing_file(self, tmp_path):
        assert JsonTradeStore(tmp_path / "trades.json").load() is None

    def test_save_and_load(self, tmp_path, sample_trades):
        store = JsonTradeStore(tmp_path / "cache" / "trades.json")
        store.save(sample_trades)

        assert store.path.exists()
        assert JsonTradeStore(store.path).load() == sample_trades
        assert [p.name for p in store.path.parent.iterdir()] == ["trades.json"]

    def test_save_replaces(self, tmp_path, sample_trades):
        store = JsonTradeStore(tmp_path / "trades.json")
        store.save(sample_trades)
        store.save(sample_trades[:1])
        assert len(store.load()) == 1

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "trades.json"
        path.write_text("not json")
        with pytest.raises(StorageError) as exc_info:
            JsonTradeStore(path).load()
        assert exc_info.value.error_code is ErrorCodes.STORAGE_CORRUPT

    def test_write_failure(self, tmp_path, sample_trades):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonTradeStore(blocker / "trades.json")

        with pytest.raises(StorageError) as exc_info:
            store.save(sample_trades)
        assert exc_info.value.error_code is ErrorCodes.STORAGE_WRITE_FAILED
