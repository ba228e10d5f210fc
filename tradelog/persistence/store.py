"""
Trade Store

Local cache of the last loaded trade collection. Trades are stored as the
JSON form of :meth:`Trade.to_dict` and rehydrated on load.
"""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from ..core.errors import ErrorCodes, StorageError
from ..trades.models import Trade

logger = logging.getLogger(__name__)


def serialize_trades(trades: Sequence[Trade]) -> str:
    return json.dumps([trade.to_dict() for trade in trades])


def deserialize_trades(payload: str) -> List[Trade]:
    """
    Rehydrate trades from their JSON form.

    Raises:
        StorageError: If the payload is not a list of trade records
    """
    try:
        records: Any = json.loads(payload)
        if not isinstance(records, list):
            raise ValueError("expected a list of trades")
        return [Trade.from_dict(record) for record in records]
    except (ValueError, KeyError, TypeError) as e:
        raise StorageError(
            ErrorCodes.STORAGE_CORRUPT,
            detail=str(e),
            original_error=e,
        ) from e


class TradeStore(ABC):
    """Opaque cache for the trade collection."""

    @abstractmethod
    def load(self) -> Optional[List[Trade]]:
        """Stored trades, or None when nothing was saved yet."""

    @abstractmethod
    def save(self, trades: Sequence[Trade]) -> None:
        """Replace the stored collection."""


class MemoryTradeStore(TradeStore):
    """In-process store that keeps the serialized form."""

    def __init__(self):
        self._payload: Optional[str] = None

    def load(self) -> Optional[List[Trade]]:
        if self._payload is None:
            return None
        return deserialize_trades(self._payload)

    def save(self, trades: Sequence[Trade]) -> None:
        self._payload = serialize_trades(trades)


class JsonTradeStore(TradeStore):
    """Trades cached in a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> Optional[List[Trade]]:
        if not self.path.exists():
            return None

        try:
            payload = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageError(
                ErrorCodes.STORAGE_CORRUPT,
                detail=str(self.path),
                original_error=e,
            ) from e

        trades = deserialize_trades(payload)
        logger.info(f"Restored {len(trades)} trades from {self.path}")
        return trades

    def save(self, trades: Sequence[Trade]) -> None:
        """Write atomically through a temporary file in the same directory."""
        payload = serialize_trades(trades)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=".trades-", suffix=".json"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(
                ErrorCodes.STORAGE_WRITE_FAILED,
                detail=str(self.path),
                original_error=e,
            ) from e

        logger.info(f"Saved {len(trades)} trades to {self.path}")
