"""
Trade Journal

Coordinates a journal session: loading trades from the sheet, caching them
locally and serving filtered views, daily results and statistics.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple, Union

from ..analytics.daily import DailyPerformance, group_by_day
from ..analytics.statistics import StatisticsSummary, summarize
from ..config.logging import clear_load_context, log_duration, set_load_context
from ..config.settings import JournalSettings
from ..feed.client import SheetFeedClient
from ..feed.decoder import decode_feed
from ..feed.schema import FeedSchema, get_schema
from ..images.resolver import (
    DirectoryImageLister,
    ImageLister,
    StaticImageLister,
    resolve_trade_images,
)
from ..persistence.store import JsonTradeStore, MemoryTradeStore, TradeStore
from ..trades.filters import DateRange
from ..trades.models import Trade
from ..trades.normalizer import SkippedRow, TradeNormalizer
from .errors import ErrorCodes, StorageError, TradeLogError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """Outcome of one sheet load."""

    token: int
    trades: Tuple[Trade, ...] = ()
    skipped: List[SkippedRow] = field(default_factory=list)
    stale: bool = False
    load_id: Optional[str] = None

    @property
    def trade_count(self) -> int:
        return len(self.trades)

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "tradeCount": self.trade_count,
            "skippedCount": len(self.skipped),
            "skipped": [
                {"row": row.row_index, "reason": row.reason, "detail": row.detail}
                for row in self.skipped
            ],
            "stale": self.stale,
            "loadId": self.load_id,
        }


class TradeJournal:
    """
    A single-user trading journal.

    The trade collection is immutable once loaded: a reload replaces it as a
    whole and a failed load leaves it untouched. Overlapping loads are
    resolved by a monotonic token, only the most recently started load is
    committed.
    """

    def __init__(
        self,
        settings: Optional[JournalSettings] = None,
        client: Optional[SheetFeedClient] = None,
        store: Optional[TradeStore] = None,
        image_lister: Optional[ImageLister] = None,
        schema: Optional[FeedSchema] = None,
    ):
        """
        Initialize the journal.

        Args:
            settings: Journal settings (environment defaults if omitted)
            client: Feed client; built from ``settings.sheet_url`` on first load
            store: Trade cache; a JSON file when ``cache_path`` is set
            image_lister: Source of chart image names
            schema: Sheet revision; looked up from ``settings.feed_revision``
        """
        self.settings = settings or JournalSettings()
        self.schema = schema or get_schema(self.settings.feed_revision)
        self._client = client

        if store is not None:
            self.store = store
        elif self.settings.cache_path:
            self.store = JsonTradeStore(self.settings.cache_path)
        else:
            self.store = MemoryTradeStore()

        if image_lister is not None:
            self.image_lister = image_lister
        elif self.settings.images_dir:
            self.image_lister = DirectoryImageLister(self.settings.images_dir)
        else:
            self.image_lister = StaticImageLister()

        self._trades: Tuple[Trade, ...] = ()
        self._load_token = 0

        logger.info(f"TradeJournal initialized (revision={self.schema.name})")

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @property
    def trades(self) -> Tuple[Trade, ...]:
        return self._trades

    def restore(self) -> int:
        """
        Restore the collection from the local cache.

        An unreadable cache is logged and leaves the journal empty.

        Returns:
            Number of restored trades
        """
        try:
            stored = self.store.load()
        except StorageError as e:
            e.log()
            return 0

        if stored is None:
            return 0

        self._trades = tuple(stored)
        return len(self._trades)

    def _get_client(self) -> SheetFeedClient:
        if self._client is None:
            self._client = SheetFeedClient(
                self.settings.sheet_url,
                timeout=self.settings.request_timeout,
            )
        return self._client

    @log_duration(threshold_ms=5000)
    async def load(self, sheet: Optional[Union[int, str]] = None) -> LoadResult:
        """
        Load trades from the sheet and replace the collection.

        Args:
            sheet: Sheet selector (defaults to ``settings.sheet``)

        Returns:
            LoadResult; ``stale`` is set when a newer load superseded this one

        Raises:
            ConfigurationError: If the sheet URL is missing or invalid
            NetworkError: If the sheet could not be fetched
            FeedFormatError: If the response could not be decoded
        """
        self._load_token += 1
        token = self._load_token
        sheet = self.settings.sheet if sheet is None else sheet
        load_id = set_load_context()

        try:
            client = self._get_client()
            text = await asyncio.to_thread(client.fetch, sheet)
            table = decode_feed(text)
            result = TradeNormalizer(self.schema).normalize_with_report(table)
        except TradeLogError as e:
            e.log()
            raise
        else:
            if token != self._load_token:
                logger.warning(f"Discarding load {token}, superseded by {self._load_token}")
                return LoadResult(
                    token=token,
                    trades=tuple(result.trades),
                    skipped=result.skipped,
                    stale=True,
                    load_id=load_id,
                )

            self._commit(result.trades)
            return LoadResult(
                token=token,
                trades=self._trades,
                skipped=result.skipped,
                load_id=load_id,
            )
        finally:
            clear_load_context()

    def _commit(self, trades: List[Trade]) -> None:
        self._trades = tuple(trades)
        logger.info(f"Loaded {len(self._trades)} trades")

        try:
            self.store.save(self._trades)
        except StorageError as e:
            # The loaded collection stays usable without a cache
            e.log()

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def get_trade(self, trade_id: int) -> Trade:
        """
        Look up a trade of the current collection.

        Raises:
            ValidationError: If no trade has this id
        """
        for trade in self._trades:
            if trade.id == trade_id:
                return trade
        raise ValidationError(
            ErrorCodes.VALIDATION_NOT_FOUND,
            detail=f"trade {trade_id}",
        )

    def filtered(self, date_range: Optional[DateRange] = None) -> List[Trade]:
        if date_range is None:
            return list(self._trades)
        return date_range.apply(self._trades)

    def daily(self, date_range: Optional[DateRange] = None) -> List[DailyPerformance]:
        return group_by_day(self.filtered(date_range))

    def day(self, day: date) -> Optional[DailyPerformance]:
        """Drill-down for one calendar day, None when nothing was traded."""
        days = self.daily(DateRange(day, day))
        return days[0] if days else None

    def summary(self, date_range: Optional[DateRange] = None) -> StatisticsSummary:
        return summarize(self.filtered(date_range), self.schema.time_encoding)

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    def list_images(self) -> List[str]:
        return self.image_lister.list()

    def images_for(self, trade_id: int) -> List[str]:
        """
        Chart images of a trade.

        An unavailable image source is logged and yields no images.
        """
        trade = self.get_trade(trade_id)
        try:
            filenames = self.image_lister.list()
        except StorageError as e:
            e.log()
            return []
        return resolve_trade_images(trade, filenames)

    def health_check(self) -> bool:
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
