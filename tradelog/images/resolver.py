"""
Chart Image Resolver

Match chart screenshots to trades by the date and symbol embedded in their
file names: ``"19-03-2025 - ABC - entry.png"``.
"""

import logging
import re
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..core.errors import ErrorCodes, StorageError
from ..trades.models import Trade

logger = logging.getLogger(__name__)

FILENAME_SEPARATOR = " - "
SYMBOL_TERMINATOR = " -"
DATE_TOKEN_FORMATS = ("%d-%m-%Y", "%Y-%m-%d")
IMAGE_EXTENSIONS = re.compile(r"\.(png|jpg|jpeg)$", re.IGNORECASE)


def normalize_date_token(token: str) -> Optional[str]:
    """Reformat a file-name date token to ``yyyy-MM-dd``."""
    for fmt in DATE_TOKEN_FORMATS:
        try:
            return datetime.strptime(token.strip(), fmt).date().isoformat()
        except ValueError:
            continue
    return None


def parse_image_name(filename: str) -> Optional[tuple]:
    """
    Split a file name into its normalized day and symbol.

    The name must start with ``date - symbol -``; whatever follows that
    dash is free, so both ``"19-03-2025 - ABC - entry.png"`` and
    ``"19-03-2025 - ABC -entry.png"`` parse. Returns None otherwise.
    """
    date_token, sep, rest = filename.partition(FILENAME_SEPARATOR)
    if not sep:
        return None
    symbol, sep, _ = rest.partition(SYMBOL_TERMINATOR)
    if not sep or not symbol:
        return None
    day = normalize_date_token(date_token)
    if day is None:
        return None
    return day, symbol


def resolve_trade_images(trade: Trade, filenames: Iterable[str]) -> List[str]:
    """
    File names belonging to a trade.

    The day must match the trade's day exactly and the symbol must match
    exactly, case included. Input order is kept.
    """
    day = trade.date.isoformat()
    matches = []
    for filename in filenames:
        parsed = parse_image_name(filename)
        if parsed and parsed == (day, trade.symbol):
            matches.append(filename)
    return matches


class ImageLister(ABC):
    """Source of chart image file names."""

    @abstractmethod
    def list(self) -> List[str]:
        """Return the available image file names."""


class StaticImageLister(ImageLister):
    """Fixed list of file names."""

    def __init__(self, filenames: Iterable[str] = ()):
        self._filenames = list(filenames)

    def list(self) -> List[str]:
        return list(self._filenames)


class DirectoryImageLister(ImageLister):
    """Image files (png/jpg/jpeg) of one directory, sorted by name."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def list(self) -> List[str]:
        try:
            names = [entry.name for entry in self.path.iterdir() if entry.is_file()]
        except OSError as e:
            raise StorageError(
                ErrorCodes.STORAGE_UNAVAILABLE,
                detail=str(self.path),
                original_error=e,
            ) from e

        images = sorted(name for name in names if IMAGE_EXTENSIONS.search(name))
        logger.debug(f"Found {len(images)} images in {self.path}")
        return images

