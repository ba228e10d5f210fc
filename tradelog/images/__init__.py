"""
Images Module

Chart screenshot lookup for trades.
"""

from .resolver import (
    DirectoryImageLister,
    ImageLister,
    StaticImageLister,
    normalize_date_token,
    parse_image_name,
    resolve_trade_images,
)

__all__ = [
    "ImageLister",
    "DirectoryImageLister",
    "StaticImageLister",
    "resolve_trade_images",
    "parse_image_name",
    "normalize_date_token",
]
