"""
Content source adapters: syndicated feeds and JSON listings.
"""

from .base import ContentSource
from .feed_source import FeedSource
from .listing_source import ListingSource, RECORD_MAPPERS
from .registry import SourceRegistry, build_source

__all__ = [
    "ContentSource",
    "FeedSource",
    "ListingSource",
    "RECORD_MAPPERS",
    "SourceRegistry",
    "build_source",
]
