"""
Source Registry
===============

Maps each content category to its ordered list of source adapters. List
order is source priority: the aggregator concatenates results in this order.
"""

from typing import Dict, Iterable, List, Union

import aiohttp

from ..config.settings import SourcesSettings, SourceConfig, SourceKind
from ..models.content import ContentCategory
from ..utils.logging import get_logger_for_component
from .base import ContentSource
from .feed_source import FeedSource
from .listing_source import ListingSource


def build_source(config: SourceConfig, session: aiohttp.ClientSession,
                 timeout: float = 10.0, user_agent: str = "Second-Story-Bot/1.0") -> ContentSource:
    """Create the adapter for one configured source."""
    if config.kind == SourceKind.LISTING:
        return ListingSource(config.url, session, mapper=config.mapper,
                             timeout=timeout, user_agent=user_agent)
    return FeedSource(config.url, session, timeout=timeout, user_agent=user_agent)


class SourceRegistry:
    """Ordered source adapters per category."""

    def __init__(self, sources: Dict[ContentCategory, Iterable[ContentSource]] = None):
        self._sources: Dict[ContentCategory, List[ContentSource]] = {
            category: list(adapters) for category, adapters in (sources or {}).items()
        }
        self.logger = get_logger_for_component("source_registry")

    @classmethod
    def from_settings(cls, settings: SourcesSettings, session: aiohttp.ClientSession) -> "SourceRegistry":
        """Build adapters for every configured category, sharing one session."""
        registry = cls()
        for category, configs in settings.categories.items():
            for config in configs:
                registry.register(
                    category,
                    build_source(config, session, settings.request_timeout, settings.user_agent),
                )
        return registry

    def register(self, category: ContentCategory, source: ContentSource) -> None:
        """Append a source at the lowest priority for the category."""
        self._sources.setdefault(category, []).append(source)

    def sources_for(self, category: Union[ContentCategory, str]) -> List[ContentSource]:
        """Adapters for a category in priority order; [] for unknown categories."""
        parsed = ContentCategory.parse(category)
        if parsed is None:
            self.logger.warning(f"Unknown content category: {category!r}")
            return []
        return list(self._sources.get(parsed, []))

    def categories(self) -> List[ContentCategory]:
        return list(self._sources)
