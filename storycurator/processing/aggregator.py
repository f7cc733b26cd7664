"""
Content Aggregator
==================

Fans out to every source registered for a category, waits for all of
them, and merges the results in source-priority order.
"""

import asyncio
from typing import List, Union

from ..models.content import ContentCategory, RawContentItem, category_tag
from ..sources.registry import SourceRegistry
from ..utils.logging import get_logger_for_component, PerformanceLogger


class ContentAggregator:
    """Merges items from a category's sources deterministically."""

    def __init__(self, registry: SourceRegistry):
        """Initialize aggregator.

        Args:
            registry: Source adapters per category
        """
        self.registry = registry
        self.logger = get_logger_for_component("aggregator")

    async def aggregate_content(
        self, category: Union[ContentCategory, str], limit: int
    ) -> List[RawContentItem]:
        """Collect up to ``limit`` items for a category.

        Sources run concurrently; results are concatenated in registration
        order with each source's own order preserved, then truncated.
        Never raises: failed sources contribute nothing.

        Args:
            category: Content category tag
            limit: Maximum number of items to return

        Returns:
            Merged items, possibly empty
        """
        if limit <= 0:
            return []

        try:
            sources = self.registry.sources_for(category)
            if not sources:
                return []

            with PerformanceLogger(self.logger, "aggregation", category=category_tag(category), sources=len(sources)):
                results = await asyncio.gather(
                    *(source.fetch(limit) for source in sources),
                    return_exceptions=True,
                )

            merged: List[RawContentItem] = []
            for source, result in zip(sources, results):
                if isinstance(result, BaseException):
                    # Adapters swallow their own errors; this only catches bugs
                    self.logger.error(f"Source {source!r} raised {result!r}")
                    continue
                merged.extend(result)

        except Exception as e:
            self.logger.error(f"Aggregation failed for {category_tag(category)}: {e}", exc_info=True)
            return []

        self.logger.info(
            f"Aggregated {len(merged)} items for {category_tag(category)} from {len(sources)} sources"
        )
        return merged[:limit]
