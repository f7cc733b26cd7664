"""
Content Aggregator Tests
========================

Merging, ordering and truncation across a category's sources.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from storycurator.models.content import ContentCategory, RawContentItem
from storycurator.processing.aggregator import ContentAggregator
from storycurator.sources import FeedSource, ListingSource, SourceRegistry


DEV_TO_URL = "https://dev.to/api/articles?top=7"
RSS_URL = "https://example.com/rss"


def _fake_source(items=None, error=None):
    source = MagicMock()
    source.fetch = AsyncMock(return_value=items or [], side_effect=error)
    return source


def _items(prefix, count):
    return [
        RawContentItem(title=f"{prefix} {i}", url=f"https://example.com/{prefix}/{i}", source=prefix)
        for i in range(count)
    ]


class TestContentAggregator:
    """Test suite for ContentAggregator."""

    @pytest.fixture
    def routed_session(self, http, sample_rss):
        """Session answering the Dev.to listing and the RSS feed."""
        dev_to = [
            {
                "title": "Dev.to Article",
                "url": "https://dev.to/test/article",
                "description": "Test description",
                "published_at": "2024-01-01T00:00:00Z",
                "tag_list": ["javascript"],
            }
        ]

        def route(url):
            if url == DEV_TO_URL:
                return http.response(text=json.dumps(dev_to))
            return http.response(text=sample_rss)

        return http.session(get=route)

    @pytest.mark.asyncio
    async def test_merges_sources_in_priority_order(self, routed_session):
        registry = SourceRegistry({
            ContentCategory.TECH_NEWS: [
                ListingSource(DEV_TO_URL, routed_session, mapper="dev_to"),
                FeedSource(RSS_URL, routed_session),
            ]
        })

        items = await ContentAggregator(registry).aggregate_content("tech_news", 5)

        assert [item.title for item in items] == [
            "Dev.to Article",
            "New JavaScript Framework Released",
            "CSS Grid Tutorial",
        ]

    @pytest.mark.asyncio
    async def test_all_sources_failing_returns_empty(self, http):
        session = http.session(get=aiohttp.ClientConnectionError("down"))
        registry = SourceRegistry({
            ContentCategory.TECH_NEWS: [
                ListingSource(DEV_TO_URL, session, mapper="dev_to"),
                FeedSource(RSS_URL, session),
            ]
        })

        assert await ContentAggregator(registry).aggregate_content(ContentCategory.TECH_NEWS, 5) == []

    @pytest.mark.asyncio
    async def test_truncates_to_limit(self):
        registry = SourceRegistry({ContentCategory.TECH_NEWS: [_fake_source(_items("a", 20))]})

        items = await ContentAggregator(registry).aggregate_content(ContentCategory.TECH_NEWS, 5)

        assert len(items) == 5
        assert [item.title for item in items] == [f"a {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_zero_limit_does_not_touch_sources(self):
        source = _fake_source(_items("a", 3))
        registry = SourceRegistry({ContentCategory.TECH_NEWS: [source]})

        assert await ContentAggregator(registry).aggregate_content(ContentCategory.TECH_NEWS, 0) == []
        source.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_each_source_gets_limit_as_hint(self):
        first, second = _fake_source(_items("a", 2)), _fake_source(_items("b", 2))
        registry = SourceRegistry({ContentCategory.LEARNING_RESOURCES: [first, second]})

        await ContentAggregator(registry).aggregate_content(ContentCategory.LEARNING_RESOURCES, 7)

        first.fetch.assert_awaited_once_with(7)
        second.fetch.assert_awaited_once_with(7)

    @pytest.mark.asyncio
    async def test_failed_source_contributes_nothing(self):
        registry = SourceRegistry({
            ContentCategory.TECH_NEWS: [
                _fake_source(error=RuntimeError("adapter bug")),
                _fake_source(_items("b", 2)),
            ]
        })

        items = await ContentAggregator(registry).aggregate_content(ContentCategory.TECH_NEWS, 10)

        assert [item.title for item in items] == ["b 0", "b 1"]

    @pytest.mark.asyncio
    async def test_slow_first_source_keeps_its_position(self):
        async def slow_fetch(limit):
            await asyncio.sleep(0.05)
            return _items("slow", 1)

        slow = MagicMock()
        slow.fetch = AsyncMock(side_effect=slow_fetch)
        registry = SourceRegistry({ContentCategory.TECH_NEWS: [slow, _fake_source(_items("fast", 1))]})

        items = await ContentAggregator(registry).aggregate_content(ContentCategory.TECH_NEWS, 10)

        assert [item.title for item in items] == ["slow 0", "fast 0"]

    @pytest.mark.asyncio
    async def test_unknown_category_returns_empty(self):
        registry = SourceRegistry({ContentCategory.TECH_NEWS: [_fake_source(_items("a", 2))]})
        assert await ContentAggregator(registry).aggregate_content("podcasts", 5) == []

    @pytest.mark.asyncio
    async def test_no_cross_source_dedupe(self):
        shared = _items("same", 1)
        registry = SourceRegistry({ContentCategory.TECH_NEWS: [_fake_source(shared), _fake_source(shared)]})

        items = await ContentAggregator(registry).aggregate_content(ContentCategory.TECH_NEWS, 10)

        assert len(items) == 2
