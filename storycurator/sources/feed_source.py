"""
Syndicated Feed Source
======================

RSS/Atom adapter: downloads the feed with aiohttp and parses it with
feedparser.
"""

from typing import Any, List, Optional

import feedparser

from ..config.settings import SourceKind
from ..models.content import RawContentItem
from ..utils.exceptions import SourceUnavailableError, ErrorCode
from ..utils.validators import ContentValidator
from .base import ContentSource

FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"


class FeedSource(ContentSource):
    """Pulls items from a syndicated feed URL."""

    kind = SourceKind.FEED

    async def _fetch_items(self, limit_hint: int) -> List[RawContentItem]:
        response = await self._get(FEED_ACCEPT)
        content = await response.text()
        return self.parse_feed(content, limit_hint)

    def parse_feed(self, content: str, limit_hint: int) -> List[RawContentItem]:
        """Parse feed text into items.

        Raises:
            SourceUnavailableError: If the document is not a usable feed
        """
        feed_data = feedparser.parse(content)

        # feedparser flags malformed XML with bozo but often still recovers entries
        if getattr(feed_data, "bozo", False) and not feed_data.entries:
            raise SourceUnavailableError(
                f"Feed parse error: {getattr(feed_data, 'bozo_exception', 'invalid XML')}",
                source_url=self.url,
                error_code=ErrorCode.SOURCE_PARSE_ERROR,
            )

        source_label = feed_data.feed.get("title") or "RSS Feed"

        items = []
        for entry in feed_data.entries:
            item = self._build_item(
                title=entry.get("title"),
                url=entry.get("link"),
                source=source_label,
                description=self._extract_snippet(entry),
                published_at=entry.get("published") or entry.get("updated"),
                tags=[t.get("term") for t in entry.get("tags", []) if t.get("term")],
            )
            if item is None:
                self.logger.debug("Dropping feed entry without title or link")
                continue
            items.append(item)

        items = self._dedupe(items)
        self.logger.info(f"Parsed {len(items)} items from {self.url}")
        return items[:limit_hint]

    @staticmethod
    def _extract_snippet(entry: Any) -> Optional[str]:
        """Prefer the summary, fall back to full content."""
        for field in ("summary", "description"):
            value = entry.get(field)
            if value:
                return ContentValidator.clean_snippet(value)

        content = entry.get("content")
        if isinstance(content, list) and content:
            value = content[0].get("value") if isinstance(content[0], dict) else None
            return ContentValidator.clean_snippet(value)

        return None
