"""
Content Source Base
===================

Common contract for source adapters. Each adapter fetches one external
endpoint and normalizes it into ``RawContentItem`` objects.

Adapters never raise: subclasses implement ``_fetch_items`` and may raise
``SourceUnavailableError`` (or anything else) from it; ``fetch`` bounds the
call with a timeout and turns every failure into an empty list.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

import aiohttp

from ..config.settings import SourceKind
from ..models.content import RawContentItem
from ..utils.exceptions import SourceUnavailableError, ValidationError, ErrorCode
from ..utils.logging import get_source_logger
from ..utils.validators import URLValidator, ContentValidator


class ContentSource(ABC):
    """A single external content source."""

    kind: SourceKind

    def __init__(
        self,
        url: str,
        session: aiohttp.ClientSession,
        timeout: float = 10.0,
        user_agent: str = "Second-Story-Bot/1.0",
    ):
        """Initialize content source.

        Args:
            url: Endpoint to pull
            session: Shared HTTP session, owned by the caller
            timeout: Upper bound on one fetch in seconds
            user_agent: User-Agent header for requests
        """
        self.url = url
        self.session = session
        self.timeout = timeout
        self.user_agent = user_agent
        self.logger = get_source_logger(source_url=url)

    async def fetch(self, limit_hint: int) -> List[RawContentItem]:
        """Fetch up to ``limit_hint`` items; returns [] on any failure."""
        if limit_hint <= 0:
            return []

        try:
            items = await asyncio.wait_for(self._fetch_items(limit_hint), timeout=self.timeout)
        except asyncio.TimeoutError:
            self.logger.warning(f"Source timed out after {self.timeout}s: {self.url}")
            return []
        except SourceUnavailableError as e:
            self.logger.warning(f"Source unavailable: {e}", extra=e.to_dict())
            return []
        except Exception as e:
            self.logger.error(f"Unexpected error fetching {self.url}: {e}", exc_info=True)
            return []

        return items[:limit_hint]

    @abstractmethod
    async def _fetch_items(self, limit_hint: int) -> List[RawContentItem]:
        """Fetch and normalize items. May raise."""

    async def _get(self, accept: str) -> aiohttp.ClientResponse:
        """Issue the GET and check status; caller reads the body."""
        headers = {"User-Agent": self.user_agent, "Accept": accept}
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            response = await self.session.get(self.url, headers=headers, timeout=client_timeout)
        except aiohttp.ClientError as e:
            raise SourceUnavailableError(
                f"Network error: {e}",
                source_url=self.url,
                error_code=ErrorCode.SOURCE_NETWORK_ERROR,
            ) from e

        if response.status != 200:
            response.release()
            raise SourceUnavailableError(
                f"HTTP {response.status}: {response.reason}",
                source_url=self.url,
                error_code=ErrorCode.SOURCE_HTTP_STATUS,
            )

        return response

    def _build_item(
        self,
        title: Optional[str],
        url: Optional[str],
        source: str,
        description: Optional[str] = None,
        published_at: Optional[str] = None,
        tags: Optional[list] = None,
    ) -> Optional[RawContentItem]:
        """Validate fields and build an item, or None if title/url are unusable."""
        if not title or not url:
            return None
        if not URLValidator.is_valid(url):
            self.logger.debug(f"Skipping item with invalid url {url!r}")
            return None

        try:
            clean_title = ContentValidator.validate_title(title)
        except ValidationError:
            return None

        return RawContentItem(
            title=clean_title,
            url=url.strip(),
            description=description,
            published_at=str(published_at) if published_at else None,
            source=source,
            tags=tags or [],
        )

    @staticmethod
    def _dedupe(items: List[RawContentItem]) -> List[RawContentItem]:
        """Drop repeated URLs, keeping the first occurrence."""
        seen = set()
        unique = []
        for item in items:
            if item.url in seen:
                continue
            seen.add(item.url)
            unique.append(item)
        return unique

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(url={self.url!r})"
