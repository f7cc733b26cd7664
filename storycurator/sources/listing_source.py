"""
JSON Listing Source
===================

Adapter for REST endpoints that return an array of records. Record shapes
differ per endpoint, so each listing is paired with a named mapper that
turns one record into item fields.
"""

import json
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

import aiohttp

from ..config.settings import SourceKind
from ..models.content import RawContentItem
from ..utils.exceptions import SourceUnavailableError, ErrorCode
from ..utils.validators import ContentValidator
from .base import ContentSource

# Mapper output: keyword arguments for ContentSource._build_item, or None to skip
RecordMapper = Callable[[Dict[str, Any], str], Optional[Dict[str, Any]]]


def map_dev_to(record: Dict[str, Any], endpoint: str) -> Optional[Dict[str, Any]]:
    """Dev.to article records."""
    return {
        "title": record.get("title"),
        "url": record.get("url"),
        "description": ContentValidator.clean_snippet(record.get("description")),
        "published_at": record.get("published_at"),
        "source": "Dev.to",
        "tags": record.get("tag_list") or [],
    }


def map_remote_ok(record: Dict[str, Any], endpoint: str) -> Optional[Dict[str, Any]]:
    """RemoteOK job records; the first element of that API is a legal notice."""
    position = record.get("position")
    company = record.get("company")
    if not position or not company:
        return None

    description = ContentValidator.clean_snippet(record.get("description"))
    if description:
        description += "..."

    return {
        "title": f"{position} at {company}",
        "url": f"https://remoteok.io/remote-jobs/{record.get('id')}",
        "description": description,
        "published_at": record.get("date"),
        "source": "RemoteOK",
        "tags": record.get("tags") or [],
    }


def map_generic(record: Dict[str, Any], endpoint: str) -> Optional[Dict[str, Any]]:
    """Best-effort mapping for article- or job-shaped records."""
    title = record.get("title") or record.get("position")
    company = record.get("company")
    if title and company and not record.get("title"):
        title = f"{title} at {company}"

    return {
        "title": title,
        "url": record.get("url") or record.get("link"),
        "description": ContentValidator.clean_snippet(record.get("description")),
        "published_at": record.get("published_at") or record.get("date"),
        "source": urlparse(endpoint).hostname or "JSON API",
        "tags": record.get("tags") or record.get("tag_list") or [],
    }


RECORD_MAPPERS: Dict[str, RecordMapper] = {
    "dev_to": map_dev_to,
    "remote_ok": map_remote_ok,
    "generic": map_generic,
}


class ListingSource(ContentSource):
    """Pulls items from a JSON REST listing."""

    kind = SourceKind.LISTING

    def __init__(self, url: str, session: aiohttp.ClientSession, mapper: str = "generic", **kwargs):
        """Initialize listing source.

        Args:
            url: Endpoint returning a JSON array
            session: Shared HTTP session
            mapper: Name of the record mapper in RECORD_MAPPERS
            **kwargs: Passed to ContentSource

        Raises:
            KeyError: If the mapper name is unknown
        """
        super().__init__(url, session, **kwargs)
        self.mapper_name = mapper
        self.mapper = RECORD_MAPPERS[mapper]

    async def _fetch_items(self, limit_hint: int) -> List[RawContentItem]:
        response = await self._get("application/json")
        body = await response.text()

        try:
            records = json.loads(body)
        except json.JSONDecodeError as e:
            raise SourceUnavailableError(
                f"Invalid JSON: {e}",
                source_url=self.url,
                error_code=ErrorCode.SOURCE_PARSE_ERROR,
            ) from e

        return self.parse_records(records, limit_hint)

    def parse_records(self, records: Any, limit_hint: int) -> List[RawContentItem]:
        """Map a decoded JSON payload into items.

        Raises:
            SourceUnavailableError: If the payload is not an array
        """
        if not isinstance(records, list):
            raise SourceUnavailableError(
                f"Expected a JSON array, got {type(records).__name__}",
                source_url=self.url,
                error_code=ErrorCode.SOURCE_PARSE_ERROR,
            )

        items = []
        seen_urls = set()
        for record in records:
            if not isinstance(record, dict):
                continue

            fields = self.mapper(record, self.url)
            if fields is None:
                continue

            item = self._build_item(**fields)
            if item is None or item.url in seen_urls:
                continue

            seen_urls.add(item.url)
            items.append(item)
            if len(items) >= limit_hint:
                break

        self.logger.info(f"Mapped {len(items)} items from {self.url} ({self.mapper_name})")
        return items

    def __repr__(self) -> str:
        return f"ListingSource(url={self.url!r}, mapper={self.mapper_name!r})"
