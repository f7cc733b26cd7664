"""
Publisher
=========

Scheduled sharing of curated content to a channel, and interactive
command answers (jobs, learning resources) returned as block lists.

Both paths are total: errors are logged and turned into a failed
ShareResult or an apology message.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from ..models.content import ContentCategory, RawContentItem, category_tag
from ..processing.aggregator import ContentAggregator
from ..processing.curator import ContentCurator
from ..storage.posting_ledger import PostingLedger
from ..utils.exceptions import PublishError
from ..utils.logging import get_delivery_logger
from .block_formatter import MAX_ITEMS_PER_MESSAGE, BlockFormatter
from .gateway import MessagingGateway


JOBS_APOLOGY = "Sorry, I encountered an error while fetching job listings. Please try again later."
LEARNING_APOLOGY = "Sorry, I encountered an error while fetching learning resources. Please try again later."


@dataclass
class ShareResult:
    """Result of one scheduled share."""
    category: str
    channel_id: str
    success: bool
    items_shared: int
    message_ref: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None
    shared_at: Optional[datetime] = None

    def __post_init__(self):
        if not self.shared_at:
            self.shared_at = datetime.now(timezone.utc)


def filter_by_keywords(items: List[RawContentItem], keywords: str) -> List[RawContentItem]:
    """Items whose title or description contains any whitespace-separated keyword."""
    terms = keywords.lower().split()
    if not terms:
        return list(items)
    return [
        item for item in items
        if any(
            term in item.title.lower() or term in (item.description or "").lower()
            for term in terms
        )
    ]


def filter_by_topic(items: List[RawContentItem], topic: str) -> List[RawContentItem]:
    """Items mentioning the topic in title, description or tags."""
    needle = topic.strip().lower()
    if not needle:
        return list(items)
    return [
        item for item in items
        if needle in item.title.lower()
        or needle in (item.description or "").lower()
        or any(needle in tag.lower() for tag in item.tags)
    ]


class Publisher:
    """Drives aggregate -> curate -> render -> post."""

    def __init__(self, aggregator: ContentAggregator, curator: ContentCurator,
                 gateway: Optional[MessagingGateway], formatter: Optional[BlockFormatter] = None,
                 ledger: Optional[PostingLedger] = None, share_limit: int = 20,
                 interactive_limit: int = 15):
        """Initialize publisher.

        Args:
            aggregator: Source aggregation
            curator: AI curation
            gateway: Messaging gateway; only the scheduled path needs one
            formatter: Block renderer
            ledger: Optional record of already shared URLs
            share_limit: Items aggregated per scheduled share
            interactive_limit: Items aggregated per command answer
        """
        self.aggregator = aggregator
        self.curator = curator
        self.gateway = gateway
        self.formatter = formatter or BlockFormatter()
        self.ledger = ledger
        self.share_limit = share_limit
        self.interactive_limit = interactive_limit
        self.logger = get_delivery_logger()

    async def share_content(self, category: Union[ContentCategory, str], channel_id: str) -> ShareResult:
        """Aggregate, curate and post one message for a category.

        No message is posted when curation yields no items. Gateway
        failures are logged and reported in the result, never retried.
        """
        tag = category_tag(category)

        try:
            raw_items = await self.aggregator.aggregate_content(category, self.share_limit)
            raw_items = self._drop_already_shared(raw_items, category, channel_id)

            if not raw_items:
                self.logger.info(f"No content found for {tag}")
                return ShareResult(tag, channel_id, success=True, items_shared=0,
                                   reason="No content found")

            curated = await self.curator.curate_content(raw_items, category)
            if not curated.items:
                self.logger.info(f"Curation selected nothing for {tag}, nothing posted")
                return ShareResult(tag, channel_id, success=True, items_shared=0,
                                   reason="No curated items")

            if self.gateway is None:
                raise PublishError("No messaging gateway configured", channel_id=channel_id)

            blocks = self.formatter.create_blocks(curated, category)
            post = await self.gateway.post_message(channel_id, blocks)

        except Exception as e:
            self.logger.error(f"Error sharing {tag} content to {channel_id}: {e}")
            return ShareResult(tag, channel_id, success=False, items_shared=0, error=str(e))

        if not post.ok:
            self.logger.error(f"Gateway rejected {tag} post to {channel_id}: {post.error}")
            return ShareResult(tag, channel_id, success=False, items_shared=0, error=post.error)

        posted = curated.items[:MAX_ITEMS_PER_MESSAGE]
        self._record_shared(category, channel_id, [item.url for item in posted], post.message_ref)
        self.logger.info(f"Shared {len(posted)} {tag} items to channel {channel_id}")
        return ShareResult(tag, channel_id, success=True, items_shared=len(posted),
                           message_ref=post.message_ref)

    async def get_curated_jobs(self, keywords: Optional[str] = None) -> List[Dict[str, Any]]:
        """Curated job listings, optionally filtered by keywords."""
        category = ContentCategory.JOB_LISTINGS
        try:
            jobs = await self.aggregator.aggregate_content(category, self.interactive_limit)
            if keywords:
                jobs = filter_by_keywords(jobs, keywords)

            criteria = f"Focus on roles matching: {keywords}" if keywords else None
            curated = await self.curator.curate_content(jobs, category, criteria)
            return self.formatter.create_blocks(curated, category)

        except Exception as e:
            self.logger.error(f"Error getting curated jobs: {e}")
            return self.formatter.apology_blocks(category, JOBS_APOLOGY)

    async def get_curated_learning_resources(self, topic: Optional[str] = None) -> List[Dict[str, Any]]:
        """Curated learning resources, optionally narrowed to a topic."""
        category = ContentCategory.LEARNING_RESOURCES
        try:
            resources = await self.aggregator.aggregate_content(category, self.interactive_limit)
            if topic:
                resources = filter_by_topic(resources, topic)

            criteria = f"Focus on resources about: {topic}" if topic else None
            curated = await self.curator.curate_content(resources, category, criteria)
            return self.formatter.create_blocks(curated, category)

        except Exception as e:
            self.logger.error(f"Error getting learning resources: {e}")
            return self.formatter.apology_blocks(category, LEARNING_APOLOGY)

    def _drop_already_shared(self, items: List[RawContentItem], category, channel_id: str) -> List[RawContentItem]:
        if self.ledger is None or not items:
            return items
        try:
            seen = self.ledger.shared_urls(category, channel_id)
        except Exception as e:
            self.logger.warning(f"Posting ledger unavailable, not filtering: {e}")
            return items
        fresh = [item for item in items if item.url not in seen]
        if len(fresh) < len(items):
            self.logger.debug(f"Skipped {len(items) - len(fresh)} already shared items")
        return fresh

    def _record_shared(self, category, channel_id: str, urls: List[str], message_ref: Optional[str]) -> None:
        if self.ledger is None:
            return
        try:
            self.ledger.mark_shared(category, channel_id, urls, message_ref)
        except Exception as e:
            self.logger.warning(f"Failed to record shared items: {e}")
