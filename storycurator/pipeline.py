"""
Pipeline Wiring
===============

Builds the aggregator, curator and publisher from settings. This is the
only place in the pipeline that reads settings; components receive their
collaborators explicitly.
"""

import ssl
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import aiohttp
import certifi
from telegram import Bot

from .ai import create_provider
from .config.settings import GatewayKind, StoryCuratorSettings, get_settings
from .delivery.block_formatter import BlockFormatter
from .delivery.gateway import MessagingGateway, SlackGateway, TelegramGateway
from .delivery.publisher import Publisher
from .processing.aggregator import ContentAggregator
from .processing.curator import ContentCurator
from .sources.registry import SourceRegistry
from .storage.posting_ledger import SQLitePostingLedger
from .utils.logging import get_logger_for_component


@dataclass
class Pipeline:
    """Wired pipeline components sharing one HTTP session."""
    registry: SourceRegistry
    aggregator: ContentAggregator
    curator: ContentCurator
    publisher: Publisher


def build_gateway(settings: StoryCuratorSettings, session: aiohttp.ClientSession,
                  kind: Optional[GatewayKind] = None) -> Optional[MessagingGateway]:
    """Create the configured gateway, or None when its token is missing."""
    logger = get_logger_for_component("pipeline")
    kind = kind or settings.publishing.gateway

    if kind == GatewayKind.TELEGRAM:
        if not settings.telegram.bot_token:
            logger.warning("Telegram bot token not configured")
            return None
        return TelegramGateway(Bot(token=settings.telegram.bot_token))

    if not settings.slack.bot_token:
        logger.warning("Slack bot token not configured")
        return None
    return SlackGateway(
        session,
        settings.slack.bot_token,
        api_base_url=settings.slack.api_base_url,
        timeout=settings.slack.timeout,
    )


def build_pipeline(settings: StoryCuratorSettings, session: aiohttp.ClientSession,
                   gateway: Optional[MessagingGateway] = None) -> Pipeline:
    """Wire every component from settings around an open session."""
    registry = SourceRegistry.from_settings(settings.sources, session)
    aggregator = ContentAggregator(registry)
    curator = ContentCurator(
        create_provider(settings.ai),
        max_tokens=settings.ai.max_tokens,
        timeout=settings.ai.timeout_seconds,
    )
    ledger = SQLitePostingLedger(settings.ledger.path) if settings.ledger.enabled else None
    publisher = Publisher(
        aggregator,
        curator,
        gateway,
        formatter=BlockFormatter(settings.publishing.footer_brand),
        ledger=ledger,
        share_limit=settings.publishing.share_limit,
        interactive_limit=settings.publishing.interactive_limit,
    )
    return Pipeline(registry, aggregator, curator, publisher)


def create_http_session(settings: StoryCuratorSettings) -> aiohttp.ClientSession:
    """Shared session for sources and the Slack gateway."""
    ssl_context = ssl.create_default_context(cafile=certifi.where())
    connector = aiohttp.TCPConnector(
        ssl=ssl_context,
        limit=20,
        limit_per_host=5,
        enable_cleanup_closed=True,
    )
    headers = {"User-Agent": settings.sources.user_agent, "Accept-Encoding": "gzip, deflate"}
    return aiohttp.ClientSession(connector=connector, headers=headers)


@asynccontextmanager
async def open_pipeline(settings: Optional[StoryCuratorSettings] = None,
                        gateway_kind: Optional[GatewayKind] = None,
                        with_gateway: bool = True) -> AsyncIterator[Pipeline]:
    """Open an HTTP session, wire the pipeline and clean up afterwards.

    Usage:
        async with open_pipeline() as pipeline:
            await pipeline.publisher.share_content("tech_news", "C123")
    """
    settings = settings or get_settings()

    async with create_http_session(settings) as session:
        gateway = build_gateway(settings, session, gateway_kind) if with_gateway else None

        if isinstance(gateway, TelegramGateway):
            async with gateway.bot:
                yield build_pipeline(settings, session, gateway)
        else:
            yield build_pipeline(settings, session, gateway)
