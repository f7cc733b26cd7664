"""
Messaging Gateways
==================

Post a rendered block list to a channel. Gateways may raise; the
publisher owns the failure policy.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import aiohttp
from telegram import Bot, LinkPreviewOptions
from telegram.constants import ParseMode
from telegram.error import TelegramError

from ..utils.exceptions import ErrorCode, PublishError
from ..utils.logging import get_delivery_logger
from .block_formatter import blocks_to_text


TELEGRAM_MESSAGE_LIMIT = 4096


def truncate_html(text: str, limit: int = TELEGRAM_MESSAGE_LIMIT) -> str:
    """Cut Telegram HTML to at most ``limit`` characters without breaking markup.

    Prefers the last block boundary; otherwise cuts hard and backs off so
    no tag, entity or link is left open.
    """
    if len(text) <= limit:
        return text

    cut = text.rfind("\n\n", 0, limit + 1)
    if cut > 0:
        return text[:cut]

    text = text[:limit]
    if text.rfind("<") > text.rfind(">"):
        text = text[:text.rfind("<")]
    if text.rfind("&") > text.rfind(";"):
        text = text[:text.rfind("&")]
    if text.rfind("<a ") > text.rfind("</a>"):
        text = text[:text.rfind("<a ")]
    return text.rstrip()


@dataclass
class PostResult:
    """Outcome of one post_message call."""
    ok: bool
    message_ref: Optional[str] = None
    error: Optional[str] = None


class MessagingGateway(Protocol):
    """Anything that can post a block list to a channel."""

    async def post_message(self, channel_id: str, blocks: List[Dict[str, Any]]) -> PostResult:
        ...


class SlackGateway:
    """Slack Web API ``chat.postMessage`` over aiohttp."""

    def __init__(self, session: aiohttp.ClientSession, bot_token: str,
                 api_base_url: str = "https://slack.com/api", timeout: float = 10.0):
        if not bot_token:
            raise PublishError("Slack bot token is required", error_code=ErrorCode.PUBLISH_REJECTED)
        self.session = session
        self.bot_token = bot_token
        self.api_url = f"{api_base_url.rstrip('/')}/chat.postMessage"
        self.timeout = timeout
        self.logger = get_delivery_logger()

    async def post_message(self, channel_id: str, blocks: List[Dict[str, Any]]) -> PostResult:
        """Post blocks; ``text`` carries the plain fallback for notifications.

        Raises:
            PublishError: On network failure or a non-JSON reply
        """
        headers = {
            "Authorization": f"Bearer {self.bot_token}",
            "Content-Type": "application/json; charset=utf-8",
        }
        payload = {
            "channel": channel_id,
            "blocks": blocks,
            "text": blocks_to_text(blocks[:1]) or "Daily curation",
        }

        try:
            response = await self.session.post(
                self.api_url,
                json=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
            data = await response.json(content_type=None)
        except aiohttp.ClientError as e:
            raise PublishError(f"Slack request failed: {e}", channel_id=channel_id) from e
        except ValueError as e:
            raise PublishError(
                f"Slack returned a non-JSON reply: {e}",
                channel_id=channel_id,
                error_code=ErrorCode.PUBLISH_REJECTED,
            ) from e

        if not isinstance(data, dict) or not data.get("ok"):
            error = data.get("error", "unknown_error") if isinstance(data, dict) else "unknown_error"
            self.logger.warning(f"Slack rejected message to {channel_id}: {error}")
            return PostResult(ok=False, error=error)

        return PostResult(ok=True, message_ref=data.get("ts"))


class TelegramGateway:
    """Telegram Bot API; blocks are flattened to HTML."""

    def __init__(self, bot: Bot):
        self.bot = bot
        self.logger = get_delivery_logger()

    async def post_message(self, channel_id: str, blocks: List[Dict[str, Any]]) -> PostResult:
        text = truncate_html(blocks_to_text(blocks, as_html=True))

        try:
            message = await self.bot.send_message(
                chat_id=channel_id,
                text=text,
                parse_mode=ParseMode.HTML,
                link_preview_options=LinkPreviewOptions(is_disabled=True),
            )
        except TelegramError as e:
            self.logger.warning(f"Telegram error sending to {channel_id}: {e}")
            return PostResult(ok=False, error=str(e))

        return PostResult(ok=True, message_ref=str(message.message_id))
