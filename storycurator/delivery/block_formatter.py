"""
Block Formatter
===============

Renders curation results as Slack Block Kit dictionaries, and flattens
block lists back to text for gateways that have no Block Kit support.

Slack limits: section text 3000 characters, header text 150, 50 blocks
per message.
"""

import html
import re
from datetime import date
from typing import Any, Dict, List, Optional, Union

from ..models.content import ContentCategory, CuratedItem, CurationResult, DifficultyTag, category_tag


SECTION_TEXT_LIMIT = 3000
HEADER_TEXT_LIMIT = 150
MESSAGE_BLOCK_LIMIT = 50

# header, summary, divider and footer, plus a section and divider per item
MAX_ITEMS_PER_MESSAGE = (MESSAGE_BLOCK_LIMIT - 3) // 2

CATEGORY_EMOJIS = {
    ContentCategory.TECH_NEWS: "📰",
    ContentCategory.JOB_LISTINGS: "💼",
    ContentCategory.LEARNING_RESOURCES: "📚",
    ContentCategory.CAREER_ADVICE: "💡",
}
DEFAULT_EMOJI = "📌"

DIFFICULTY_EMOJIS = {
    DifficultyTag.BEGINNER: "🟢",
    DifficultyTag.ENTRY_LEVEL: "🟢",
    DifficultyTag.INTERMEDIATE: "🟡",
    DifficultyTag.JUNIOR: "🟡",
    DifficultyTag.MID_LEVEL: "🟡",
    DifficultyTag.ADVANCED: "🔴",
    DifficultyTag.SENIOR: "🔴",
}

_LINK_RE = re.compile(r"<([^<>|]+)\|([^<>]*)>")
_BOLD_RE = re.compile(r"\*([^*\n]+)\*")
_ITALIC_RE = re.compile(r"(?<!\w)_([^_\n]+)_(?!\w)")
_PLACEHOLDER_RE = re.compile("\x00(\\d+)\x00")


def escape_mrkdwn(text: str) -> str:
    """Escape &, <, > so they don't break Slack mrkdwn."""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def truncate_text(text: str, max_length: int) -> str:
    """Truncate text to max_length characters with an ellipsis."""
    if len(text) <= max_length:
        return text
    return text[:max_length - 3] + "..."


def category_title(category: Union[ContentCategory, str]) -> str:
    """``tech_news`` -> ``Tech News``."""
    parsed = ContentCategory.parse(category)
    if parsed is not None:
        return parsed.display_name
    return category_tag(category).replace("_", " ").title()


def difficulty_label(difficulty: DifficultyTag) -> str:
    emoji = DIFFICULTY_EMOJIS.get(difficulty, "")
    return f"{emoji} {difficulty.value.replace('_', ' ').title()}".strip()


def _section(text: str) -> Dict[str, Any]:
    return {
        "type": "section",
        "text": {"type": "mrkdwn", "text": truncate_text(text, SECTION_TEXT_LIMIT)},
    }


class BlockFormatter:
    """Builds Block Kit messages for curated content."""

    def __init__(self, footer_brand: str = "Second Story AI"):
        self.footer_brand = footer_brand

    def header_block(self, category: Union[ContentCategory, str]) -> Dict[str, Any]:
        emoji = CATEGORY_EMOJIS.get(ContentCategory.parse(category), DEFAULT_EMOJI)
        text = f"{emoji} {category_title(category)} - Daily Curation"
        return {
            "type": "header",
            "text": {"type": "plain_text", "text": truncate_text(text, HEADER_TEXT_LIMIT), "emoji": True},
        }

    def summary_block(self, result: CurationResult) -> Dict[str, Any]:
        text = f"*{escape_mrkdwn(result.summary)}*" if result.summary else ""
        if result.recommended_for:
            audience = escape_mrkdwn(", ".join(result.recommended_for))
            text = f"{text}\n_Recommended for: {audience}_".lstrip("\n")
        return _section(text or " ")

    def item_block(self, item: CuratedItem, index: int) -> Dict[str, Any]:
        """One numbered section for a curated item."""
        lines = [f"*{index}. <{item.url}|{escape_mrkdwn(item.title)}>*"]
        if item.description:
            lines.append(escape_mrkdwn(item.description))
        lines.append("")
        lines.append(f"_Why it's valuable:_ {escape_mrkdwn(item.why_valuable)}")
        lines.append(difficulty_label(item.difficulty))
        return _section("\n".join(lines))

    def footer_block(self, today: Optional[date] = None) -> Dict[str, Any]:
        today = today or date.today()
        return {
            "type": "context",
            "elements": [
                {
                    "type": "mrkdwn",
                    "text": (
                        f"🤖 Curated by {self.footer_brand} • {today.strftime('%m/%d/%Y')} • "
                        "Questions? Just @mention me!"
                    ),
                }
            ],
        }

    def create_blocks(self, result: CurationResult, category: Union[ContentCategory, str],
                      today: Optional[date] = None) -> List[Dict[str, Any]]:
        """Render a full curation message.

        Args:
            result: Curation output
            category: Content category for the header
            today: Date shown in the footer (default: today)

        Returns:
            Block Kit block list; the first block is always the header.
            Items past MAX_ITEMS_PER_MESSAGE are dropped so the message
            stays within Slack's block limit.
        """
        items = result.items[:MAX_ITEMS_PER_MESSAGE]
        blocks = [
            self.header_block(category),
            self.summary_block(result),
            {"type": "divider"},
        ]

        for index, item in enumerate(items, 1):
            blocks.append(self.item_block(item, index))
            if index < len(items):
                blocks.append({"type": "divider"})

        blocks.append(self.footer_block(today))
        return blocks

    def apology_blocks(self, category: Union[ContentCategory, str], message: str) -> List[Dict[str, Any]]:
        """Header plus a single apology section."""
        return [self.header_block(category), _section(message)]


def _block_text(block: Dict[str, Any]) -> str:
    block_type = block.get("type")
    if block_type in ("header", "section"):
        return (block.get("text") or {}).get("text", "")
    if block_type == "context":
        return " ".join(element.get("text", "") for element in block.get("elements", []))
    return ""


def blocks_to_text(blocks: List[Dict[str, Any]], as_html: bool = False) -> str:
    """Flatten blocks into one message body.

    Links become ``title (url)`` in plain text or ``<a href>`` tags in HTML;
    mrkdwn emphasis markers are dropped and entities unescaped.
    """
    parts = []
    for block in blocks:
        text = _block_text(block)
        if not text.strip():
            continue

        links = []

        def _stash(match):
            links.append((match.group(1), match.group(2)))
            return f"\x00{len(links) - 1}\x00"

        text = _LINK_RE.sub(_stash, text)
        text = _BOLD_RE.sub(r"\1", text)
        text = _ITALIC_RE.sub(r"\1", text)
        text = html.unescape(text)
        if as_html:
            text = html.escape(text, quote=False)

        def _restore(match):
            url, title = links[int(match.group(1))]
            title = html.unescape(title)
            if as_html:
                return f'<a href="{html.escape(url)}">{html.escape(title, quote=False)}</a>'
            return f"{title} ({url})"

        parts.append(_PLACEHOLDER_RE.sub(_restore, text))

    return "\n\n".join(parts)
