"""
Content Curator
===============

Turns a raw item batch into a curated result with one AI completion call.
Any failure along the way (provider error, timeout, malformed reply)
degrades to a deterministic fallback, so ``curate_content`` never raises.
"""

import asyncio
import json
import re
from typing import Dict, List, Optional, Union

from pydantic import ValidationError

from ..ai.providers.base import AIProvider
from ..models.content import (
    ContentCategory,
    CuratedItem,
    CurationResult,
    DifficultyTag,
    RawContentItem,
    category_tag,
)
from ..utils.exceptions import CurationMalformedError
from ..utils.logging import get_logger_for_component, PerformanceLogger


FALLBACK_WHY_VALUABLE = "Potentially relevant for learning journey"
FALLBACK_AUDIENCE = ["All learners"]

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.DOTALL)

PROMPT_TEMPLATE = """You are curating {readable} ({tag}) for justice-impacted individuals learning to code in a supportive community program.

Content to evaluate:
{items_json}

Criteria: {criteria}

Please:
1. Select at most {max_items} of the most relevant and valuable items from the list above
2. Rank them by relevance to our learners
3. Explain why each is valuable
4. Assign a difficulty level to each item
5. Suggest who would benefit most

Consider:
- Accessibility for beginners and career changers
- Practical application and real-world relevance
- Skills that lead to employment

Use only URLs that appear in the content above. Difficulty must be one of:
{difficulties}.

Respond with ONLY a JSON object with this structure:
{{
  "items": [
    {{
      "title": "string",
      "url": "string",
      "description": "string",
      "whyValuable": "string",
      "difficulty": "beginner",
      "recommendedFor": ["week 1-4", "job seekers"]
    }}
  ],
  "summary": "Brief overview of this content collection",
  "recommendedFor": ["specific learner groups who would benefit"]
}}"""


def _readable(category: Union[ContentCategory, str]) -> str:
    parsed = ContentCategory.parse(category)
    if parsed is not None:
        return parsed.readable
    return category_tag(category).replace("_", " ")


def build_prompt(items: List[RawContentItem], category: Union[ContentCategory, str],
                 criteria: Optional[str] = None) -> str:
    """Render the curation prompt for one batch."""
    if not criteria:
        parsed = ContentCategory.parse(category)
        criteria = parsed.default_criteria if parsed else "Relevant for new developers"

    return PROMPT_TEMPLATE.format(
        readable=_readable(category),
        tag=category_tag(category),
        items_json=json.dumps([item.prompt_dict() for item in items], indent=2, ensure_ascii=False),
        criteria=criteria,
        max_items=len(items),
        difficulties=", ".join(tag.value for tag in DifficultyTag),
    )


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if any."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def _load_response_object(text: str) -> dict:
    """Decode the reply into a JSON object or raise CurationMalformedError."""
    body = strip_code_fences(text or "")
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError) as e:
        raise CurationMalformedError(f"Reply is not JSON: {e}", response_excerpt=body)

    if not isinstance(data, dict):
        raise CurationMalformedError(
            f"Reply is a JSON {type(data).__name__}, expected an object",
            response_excerpt=body,
        )
    return data


def parse_curation_response(text: str, items: List[RawContentItem]) -> Optional[CurationResult]:
    """Validate an AI reply against the input batch.

    Args:
        text: Raw reply text
        items: The batch that was sent in the prompt

    Returns:
        A result containing only items from the batch, or None when the
        reply cannot be used
    """
    logger = get_logger_for_component("curator")

    try:
        parsed = CurationResult.model_validate(_load_response_object(text))
    except CurationMalformedError as e:
        logger.warning(f"Discarding curation reply: {e}")
        return None
    except ValidationError as e:
        logger.warning(f"Curation reply failed validation: {e.error_count()} errors")
        return None

    by_url: Dict[str, RawContentItem] = {item.url: item for item in items}
    kept: List[CuratedItem] = []
    seen = set()

    for selected in parsed.items:
        original = by_url.get(selected.url)
        if original is None:
            logger.debug(f"Dropping curated item with unknown URL: {selected.url}")
            continue
        if selected.url in seen:
            continue
        seen.add(selected.url)

        kept.append(selected.model_copy(update={
            "source": original.source,
            "tags": list(original.tags),
            "published_at": original.published_at,
        }))

    return CurationResult(
        items=kept[:len(items)],
        summary=parsed.summary,
        recommended_for=parsed.recommended_for,
    )


def fallback_curation(items: List[RawContentItem], category: Union[ContentCategory, str]) -> CurationResult:
    """Wrap every input item unchanged, in order, with default annotations."""
    return CurationResult(
        items=[
            CuratedItem.from_raw(
                item,
                why_valuable=FALLBACK_WHY_VALUABLE,
                difficulty=DifficultyTag.BEGINNER,
                recommended_for=[],
            )
            for item in items
        ],
        summary=f"Top {category_tag(category)} items",
        recommended_for=list(FALLBACK_AUDIENCE),
    )


class ContentCurator:
    """AI-backed curation with a deterministic fallback."""

    def __init__(self, provider: Optional[AIProvider], max_tokens: int = 2000,
                 timeout: float = 45.0):
        """Initialize curator.

        Args:
            provider: Completion backend; None forces the fallback path
            max_tokens: Token ceiling for the single completion call
            timeout: Seconds before the call counts as failed
        """
        self.provider = provider
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.logger = get_logger_for_component("curator")

    async def curate_content(self, items: List[RawContentItem],
                             category: Union[ContentCategory, str],
                             criteria: Optional[str] = None) -> CurationResult:
        """Curate a batch with one AI call, falling back on any failure."""
        if not items:
            return fallback_curation([], category)

        if self.provider is None:
            self.logger.info("No AI provider configured, using fallback curation")
            return fallback_curation(items, category)

        try:
            prompt = build_prompt(items, category, criteria)
            with PerformanceLogger(self.logger, "curation",
                                   category=category_tag(category), items=len(items)):
                reply = await asyncio.wait_for(
                    self.provider.complete(prompt, max_tokens=self.max_tokens),
                    timeout=self.timeout,
                )
        except asyncio.TimeoutError:
            self.logger.warning(f"Curation timed out after {self.timeout}s, using fallback")
            return fallback_curation(items, category)
        except Exception as e:
            self.logger.warning(f"Curation call failed, using fallback: {e}")
            return fallback_curation(items, category)

        result = parse_curation_response(reply, items)
        if result is None:
            return fallback_curation(items, category)

        self.logger.info(f"Curated {len(result.items)} of {len(items)} {category_tag(category)} items")
        return result
