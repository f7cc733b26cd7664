"""
Content Curator Tests
=====================

AI curation happy path, the parse boundary, and the deterministic fallback.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from storycurator.ai.providers.base import AIError
from storycurator.models.content import ContentCategory, DifficultyTag
from storycurator.processing.curator import (
    ContentCurator,
    build_prompt,
    fallback_curation,
    parse_curation_response,
    strip_code_fences,
)
from storycurator.utils.exceptions import ErrorCode


def _provider(reply=None, error=None):
    provider = MagicMock()
    provider.complete = AsyncMock(return_value=reply, side_effect=error)
    return provider


def _reply(items, summary="Great picks", recommended_for=None):
    return json.dumps({
        "items": items,
        "summary": summary,
        "recommendedFor": recommended_for or ["week 1-4"],
    })


class TestCurateContent:
    """Test suite for ContentCurator.curate_content."""

    @pytest.mark.asyncio
    async def test_happy_path(self, sample_items):
        reply = _reply([
            {
                "title": "CSS Grid Tutorial",
                "url": "https://example.com/css-grid",
                "description": "Learn grid",
                "whyValuable": "Layouts are a core frontend skill",
                "difficulty": "beginner",
                "recommendedFor": ["week 1-4"],
            },
            {
                "title": "Dev.to Article",
                "url": "https://dev.to/test/article",
                "whyValuable": "Shows testing habits",
                "difficulty": "Intermediate",
            },
        ])
        provider = _provider(reply)
        curator = ContentCurator(provider, max_tokens=2000)

        result = await curator.curate_content(sample_items, ContentCategory.LEARNING_RESOURCES)

        provider.complete.assert_awaited_once()
        assert provider.complete.await_args.kwargs["max_tokens"] == 2000
        assert [item.url for item in result.items] == [
            "https://example.com/css-grid",
            "https://dev.to/test/article",
        ]
        assert result.items[1].difficulty == DifficultyTag.INTERMEDIATE
        assert result.summary == "Great picks"
        assert result.recommended_for == ["week 1-4"]

    @pytest.mark.asyncio
    async def test_provider_error_falls_back(self, sample_items):
        provider = _provider(error=AIError("rate limited", provider="groq",
                                           error_code=ErrorCode.AI_RATE_LIMIT))

        result = await ContentCurator(provider).curate_content(sample_items, "tech_news")

        assert len(result.items) == len(sample_items)
        assert [item.url for item in result.items] == [item.url for item in sample_items]
        assert all(item.why_valuable == "Potentially relevant for learning journey" for item in result.items)
        assert all(item.difficulty == DifficultyTag.BEGINNER for item in result.items)
        assert result.summary == "Top tech_news items"
        assert result.recommended_for == ["All learners"]

    @pytest.mark.asyncio
    async def test_unexpected_exception_falls_back(self, sample_items):
        provider = _provider(error=RuntimeError("boom"))
        result = await ContentCurator(provider).curate_content(sample_items, ContentCategory.TECH_NEWS)
        assert result.summary == "Top tech_news items"

    @pytest.mark.asyncio
    async def test_invalid_json_falls_back(self, sample_items):
        provider = _provider("Here are my picks: definitely the first one!")

        result = await ContentCurator(provider).curate_content(sample_items, ContentCategory.TECH_NEWS)

        assert len(result.items) == 3
        assert result.summary == "Top tech_news items"

    @pytest.mark.asyncio
    async def test_empty_input_skips_provider(self):
        provider = _provider(_reply([]))

        result = await ContentCurator(provider).curate_content([], ContentCategory.TECH_NEWS)

        provider.complete.assert_not_called()
        assert result.items == []
        assert result.summary == "Top tech_news items"
        assert result.recommended_for == ["All learners"]

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, sample_items):
        async def never_answers(prompt, max_tokens):
            await asyncio.sleep(5)

        provider = MagicMock()
        provider.complete = AsyncMock(side_effect=never_answers)

        result = await ContentCurator(provider, timeout=0.05).curate_content(
            sample_items, ContentCategory.TECH_NEWS
        )

        assert len(result.items) == 3
        assert result.items[0].why_valuable == "Potentially relevant for learning journey"

    @pytest.mark.asyncio
    async def test_no_provider_uses_fallback(self, sample_items):
        result = await ContentCurator(None).curate_content(sample_items, ContentCategory.CAREER_ADVICE)
        assert result.summary == "Top career_advice items"

    @pytest.mark.asyncio
    async def test_out_of_vocabulary_difficulty_falls_back(self, sample_items):
        provider = _provider(_reply([
            {
                "title": "Dev.to Article",
                "url": "https://dev.to/test/article",
                "whyValuable": "Good",
                "difficulty": "expert",
            }
        ]))

        result = await ContentCurator(provider).curate_content(sample_items, ContentCategory.TECH_NEWS)

        assert result.summary == "Top tech_news items"
        assert all(item.difficulty == DifficultyTag.BEGINNER for item in result.items)

    @pytest.mark.asyncio
    async def test_explicit_criteria_reach_prompt(self, sample_items):
        provider = _provider(_reply([]))

        await ContentCurator(provider).curate_content(
            sample_items, ContentCategory.JOB_LISTINGS, "Focus on roles matching: python"
        )

        prompt = provider.complete.await_args.args[0]
        assert "Focus on roles matching: python" in prompt


class TestParseCurationResponse:
    """Test suite for the parse boundary."""

    def test_fenced_json_accepted(self, sample_items):
        text = "```json\n" + _reply([
            {"title": "CSS Grid Tutorial", "url": "https://example.com/css-grid",
             "whyValuable": "Useful", "difficulty": "beginner"}
        ]) + "\n```"

        result = parse_curation_response(text, sample_items)

        assert result is not None
        assert len(result.items) == 1

    def test_unknown_urls_dropped(self, sample_items):
        result = parse_curation_response(_reply([
            {"title": "Invented", "url": "https://made-up.example.com/", "whyValuable": "x", "difficulty": "beginner"},
            {"title": "CSS Grid Tutorial", "url": "https://example.com/css-grid",
             "whyValuable": "Useful", "difficulty": "beginner"},
        ]), sample_items)

        assert [item.url for item in result.items] == ["https://example.com/css-grid"]

    def test_duplicates_dropped_and_size_bounded(self, sample_items):
        entry = {"title": "CSS Grid Tutorial", "url": "https://example.com/css-grid",
                 "whyValuable": "Useful", "difficulty": "beginner"}

        result = parse_curation_response(_reply([entry] * 10), sample_items)

        assert len(result.items) == 1
        assert len(result.items) <= len(sample_items)

    def test_source_fields_come_from_input(self, sample_items):
        result = parse_curation_response(_reply([
            {"title": "Dev.to Article", "url": "https://dev.to/test/article", "whyValuable": "x",
             "difficulty": "beginner", "source": "Somewhere Else", "tags": ["spam"]}
        ]), sample_items)

        item = result.items[0]
        assert item.source == "Dev.to"
        assert item.tags == ["testing", "beginners"]
        assert item.published_at == "2024-01-01T00:00:00Z"

    def test_difficulty_spellings_normalized(self, job_items):
        result = parse_curation_response(_reply([
            {"title": "Junior Python Developer at Acme", "url": "https://remoteok.io/remote-jobs/1",
             "whyValuable": "Entry role", "difficulty": "Entry Level"},
            {"title": "Frontend Developer at Globex", "url": "https://remoteok.io/remote-jobs/3",
             "whyValuable": "Mid role", "difficulty": "mid-level"},
        ]), job_items)

        assert [item.difficulty for item in result.items] == [DifficultyTag.ENTRY_LEVEL, DifficultyTag.MID_LEVEL]

    @pytest.mark.parametrize("text", [
        "",
        "not json",
        "[1, 2, 3]",
        '{"items": "not a list"}',
        '{"items": [{"url": "https://example.com/css-grid", "difficulty": "beginner"}]}',
    ])
    def test_unusable_replies_rejected(self, sample_items, text):
        assert parse_curation_response(text, sample_items) is None

    def test_strip_code_fences(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


class TestFallbackAndPrompt:
    """Fallback curation and prompt construction."""

    def test_fallback_preserves_order_and_fields(self, sample_items):
        result = fallback_curation(sample_items, ContentCategory.LEARNING_RESOURCES)

        assert [item.title for item in result.items] == [item.title for item in sample_items]
        assert result.items[0].source == "Dev.to"
        assert result.items[0].recommended_for == []
        assert result.summary == "Top learning_resources items"

    def test_prompt_embeds_category_criteria_and_items(self, sample_items):
        prompt = build_prompt(sample_items, ContentCategory.TECH_NEWS)

        assert "tech news" in prompt
        assert "tech_news" in prompt
        assert ContentCategory.TECH_NEWS.default_criteria in prompt
        assert "https://example.com/css-grid" in prompt
        assert "at most 3" in prompt
        assert "entry_level" in prompt
