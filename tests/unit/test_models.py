"""
Data Model Tests
================
"""

import pytest
from pydantic import ValidationError

from storycurator.models.content import (
    ContentCategory,
    CuratedItem,
    CurationResult,
    DifficultyTag,
    RawContentItem,
    category_tag,
)


class TestContentCategory:
    def test_parse(self):
        assert ContentCategory.parse("tech_news") is ContentCategory.TECH_NEWS
        assert ContentCategory.parse(" Job_Listings ") is ContentCategory.JOB_LISTINGS
        assert ContentCategory.parse("podcasts") is None

    def test_display_forms(self):
        assert ContentCategory.LEARNING_RESOURCES.readable == "learning resources"
        assert ContentCategory.LEARNING_RESOURCES.display_name == "Learning Resources"
        assert "Entry-level" in ContentCategory.JOB_LISTINGS.default_criteria

    def test_category_tag(self):
        assert category_tag(ContentCategory.CAREER_ADVICE) == "career_advice"
        assert category_tag("anything_else") == "anything_else"


class TestDifficultyTag:
    @pytest.mark.parametrize("raw,expected", [
        ("beginner", DifficultyTag.BEGINNER),
        ("Entry Level", DifficultyTag.ENTRY_LEVEL),
        ("mid-level", DifficultyTag.MID_LEVEL),
        ("  SENIOR ", DifficultyTag.SENIOR),
        ("expert", None),
        (3, None),
    ])
    def test_normalize(self, raw, expected):
        assert DifficultyTag.normalize(raw) == expected


class TestItems:
    def test_raw_item_aliases_and_tags(self):
        item = RawContentItem.model_validate({
            "title": "T",
            "url": "https://example.com",
            "publishedAt": "2024-01-01",
            "tags": "python, beginners ,",
        })
        assert item.published_at == "2024-01-01"
        assert item.tags == ["python", "beginners"]
        assert item.prompt_dict()["publishedAt"] == "2024-01-01"
        assert "description" not in item.prompt_dict()

    def test_curated_item_from_ai_payload(self):
        item = CuratedItem.model_validate({
            "title": "T",
            "url": "https://example.com",
            "whyValuable": "  Useful  ",
            "difficulty": "Junior",
            "recommendedFor": "job seekers",
        })
        assert item.why_valuable == "Useful"
        assert item.difficulty == DifficultyTag.JUNIOR
        assert item.recommended_for == ["job seekers"]

    @pytest.mark.parametrize("payload", [
        {"title": "T", "url": "https://example.com", "whyValuable": "x", "difficulty": "guru"},
        {"title": "T", "url": "https://example.com", "whyValuable": "   ", "difficulty": "beginner"},
        {"title": "", "url": "https://example.com", "whyValuable": "x", "difficulty": "beginner"},
    ])
    def test_curated_item_rejects_bad_payloads(self, payload):
        with pytest.raises(ValidationError):
            CuratedItem.model_validate(payload)

    def test_empty_result_defaults(self):
        result = CurationResult()
        assert result.items == []
        assert result.summary == ""
        assert result.recommended_for == []
