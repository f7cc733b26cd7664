"""
StoryCurator Data Models
========================

Pydantic models for the items that flow through the pipeline. Items are
produced fresh on every fetch and never persisted here.

Field names are snake_case in Python; the camelCase names used in the AI
prompt and response (``whyValuable``, ``recommendedFor``, ``publishedAt``)
are accepted as aliases.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ContentCategory(str, Enum):
    """Fixed content categories; each selects its own sources and AI framing."""

    TECH_NEWS = "tech_news"
    JOB_LISTINGS = "job_listings"
    LEARNING_RESOURCES = "learning_resources"
    CAREER_ADVICE = "career_advice"

    @property
    def readable(self) -> str:
        """Lower-case human form, e.g. ``tech news``."""
        return self.value.replace("_", " ")

    @property
    def display_name(self) -> str:
        """Title-cased form used in message headers, e.g. ``Tech News``."""
        return self.readable.title()

    @property
    def default_criteria(self) -> str:
        return _DEFAULT_CRITERIA[self]

    @classmethod
    def parse(cls, value: object) -> Optional["ContentCategory"]:
        """Look up a category by tag; None for unknown tags."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


_DEFAULT_CRITERIA = {
    ContentCategory.TECH_NEWS: "Beginner-friendly tech news, practical for new developers, encouraging",
    ContentCategory.JOB_LISTINGS: "Entry-level and junior developer positions, remote-friendly, skills-based",
    ContentCategory.LEARNING_RESOURCES: "Beginner to intermediate coding tutorials, practical projects, career-relevant",
    ContentCategory.CAREER_ADVICE: "Job search tips, interview preparation, career growth for new developers",
}


class DifficultyTag(str, Enum):
    """Closed difficulty vocabulary shared by content and job items."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    ENTRY_LEVEL = "entry_level"
    JUNIOR = "junior"
    MID_LEVEL = "mid_level"
    SENIOR = "senior"

    @classmethod
    def normalize(cls, value: object) -> Optional["DifficultyTag"]:
        """Map loose spellings (``"Entry Level"``, ``"mid-level"``) onto the vocabulary.

        Returns None when the value is not in the vocabulary.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None

        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return None


class RawContentItem(BaseModel):
    """A normalized item from any source."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, description="Item title")
    url: str = Field(..., min_length=1, description="Canonical link to the item")
    description: Optional[str] = Field(default=None, description="Short plain-text snippet")
    published_at: Optional[str] = Field(
        default=None, alias="publishedAt", description="Publish time as given by the source"
    )
    source: str = Field(default="", description="Source label for traceability")
    tags: List[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def coerce_tags(cls, v):
        """Sources send tags as lists, comma strings or null."""
        if v is None:
            return []
        if isinstance(v, str):
            return [t.strip() for t in v.split(",") if t.strip()]
        if isinstance(v, (list, tuple)):
            return [str(t) for t in v if t is not None and str(t).strip()]
        return []

    def prompt_dict(self) -> dict:
        """Serialize with the camelCase names the AI prompt uses."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def __str__(self) -> str:
        return f"RawContentItem({self.title[:50]})"


class CuratedItem(RawContentItem):
    """A raw item annotated by curation."""

    why_valuable: str = Field(..., alias="whyValuable")
    difficulty: DifficultyTag
    recommended_for: List[str] = Field(default_factory=list, alias="recommendedFor")

    @field_validator("difficulty", mode="before")
    @classmethod
    def validate_difficulty(cls, v):
        tag = DifficultyTag.normalize(v)
        if tag is None:
            raise ValueError(f"difficulty {v!r} is not in the fixed vocabulary")
        return tag

    @field_validator("why_valuable")
    @classmethod
    def validate_why_valuable(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("whyValuable cannot be empty")
        return v

    @field_validator("recommended_for", mode="before")
    @classmethod
    def coerce_recommended_for(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    @classmethod
    def from_raw(
        cls,
        item: RawContentItem,
        why_valuable: str,
        difficulty: DifficultyTag,
        recommended_for: Optional[List[str]] = None,
    ) -> "CuratedItem":
        return cls(
            **item.model_dump(),
            why_valuable=why_valuable,
            difficulty=difficulty,
            recommended_for=list(recommended_for or []),
        )


class CurationResult(BaseModel):
    """Output of one curation pass."""

    model_config = ConfigDict(populate_by_name=True)

    items: List[CuratedItem] = Field(default_factory=list)
    summary: str = Field(default="")
    recommended_for: List[str] = Field(default_factory=list, alias="recommendedFor")

    @field_validator("recommended_for", mode="before")
    @classmethod
    def coerce_recommended_for(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v


def category_tag(category: object) -> str:
    """Raw tag for a category given as enum member or string."""
    if isinstance(category, ContentCategory):
        return category.value
    return str(category)
