from .content import (
    ContentCategory,
    DifficultyTag,
    RawContentItem,
    CuratedItem,
    CurationResult,
    category_tag,
)

__all__ = [
    "ContentCategory",
    "DifficultyTag",
    "RawContentItem",
    "CuratedItem",
    "CurationResult",
    "category_tag",
]
