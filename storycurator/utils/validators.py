"""
StoryCurator Input Validators
=============================

Validation and sanitization for data coming from external sources: item
URLs, titles, and HTML-bearing snippets.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .exceptions import ValidationError, ErrorCode


class URLValidator:
    """URL validation utilities."""

    ALLOWED_SCHEMES = {"http", "https"}

    @classmethod
    def validate_item_url(cls, url: str) -> str:
        """Validate a content item URL.

        The URL is returned stripped but otherwise unchanged so items keep
        the identity their source gave them.

        Raises:
            ValidationError: If URL is missing, not http(s) or has no host
        """
        if not url or not isinstance(url, str):
            raise ValidationError(
                "URL is required and must be a string",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="url",
            )

        url = url.strip()
        parsed = urlparse(url)

        if parsed.scheme.lower() not in cls.ALLOWED_SCHEMES:
            raise ValidationError(
                f"URL scheme must be {' or '.join(sorted(cls.ALLOWED_SCHEMES))}",
                field_name="url",
            )

        if not parsed.netloc:
            raise ValidationError("URL must include a hostname", field_name="url")

        return url

    @classmethod
    def is_valid(cls, url: str) -> bool:
        try:
            cls.validate_item_url(url)
        except ValidationError:
            return False
        return True


class ContentValidator:
    """Content sanitization utilities."""

    MAX_TITLE_LENGTH = 500
    SNIPPET_LENGTH = 200

    _WHITESPACE = re.compile(r"\s+")

    @classmethod
    def validate_title(cls, title: Optional[str]) -> str:
        """Validate and normalize an item title.

        Raises:
            ValidationError: If title is missing or empty
        """
        if not title or not isinstance(title, str):
            raise ValidationError(
                "Title is required",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="title",
            )

        title = cls._WHITESPACE.sub(" ", title).strip()
        if not title:
            raise ValidationError(
                "Title cannot be empty",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="title",
            )

        return title[: cls.MAX_TITLE_LENGTH]

    @classmethod
    def clean_snippet(cls, raw: Optional[str], max_length: int = SNIPPET_LENGTH) -> Optional[str]:
        """Strip markup from a description and cap its length.

        Args:
            raw: Text or HTML from the source
            max_length: Maximum characters to keep

        Returns:
            Plain text snippet, or None if nothing remains
        """
        if not raw or not isinstance(raw, str):
            return None

        if "<" in raw and ">" in raw:
            soup = BeautifulSoup(raw, "html.parser")
            for tag in soup(["script", "style"]):
                tag.decompose()
            text = soup.get_text(separator=" ", strip=True)
        else:
            text = raw

        text = cls._WHITESPACE.sub(" ", text).strip()
        if not text:
            return None

        return text[:max_length]
