"""
StoryCurator Custom Exceptions
==============================

Exception hierarchy for the content pipeline with error codes, context
information, and user-friendly messages.

Most of these never reach a caller: source, curation and publish errors are
raised inside a component and collapsed at that component's boundary.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Source errors (S101-S199)
    SOURCE_NETWORK_ERROR = "S101"
    SOURCE_TIMEOUT = "S102"
    SOURCE_HTTP_STATUS = "S103"
    SOURCE_PARSE_ERROR = "S104"

    # Curation errors (A001-A099)
    AI_API_ERROR = "A001"
    AI_TIMEOUT = "A002"
    AI_RATE_LIMIT = "A003"
    AI_AUTHENTICATION = "A004"
    AI_CONNECTION_ERROR = "A005"
    AI_INVALID_RESPONSE = "A006"

    # Publishing errors (L001-L099)
    PUBLISH_FAILED = "L001"
    PUBLISH_REJECTED = "L002"
    PUBLISH_TIMEOUT = "L003"

    # Ledger errors (D001-D099)
    LEDGER_ERROR = "D001"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"
    VALIDATION_OUT_OF_RANGE = "V003"


class StoryCuratorError(Exception):
    """Base exception for all StoryCurator errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize StoryCurator error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(StoryCuratorError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.pop("user_message", f"Configuration error: {message}"),
            **kwargs,
        )


class SourceUnavailableError(StoryCuratorError):
    """A content source could not be fetched or parsed.

    Raised inside a source adapter and converted to an empty result at the
    adapter boundary.
    """

    def __init__(self, message: str, source_url: Optional[str] = None, **kwargs):
        """Initialize source error.

        Args:
            message: Error message
            source_url: URL of the failing source
            **kwargs: Additional arguments for StoryCuratorError
        """
        context = kwargs.pop("context", {})
        if source_url:
            context["source_url"] = source_url

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.SOURCE_NETWORK_ERROR),
            context=context,
            user_message=kwargs.pop("user_message", "Content source unavailable"),
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class CurationUnavailableError(StoryCuratorError):
    """The AI curation call failed (network, rate limit, auth, timeout)."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if provider:
            context["ai_provider"] = provider

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.AI_API_ERROR),
            context=context,
            user_message=kwargs.pop(
                "user_message", "AI curation temporarily unavailable"
            ),
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class CurationMalformedError(StoryCuratorError):
    """The AI response did not parse as a curation result."""

    def __init__(self, message: str, response_excerpt: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if response_excerpt:
            context["response_excerpt"] = response_excerpt[:200]

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.AI_INVALID_RESPONSE),
            context=context,
            user_message=kwargs.pop("user_message", "AI returned an unusable answer"),
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class PublishError(StoryCuratorError):
    """Messaging gateway errors."""

    def __init__(self, message: str, channel_id: Optional[str] = None, **kwargs):
        """Initialize publish error.

        Args:
            message: Error message
            channel_id: Channel where posting failed
            **kwargs: Additional arguments for StoryCuratorError
        """
        context = kwargs.pop("context", {})
        if channel_id:
            context["channel_id"] = channel_id

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.PUBLISH_FAILED),
            context=context,
            user_message=kwargs.pop("user_message", "Content delivery failed"),
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class LedgerError(StoryCuratorError):
    """Posting ledger read/write errors."""

    def __init__(self, message: str, **kwargs):
        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.LEDGER_ERROR),
            user_message=kwargs.pop("user_message", "Posting history unavailable"),
            recoverable=kwargs.pop("recoverable", True),
            **kwargs,
        )


class ValidationError(StoryCuratorError):
    """Data validation errors."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            user_message=kwargs.pop(
                "user_message", f"Invalid {field_name or 'input'}: {message}"
            ),
            recoverable=kwargs.pop("recoverable", False),
            **kwargs,
        )


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, StoryCuratorError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."
