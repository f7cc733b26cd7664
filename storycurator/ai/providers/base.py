"""
Base AI Provider Interface
=========================

Abstract base class for the text-completion backends used by curation.
A provider turns one prompt into one reply string; parsing the reply is
the curator's job.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ...config.settings import AIProvider as AIProviderType
from ...utils.exceptions import CurationUnavailableError, ErrorCode


class AIError(CurationUnavailableError):
    """AI call specific error."""

    def __init__(self, message: str, provider: str, error_code: ErrorCode = None):
        super().__init__(message, provider=provider,
                         error_code=error_code or ErrorCode.AI_API_ERROR)
        self.provider = provider


class AIProvider(ABC):
    """Abstract base class for AI provider implementations."""

    def __init__(self, api_key: str, model_name: str, provider_type: AIProviderType,
                 temperature: float = 0.2):
        """Initialize AI provider.

        Args:
            api_key: API key for the provider
            model_name: Model to use for requests
            provider_type: Type of provider
            temperature: Sampling temperature
        """
        self.api_key = api_key
        self.model_name = model_name
        self.provider_type = provider_type
        self.temperature = temperature

    @abstractmethod
    async def complete(self, prompt: str, max_tokens: int = 2000) -> str:
        """Send one prompt and return the reply text.

        Args:
            prompt: Full prompt text
            max_tokens: Reply token ceiling

        Returns:
            Raw reply text

        Raises:
            AIError: If the call fails
        """
        pass

    async def test_connection(self) -> bool:
        """Probe the API with a tiny request.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            reply = await self.complete("Respond with exactly: 'Connection test successful'", max_tokens=10)
            return "successful" in reply.lower()
        except AIError:
            return False

    @staticmethod
    def _extract_text(response) -> Optional[str]:
        """Pull the first choice's content out of a chat completion response."""
        choices = getattr(response, "choices", None)
        if not choices:
            return None
        return choices[0].message.content

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model_name!r})"
