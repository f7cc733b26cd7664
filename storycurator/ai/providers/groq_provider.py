"""
Groq AI Provider Implementation
==============================

Groq chat-completion backend for curation.
"""

import groq
from groq import AsyncGroq

from .base import AIProvider, AIError, AIProviderType
from ...utils.exceptions import ErrorCode
from ...utils.logging import get_logger_for_component


class GroqProvider(AIProvider):
    """Groq AI provider with async client and mapped errors."""

    def __init__(self, api_key: str, model_name: str = "llama-3.3-70b-versatile",
                 temperature: float = 0.2):
        """Initialize Groq provider.

        Args:
            api_key: Groq API key
            model_name: Model to use
            temperature: Sampling temperature

        Raises:
            AIError: If the API key is missing
        """
        if not api_key:
            raise AIError(
                "Groq API key is required",
                provider="groq",
                error_code=ErrorCode.AI_AUTHENTICATION
            )

        super().__init__(api_key, model_name, AIProviderType.GROQ, temperature)

        self.async_client = AsyncGroq(api_key=api_key)
        self.logger = get_logger_for_component("groq_provider")
        self.logger.info(f"Groq provider initialized with model: {model_name}")

    async def complete(self, prompt: str, max_tokens: int = 2000) -> str:
        try:
            self.logger.debug(f"Requesting completion ({len(prompt)} chars of prompt)")
            response = await self.async_client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=self.temperature,
            )

        except groq.RateLimitError as e:
            self.logger.warning(f"Groq rate limit exceeded: {e}")
            raise AIError(
                f"Groq rate limit exceeded: {e}",
                provider="groq",
                error_code=ErrorCode.AI_RATE_LIMIT
            )

        except groq.APIConnectionError as e:
            self.logger.error(f"Groq connection error: {e}")
            raise AIError(
                f"Connection to Groq failed: {e}",
                provider="groq",
                error_code=ErrorCode.AI_CONNECTION_ERROR
            )

        except groq.APIStatusError as e:
            self.logger.error(f"Groq API error: {e.status_code} - {e.message}")
            if e.status_code == 401:
                raise AIError(
                    "Invalid Groq API key",
                    provider="groq",
                    error_code=ErrorCode.AI_AUTHENTICATION
                )
            raise AIError(
                f"Groq API error: {e.status_code} - {e.message}",
                provider="groq",
                error_code=ErrorCode.AI_API_ERROR
            )

        text = self._extract_text(response)
        if not text:
            raise AIError(
                "Groq returned an empty completion",
                provider="groq",
                error_code=ErrorCode.AI_INVALID_RESPONSE
            )
        return text
