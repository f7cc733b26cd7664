"""
OpenAI Provider Implementation
==============================

OpenAI chat-completion backend for curation.
"""

from typing import Optional

import openai
from openai import AsyncOpenAI

from .base import AIProvider, AIError, AIProviderType
from ...utils.exceptions import ErrorCode
from ...utils.logging import get_logger_for_component


class OpenAIProvider(AIProvider):
    """OpenAI provider using the async client."""

    def __init__(self, api_key: str, model_name: str = "gpt-4o-mini",
                 temperature: float = 0.2, base_url: Optional[str] = None):
        if not api_key:
            raise AIError(
                "OpenAI API key is required",
                provider="openai",
                error_code=ErrorCode.AI_AUTHENTICATION
            )

        super().__init__(api_key, model_name, AIProviderType.OPENAI, temperature)

        self.async_client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self.logger = get_logger_for_component("openai_provider")
        self.logger.info(f"OpenAI provider initialized with model: {model_name}")

    async def complete(self, prompt: str, max_tokens: int = 2000) -> str:
        try:
            response = await self.async_client.chat.completions.create(
                model=self.model_name,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=max_tokens,
                temperature=self.temperature,
            )

        except openai.RateLimitError as e:
            self.logger.warning(f"OpenAI rate limit exceeded: {e}")
            raise AIError(
                f"OpenAI rate limit exceeded: {e}",
                provider="openai",
                error_code=ErrorCode.AI_RATE_LIMIT
            )

        except openai.APIConnectionError as e:
            self.logger.error(f"OpenAI connection error: {e}")
            raise AIError(
                f"Connection to OpenAI failed: {e}",
                provider="openai",
                error_code=ErrorCode.AI_CONNECTION_ERROR
            )

        except openai.APIStatusError as e:
            self.logger.error(f"OpenAI API error: {e.status_code} - {e.message}")
            if e.status_code == 401:
                raise AIError(
                    "Invalid OpenAI API key",
                    provider="openai",
                    error_code=ErrorCode.AI_AUTHENTICATION
                )
            raise AIError(
                f"OpenAI API error: {e.status_code} - {e.message}",
                provider="openai",
                error_code=ErrorCode.AI_API_ERROR
            )

        text = self._extract_text(response)
        if not text:
            raise AIError(
                "OpenAI returned an empty completion",
                provider="openai",
                error_code=ErrorCode.AI_INVALID_RESPONSE
            )
        return text
