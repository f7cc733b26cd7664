"""
AI Providers Unit Tests
=======================

Provider construction and error mapping without real API keys.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import groq
import pytest

from storycurator.ai import create_provider
from storycurator.ai.providers import AIError, GroqProvider, OpenAIProvider
from storycurator.config.settings import AIProvider as ConfigAIProvider, AISettings
from storycurator.utils.exceptions import CurationUnavailableError, ErrorCode


def _completion(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _status_error(status):
    request = httpx.Request("POST", "https://api.groq.com/openai/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return groq.APIStatusError(f"status {status}", response=response, body=None)


class TestGroqProvider:
    """Test suite for GroqProvider."""

    @pytest.fixture
    def provider(self):
        provider = GroqProvider("test-key", "llama-3.3-70b-versatile")
        provider.async_client = MagicMock()
        provider.async_client.chat.completions.create = AsyncMock()
        return provider

    @pytest.mark.asyncio
    async def test_complete_returns_text(self, provider):
        provider.async_client.chat.completions.create.return_value = _completion('{"items": []}')

        text = await provider.complete("prompt", max_tokens=2000)

        assert text == '{"items": []}'
        kwargs = provider.async_client.chat.completions.create.await_args.kwargs
        assert kwargs["model"] == "llama-3.3-70b-versatile"
        assert kwargs["max_tokens"] == 2000
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    @pytest.mark.asyncio
    async def test_auth_error_mapped(self, provider):
        provider.async_client.chat.completions.create.side_effect = _status_error(401)

        with pytest.raises(AIError) as exc_info:
            await provider.complete("prompt")

        assert exc_info.value.error_code == ErrorCode.AI_AUTHENTICATION
        assert isinstance(exc_info.value, CurationUnavailableError)

    @pytest.mark.asyncio
    async def test_server_error_mapped(self, provider):
        provider.async_client.chat.completions.create.side_effect = _status_error(503)

        with pytest.raises(AIError) as exc_info:
            await provider.complete("prompt")

        assert exc_info.value.error_code == ErrorCode.AI_API_ERROR
        assert exc_info.value.context["ai_provider"] == "groq"
        assert not hasattr(exc_info.value, "retryable")

    @pytest.mark.asyncio
    async def test_connection_error_mapped(self, provider):
        request = httpx.Request("POST", "https://api.groq.com")
        provider.async_client.chat.completions.create.side_effect = groq.APIConnectionError(request=request)

        with pytest.raises(AIError) as exc_info:
            await provider.complete("prompt")

        assert exc_info.value.error_code == ErrorCode.AI_CONNECTION_ERROR

    @pytest.mark.asyncio
    async def test_empty_completion_rejected(self, provider):
        provider.async_client.chat.completions.create.return_value = _completion("")

        with pytest.raises(AIError) as exc_info:
            await provider.complete("prompt")

        assert exc_info.value.error_code == ErrorCode.AI_INVALID_RESPONSE

    @pytest.mark.asyncio
    async def test_connection_check(self, provider):
        provider.async_client.chat.completions.create.return_value = _completion("Connection test successful")
        assert await provider.test_connection() is True

    def test_requires_api_key(self):
        with pytest.raises(AIError):
            GroqProvider("")


class TestCreateProvider:
    def test_groq_default(self):
        provider = create_provider(AISettings(groq_api_key="gsk-test"))
        assert isinstance(provider, GroqProvider)
        assert provider.model_name == "llama-3.3-70b-versatile"

    def test_openai(self):
        provider = create_provider(AISettings(provider=ConfigAIProvider.OPENAI, openai_api_key="sk-test",
                                              openai_model="gpt-4o"))
        assert isinstance(provider, OpenAIProvider)
        assert provider.model_name == "gpt-4o"

    def test_openai_compatible_endpoint(self):
        provider = create_provider(AISettings(provider=ConfigAIProvider.OPENAI, openai_api_key="sk-test",
                                              openai_base_url="http://localhost:8080/v1"))
        assert "localhost:8080/v1" in str(provider.async_client.base_url)

    def test_missing_key_means_no_provider(self):
        assert create_provider(AISettings(groq_api_key=None)) is None
